from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport

from booking_platform import create_payment_app
from booking_platform.apis.deps import get_payment_db
from booking_platform.configs.settings import settings
from booking_platform.cores.exceptions import UnsupportedPaymentMethodError
from booking_platform.services.payments.payment_strategies import (
    PaymentDispatcher,
    PaymentStrategy,
    create_default_dispatcher,
)


def create_payment_data(**changes) -> dict:
    data = {
        "bookingGroupId": 1717000000000001,
        "userId": 1,
        "facilityId": 5,
        "amount": 40,
        "paymentMethod": "Credit Card",
        "userName": "Luis",
        "facilityName": "Court 5",
        "addonsString": "racket",
    }
    data.update(changes)
    return data


@pytest.mark.parametrize("method, prefix", [("Credit Card", "cc_"), ("PayPal", "pp_"), ("Bank Transfer", "bt_")])
def test_default_handlers_complete_with_prefixed_transaction(method, prefix):
    result = create_default_dispatcher().process_payment(method, Decimal("40"), 1)

    assert result.payment_status == "COMPLETED"
    assert result.transaction_id.startswith(prefix)
    assert len(result.transaction_id) == len(prefix) + 10


def test_unregistered_method_is_unsupported():
    with pytest.raises(UnsupportedPaymentMethodError) as exc_info:
        create_default_dispatcher().process_payment("Bitcoin", Decimal("40"), 1)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Unsupported payment method: Bitcoin"


def test_new_method_only_needs_registration():
    class VoucherPaymentStrategy(PaymentStrategy):
        payment_method = "Voucher"
        transaction_prefix = "vc_"

    dispatcher = create_default_dispatcher()
    dispatcher.register_strategy(VoucherPaymentStrategy())

    assert dispatcher.get_supported_methods() == ["Bank Transfer", "Credit Card", "PayPal", "Voucher"]
    assert dispatcher.process_payment("Voucher", Decimal("5"), 1).transaction_id.startswith("vc_")
    assert PaymentDispatcher().get_supported_methods() == []


async def test_create_payment(payment_app):
    transport = ASGITransport(app=payment_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/payments/create", json=create_payment_data(paymentStatus="PENDING"))
        methods = await client.get("/api/payments/methods")

    assert response.status_code == 201
    data = response.json()
    assert data["paymentStatus"] == "COMPLETED"
    assert data["transactionId"].startswith("cc_")
    assert data["amount"] == 40.0
    assert data["facilityName"] == "Court 5"
    assert methods.json() == {"methods": ["Bank Transfer", "Credit Card", "PayPal"]}


async def test_unsupported_method_writes_no_payment(payment_app):
    transport = ASGITransport(app=payment_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/payments/create", json=create_payment_data(paymentMethod="Bitcoin"))
        payments = await client.get("/api/payments/user/1")

    assert response.status_code == 400
    assert response.json() == {"detail": "Unsupported payment method: Bitcoin"}
    assert payments.json() == []


async def test_injected_dispatcher_is_used(payment_db):
    app = create_payment_app(dispatcher=PaymentDispatcher())
    app.dependency_overrides[get_payment_db] = payment_db.override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/payments/create", json=create_payment_data())

    assert response.status_code == 400


async def test_queries_and_status_changes(payment_app):
    transport = ASGITransport(app=payment_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        created = await client.post("/api/payments/create", json=create_payment_data())
        await client.post("/api/payments/create", json=create_payment_data(bookingGroupId=2, userId=2, facilityId=6))
        payment_id = created.json()["paymentId"]

        by_id = await client.get(f"/api/payments/{payment_id}")
        by_group = await client.get("/api/payments/booking/1717000000000001")
        by_facility = await client.get("/api/payments/facility/6")
        missing = await client.get("/api/payments/999")

        changed = await client.put(f"/api/payments/{payment_id}/status", params={"newStatus": "CANCELLED"})
        refunded = await client.post(f"/api/payments/{payment_id}/refund")
        unknown_status = await client.put(f"/api/payments/{payment_id}/status", params={"newStatus": "LOST"})
        missing_refund = await client.post("/api/payments/999/refund")

    assert by_id.json()["bookingGroupId"] == 1717000000000001
    assert by_group.json()["paymentId"] == payment_id
    assert [payment["userId"] for payment in by_facility.json()] == [2]
    assert missing.status_code == 404
    assert changed.json()["paymentStatus"] == "CANCELLED"
    assert refunded.json()["paymentStatus"] == "REFUNDED"
    assert unknown_status.status_code == 400
    assert missing_refund.status_code == 404


async def test_bulk_status_updates(payment_app):
    transport = ASGITransport(app=payment_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/api/payments/create", json=create_payment_data(bookingGroupId=10))
        await client.post("/api/payments/create", json=create_payment_data(bookingGroupId=11))

        by_group = await client.put(
            "/api/payments/update_status_by_bookingID", params={"bookingId": 10, "status": "CANCELLED"}
        )
        by_facility = await client.put(
            "/api/payments/update_status_by_facilityId",
            params={"facilityId": 5, "status": "DELISTED_REFUND_PROCESSING"}
        )
        nothing = await client.put(
            "/api/payments/update_status_by_bookingID", params={"bookingId": 12, "status": "CANCELLED"}
        )
        invalid = await client.put(
            "/api/payments/update_status_by_bookingID", params={"bookingId": 10, "status": "whatever"}
        )
        payments = await client.get("/api/payments/facility/5")

    assert by_group.json() == {
        "message": "Payment status update completed",
        "updatedCount": 1,
        "newStatus": "CANCELLED",
        "bookingId": 10,
        "facilityId": None,
    }
    assert by_facility.json()["updatedCount"] == 2
    assert nothing.json()["updatedCount"] == 0
    assert invalid.status_code == 400
    assert {payment["paymentStatus"] for payment in payments.json()} == {"DELISTED_REFUND_PROCESSING"}


async def test_extra_status_can_be_configured(payment_app, monkeypatch):
    monkeypatch.setattr(settings, "EXTRA_PAYMENT_STATUSES", ["ON_HOLD"])

    transport = ASGITransport(app=payment_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/api/payments/create", json=create_payment_data(bookingGroupId=20))
        response = await client.put(
            "/api/payments/update_status_by_bookingID", params={"bookingId": 20, "status": "ON_HOLD"}
        )

    assert response.status_code == 200
    assert response.json()["newStatus"] == "ON_HOLD"
