import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from booking_platform import create_booking_app, create_gateway_app, create_payment_app, create_user_app
from booking_platform.apis.deps import get_booking_db, get_payment_db, get_user_db
from booking_platform.cores.db import BookingBase, PaymentBase, UserBase
from booking_platform.external.service_clients import (
    BookingServiceClient, FacilityServiceClient, PaymentServiceClient, UserServiceClient
)
from tests.service_doubles import create_asgi_client
from tests.test_db import create_test_database


# Stores: one in-memory database per service, recreated for every test
@pytest.fixture
async def booking_db():
    database = await create_test_database(BookingBase)
    yield database
    await database.dispose()


@pytest.fixture
async def payment_db():
    database = await create_test_database(PaymentBase)
    yield database
    await database.dispose()


@pytest.fixture
async def user_db():
    database = await create_test_database(UserBase)
    yield database
    await database.dispose()


# Services
@pytest.fixture
def booking_app(booking_db):
    app = create_booking_app()
    app.dependency_overrides[get_booking_db] = booking_db.override_get_db
    return app


@pytest.fixture
def payment_app(payment_db):
    app = create_payment_app()
    app.dependency_overrides[get_payment_db] = payment_db.override_get_db
    return app


@pytest.fixture
def user_app(user_db):
    app = create_user_app()
    app.dependency_overrides[get_user_db] = user_db.override_get_db
    return app


@pytest.fixture
def facility_app():
    """Stand-in for the facility service: ids 404 and up do not exist."""
    app = FastAPI()

    @app.delete("/api/facilities/delete")
    async def delete_facility(facilityId: int):
        if facilityId >= 404:
            return JSONResponse(status_code=404, content={"message": f"Facility {facilityId} not found"})
        return {"message": "Facility deleted successfully", "facilityId": facilityId}

    return app


@pytest.fixture
def service_clients(booking_app, payment_app, facility_app, user_app):
    return {
        "booking_client": BookingServiceClient(create_asgi_client(booking_app, "http://booking/api/bookings")),
        "payment_client": PaymentServiceClient(create_asgi_client(payment_app, "http://payment/api/payments")),
        "facility_client": FacilityServiceClient(create_asgi_client(facility_app, "http://facility/api/facilities")),
        "user_client": UserServiceClient(create_asgi_client(user_app, "http://user/api/auth")),
    }


@pytest.fixture
def build_gateway(service_clients):
    """Gateway wired to the in-process services; keyword arguments replace single clients."""
    def build(**overrides):
        clients = dict(service_clients)
        clients.update(overrides)
        return create_gateway_app(**clients)

    return build


@pytest.fixture
async def gateway_client(build_gateway):
    async with create_asgi_client(build_gateway(), "http://test") as client:
        yield client
