from typing import Optional
import logging

from fastapi import APIRouter, Depends

from booking_platform.apis.deps import get_payment_client, get_principal, get_saga
from booking_platform.apis.gateway.relay import relay_response
from booking_platform.external.service_clients import PaymentServiceClient
from booking_platform.schemas.gateway.saga_schema import BookingPaymentRequest
from booking_platform.services.gateway.saga_orchestrator import BookingPaymentSaga

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create")
async def create_payment_and_booking(
    request: BookingPaymentRequest,
    saga: BookingPaymentSaga = Depends(get_saga),
    principal: Optional[dict] = Depends(get_principal)
):
    """
    Runs the saga: booking group first, then its payment.
    If the payment fails the booking group is kept and the payment error is returned.
    """
    logger.info(
        f"Received request to create payment and booking for user {request.user_id} "
        f"(authenticated as {principal.get('user_id') if principal else 'anonymous'})"
    )
    return await saga.create_booking_with_payment(request)


@router.get("/user/{user_id}")
async def user_payments(user_id: int, payment_client: PaymentServiceClient = Depends(get_payment_client)):
    return relay_response("payment", await payment_client.get_payments_by_user(user_id))


@router.get("/facility/{facility_id}")
async def facility_payments(facility_id: int, payment_client: PaymentServiceClient = Depends(get_payment_client)):
    return relay_response("payment", await payment_client.get_payments_by_facility(facility_id))


@router.get("/booking/{booking_group_id}")
async def booking_group_payment(
    booking_group_id: int,
    payment_client: PaymentServiceClient = Depends(get_payment_client)
):
    return relay_response("payment", await payment_client.get_payment_by_booking_group(booking_group_id))
