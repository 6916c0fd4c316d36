import logging

from fastapi import APIRouter, Depends, Query

from booking_platform.apis.deps import get_booking_client, get_saga
from booking_platform.apis.gateway.relay import relay_response
from booking_platform.external.service_clients import BookingServiceClient
from booking_platform.services.gateway.saga_orchestrator import BookingPaymentSaga

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/available_slots")
async def available_slots(
    facility_id: int = Query(..., alias="facilityId"),
    date: str = Query(...),
    booking_client: BookingServiceClient = Depends(get_booking_client)
):
    logger.info(f"Received request to fetch available time slots for facility ID: {facility_id} on date: {date}")
    return relay_response("booking", await booking_client.get_available_slots(facility_id, date))


@router.get("/check_availability")
async def check_availability(
    facility_id: int = Query(..., alias="facilityId"),
    start_time: str = Query(..., alias="startTime"),
    end_time: str = Query(..., alias="endTime"),
    booking_client: BookingServiceClient = Depends(get_booking_client)
):
    return relay_response("booking", await booking_client.check_availability(facility_id, start_time, end_time))


@router.get("/user")
async def user_bookings(
    user_id: int = Query(..., alias="userId"),
    booking_client: BookingServiceClient = Depends(get_booking_client)
):
    return relay_response("booking", await booking_client.get_user_bookings(user_id))


@router.delete("/cancel-group")
async def cancel_booking_group(
    booking_group_id: int = Query(..., alias="bookingGroupId"),
    saga: BookingPaymentSaga = Depends(get_saga)
):
    """Cancels the group, then cascades CANCELLED to its payment. The cascade result is not returned."""
    return relay_response("booking", await saga.cancel_booking_group(booking_group_id))


@router.get("/{booking_id}")
async def booking_detail(
    booking_id: int,
    booking_client: BookingServiceClient = Depends(get_booking_client)
):
    return relay_response("booking", await booking_client.get_booking(booking_id))
