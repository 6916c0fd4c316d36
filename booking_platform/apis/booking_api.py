from datetime import date, datetime
from typing import List
import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from booking_platform.apis.deps import get_booking_db, get_group_id_generator
from booking_platform.configs.settings import settings
from booking_platform.cores.exceptions import AvailabilityError, ValidationFailed
from booking_platform.schemas.bookings.availability_schema import AvailabilityResponse, FacilityAvailabilityResponse
from booking_platform.schemas.bookings.booking_schema import (
    BookingGroupRequest, BookingGroupResponse, BookingSlotResponse, CancelGroupResponse
)
from booking_platform.services.bookings.availability_service import get_available_slots
from booking_platform.services.bookings.booking_group_service import (
    BookingGroupIdGenerator,
    cancel_booking_group,
    check_facility_availability,
    create_booking_group,
    get_all_bookings,
    get_booking_by_id,
    get_bookings_by_facility,
    get_bookings_by_group,
    get_bookings_by_user,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/get_available_slots", response_model=AvailabilityResponse)
async def available_slots(
    facility_id: int = Query(..., alias="facilityId"),
    day: date = Query(..., alias="date"),
    db: AsyncSession = Depends(get_booking_db)
):
    """
    Per-hour availability of a facility on one date (24 one-hour windows).
    Storage failures come back as a 500 with a readable message.
    """
    try:
        slots = await get_available_slots(db, facility_id, day)
    except AvailabilityError as e:
        return JSONResponse(status_code=500, content={"detail": str(e)})

    return {"facility_id": facility_id, "date": day, "available_slots": slots}


@router.get("/check_availability", response_model=FacilityAvailabilityResponse)
async def facility_availability(
    facility_id: int = Query(..., alias="facilityId"),
    start_time: datetime = Query(..., alias="startTime"),
    end_time: datetime = Query(..., alias="endTime"),
    db: AsyncSession = Depends(get_booking_db)
):
    """Whether the facility is free for the whole range. Touching ranges do not conflict."""
    if end_time <= start_time:
        raise ValidationFailed("endTime must be after startTime")

    available = await check_facility_availability(db, facility_id, start_time, end_time)
    return {"facility_id": facility_id, "start_time": start_time, "end_time": end_time, "available": available}


@router.get("/all", response_model=List[BookingSlotResponse])
async def all_bookings(db: AsyncSession = Depends(get_booking_db)):
    return await get_all_bookings(db)


@router.get("/user", response_model=List[BookingSlotResponse])
async def user_bookings(
    user_id: int = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_booking_db)
):
    bookings = await get_bookings_by_user(db, user_id)
    logger.info(f"Found {len(bookings)} bookings for user ID: {user_id}")
    return bookings


@router.get("/user/{user_id}/status/{status}", response_model=List[BookingSlotResponse])
async def user_bookings_by_status(user_id: int, status: str, db: AsyncSession = Depends(get_booking_db)):
    return await get_bookings_by_user(db, user_id, status=status)


@router.get("/facility/{facility_id}", response_model=List[BookingSlotResponse])
async def facility_bookings(facility_id: int, db: AsyncSession = Depends(get_booking_db)):
    return await get_bookings_by_facility(db, facility_id)


@router.get("/group/{group_id}", response_model=List[BookingSlotResponse])
async def group_bookings(group_id: int, db: AsyncSession = Depends(get_booking_db)):
    return await get_bookings_by_group(db, group_id)


@router.post("/create", response_model=BookingGroupResponse, status_code=201)
async def create_booking(
    request: BookingGroupRequest,
    db: AsyncSession = Depends(get_booking_db),
    id_generator: BookingGroupIdGenerator = Depends(get_group_id_generator)
):
    """
    Creates one booking per time slot, all sharing a new booking group id.
    Slots already saved are kept if a later one fails.
    """
    logger.info(f"Received booking request for user {request.user_id} at facility {request.facility_id}")
    return await create_booking_group(db, request, id_generator, settings.HOURLY_RATE)


@router.delete("/cancel-group", response_model=CancelGroupResponse)
async def cancel_group(
    booking_group_id: int = Query(..., alias="bookingGroupId"),
    db: AsyncSession = Depends(get_booking_db)
):
    cancelled_count = await cancel_booking_group(db, booking_group_id)
    return {
        "booking_group_id": booking_group_id,
        "cancelled_count": cancelled_count,
        "status": "cancelled" if cancelled_count > 0 else "not_found",
    }


@router.get("/{booking_id}", response_model=BookingSlotResponse)
async def booking_detail(booking_id: int, db: AsyncSession = Depends(get_booking_db)):
    return await get_booking_by_id(db, booking_id)
