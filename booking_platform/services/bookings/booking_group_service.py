from datetime import datetime, date, time, timedelta
from decimal import Decimal
from typing import List, Optional
import logging
import random
import threading
import time as clock

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from booking_platform.cores.exceptions import BookingPersistenceError, ResourceNotFound, ValidationFailed
from booking_platform.models.bookings.booking_slot import BookingSlot
from booking_platform.models.common.status import BookingStatus
from booking_platform.schemas.bookings.booking_schema import BookingGroupRequest, TimeSlotRequest

logger = logging.getLogger(__name__)


class BookingGroupIdGenerator:
    """
    Time-derived group ids: epoch microseconds with a random low part,
    never repeating or going backwards inside one process.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._last_id = 0

    def generate_id(self) -> int:
        with self._lock:
            candidate = clock.time_ns() // 1000 + random.randint(0, 999)
            self._last_id = max(candidate, self._last_id + 1)
            return self._last_id


def get_slot_times(slot: TimeSlotRequest, booking_date: date) -> tuple:
    """Whole-hour start/end datetimes for a slot. endHour 24 ends at midnight of the next day."""
    slot_date = slot.date or booking_date
    start_time = datetime.combine(slot_date, time(hour=slot.start_hour))
    end_time = datetime.combine(slot_date, time()) + timedelta(hours=slot.end_hour)
    return start_time, end_time


def get_slot_price(slot: TimeSlotRequest, hourly_rate: float) -> Decimal:
    hours = slot.end_hour - slot.start_hour
    return (Decimal(hours) * Decimal(str(hourly_rate))).quantize(Decimal("0.01"))


async def create_booking_group(
    db: AsyncSession,
    request: BookingGroupRequest,
    id_generator: BookingGroupIdGenerator,
    hourly_rate: float
) -> dict:
    """
    Creates one BookingSlot per requested time slot under a shared group id.

    Slots are committed one at a time. If slot k fails, slots 1..k-1 stay in
    the store and BookingPersistenceError reports how many were created. A slot
    whose move to completed fails is already stored as pending and is counted.
    """
    if not request.time_slots:
        logger.warning(f"No valid time slots provided for booking of user {request.user_id}")
        raise ValidationFailed("No valid time slots provided for booking")

    booking_group_id = id_generator.generate_id()
    logger.info(f"Processing {len(request.time_slots)} time slots for booking group {booking_group_id}")

    created: List[BookingSlot] = []
    for slot in request.time_slots:
        start_time, end_time = get_slot_times(slot, request.date)
        booking = BookingSlot(
            booking_group_id=booking_group_id,
            facility_id=request.facility_id,
            user_id=request.user_id,
            start_time=start_time,
            end_time=end_time,
            total_price=get_slot_price(slot, hourly_rate),
            status=BookingStatus.PENDING.value
        )
        try:
            db.add(booking)
            await db.commit()
            # Stored from here on, even if the status change below fails
            created.append(booking)
            booking.status = BookingStatus.COMPLETED.value
            await db.commit()
            await db.refresh(booking)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                f"❌ Error saving slot {slot.start_hour}-{slot.end_hour} of booking group {booking_group_id} "
                f"after {len(created)} saved slots: {str(e)}"
            )
            raise BookingPersistenceError(booking_group_id, len(created), str(e)) from e

        logger.info(f"Created booking ID: {booking.booking_id} in group: {booking_group_id}")

    logger.info(f"✅ Booking group {booking_group_id} created with {len(created)} slots")
    return {
        "booking_group_id": booking_group_id,
        "user_id": request.user_id,
        "facility_id": request.facility_id,
        "status": BookingStatus.COMPLETED.value,
        "bookings": created,
    }


async def cancel_booking_group(db: AsyncSession, booking_group_id: int) -> int:
    """
    Marks every live slot of the group as cancelled in one statement.
    Returns the number of affected slots; 0 means nothing to cancel.
    """
    logger.info(f"Cancelling all bookings in group: {booking_group_id}")
    query = update(BookingSlot).where(
        BookingSlot.booking_group_id == booking_group_id,
        BookingSlot.status != BookingStatus.CANCELLED.value
    ).values(status=BookingStatus.CANCELLED.value)

    try:
        result = await db.execute(query)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"❌ Error cancelling booking group {booking_group_id}: {str(e)}")
        raise

    cancelled_count = result.rowcount or 0
    if cancelled_count > 0:
        logger.info(f"✅ Cancelled {cancelled_count} bookings in group: {booking_group_id}")
    else:
        logger.info(f"No bookings found for group: {booking_group_id}")
    return cancelled_count


async def get_booking_by_id(db: AsyncSession, booking_id: int) -> BookingSlot:
    result = await db.execute(select(BookingSlot).where(BookingSlot.booking_id == booking_id))
    booking = result.scalar_one_or_none()
    if not booking:
        logger.warning(f"Booking with ID: {booking_id} not found")
        raise ResourceNotFound(f"Booking {booking_id} not found")
    return booking


async def get_all_bookings(db: AsyncSession) -> List[BookingSlot]:
    result = await db.execute(select(BookingSlot).order_by(BookingSlot.booking_id))
    return result.scalars().all()


async def get_bookings_by_user(db: AsyncSession, user_id: int, status: Optional[str] = None) -> List[BookingSlot]:
    query = select(BookingSlot).where(BookingSlot.user_id == user_id)
    if status is not None:
        query = query.where(BookingSlot.status == status)
    result = await db.execute(query.order_by(BookingSlot.start_time))
    return result.scalars().all()


async def get_bookings_by_facility(db: AsyncSession, facility_id: int) -> List[BookingSlot]:
    result = await db.execute(
        select(BookingSlot).where(BookingSlot.facility_id == facility_id).order_by(BookingSlot.start_time)
    )
    return result.scalars().all()


async def get_bookings_by_group(db: AsyncSession, booking_group_id: int) -> List[BookingSlot]:
    result = await db.execute(
        select(BookingSlot).where(BookingSlot.booking_group_id == booking_group_id).order_by(BookingSlot.start_time)
    )
    return result.scalars().all()


async def check_facility_availability(
    db: AsyncSession,
    facility_id: int,
    start_time: datetime,
    end_time: datetime
) -> bool:
    """
    True when no live slot of the facility overlaps [start_time, end_time).
    Advisory read path only: create_booking_group never calls it.
    """
    result = await db.execute(
        select(BookingSlot).where(
            BookingSlot.facility_id == facility_id,
            BookingSlot.status != BookingStatus.CANCELLED.value,
            BookingSlot.start_time < end_time,
            BookingSlot.end_time > start_time
        )
    )
    conflicts = result.scalars().all()
    if conflicts:
        logger.info(f"Facility {facility_id} has {len(conflicts)} conflicting bookings between {start_time} and {end_time}")
    return not conflicts
