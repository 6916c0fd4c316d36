from datetime import date
from typing import Iterable, List
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import SQLAlchemyError

from booking_platform.cores.exceptions import AvailabilityError
from booking_platform.models.bookings.booking_slot import BookingSlot
from booking_platform.models.common.status import BookingStatus
from booking_platform.schemas.bookings.availability_schema import AvailabilitySlot

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


def generate_availability_slots(bookings: Iterable[BookingSlot], day: date) -> List[AvailabilitySlot]:
    """
    Derives the 24 one-hour windows of `day` from the stored slots.
    Only non-cancelled slots starting on `day` count. A slot that ends on a
    later date occupies the day up to midnight.
    """
    booked_hours = [False] * HOURS_PER_DAY

    for booking in bookings:
        if booking.status == BookingStatus.CANCELLED.value:
            continue
        if booking.start_time.date() != day:
            continue

        start_hour = booking.start_time.hour
        end_hour = booking.end_time.hour
        if booking.end_time.date() > day:
            end_hour = HOURS_PER_DAY

        for hour in range(start_hour, end_hour):
            booked_hours[hour] = True

    return [
        AvailabilitySlot(start_hour=hour, end_hour=hour + 1, available=not booked_hours[hour])
        for hour in range(HOURS_PER_DAY)
    ]


async def get_available_slots(db: AsyncSession, facility_id: int, day: date) -> List[AvailabilitySlot]:
    """
    Availability of one facility on one local calendar date.
    Read-only and advisory: booking creation does not consult it.
    """
    try:
        result = await db.execute(select(BookingSlot).where(BookingSlot.facility_id == facility_id))
        bookings = result.scalars().all()
    except SQLAlchemyError as e:
        logger.error(f"❌ Error loading bookings of facility {facility_id} for {day}: {str(e)}")
        raise AvailabilityError(f"Failed to determine available time slots: {str(e)}") from e

    slots = generate_availability_slots(bookings, day)
    logger.info(
        f"Facility {facility_id} on {day}: {sum(1 for slot in slots if not slot.available)} of {HOURS_PER_DAY} hours booked"
    )
    return slots
