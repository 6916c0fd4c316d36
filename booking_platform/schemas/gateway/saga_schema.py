from datetime import date as calendar_date
from typing import List, Optional

from pydantic import Field

from booking_platform.schemas.common_schema import CamelModel
from booking_platform.schemas.bookings.booking_schema import TimeSlotRequest


class BookingPaymentRequest(CamelModel):
    """Combined request accepted by POST /payments/create on the gateway."""
    user_id: int
    facility_id: int
    date: calendar_date
    time_slots: List[TimeSlotRequest] = []
    total_amount: float = Field(..., ge=0)
    payment_method: str
    payment_status: Optional[str] = None
    user_name: Optional[str] = None
    facility_name: Optional[str] = None
    addons_string: Optional[str] = None
