from datetime import date as calendar_date, datetime
from typing import List, Optional

from pydantic import Field, model_validator

from booking_platform.schemas.common_schema import CamelModel


class TimeSlotRequest(CamelModel):
    start_hour: int = Field(..., ge=0, le=23)
    end_hour: int = Field(..., ge=1, le=24)  # 24 means midnight of the following day
    date: Optional[calendar_date] = None  # Overrides the booking date for this slot

    @model_validator(mode="after")
    def check_hour_order(self):
        if self.end_hour <= self.start_hour:
            raise ValueError("endHour must be greater than startHour")
        return self


class BookingGroupRequest(CamelModel):
    user_id: int
    facility_id: int
    date: calendar_date
    time_slots: List[TimeSlotRequest] = []


class BookingSlotResponse(CamelModel):
    booking_id: int
    booking_group_id: int
    facility_id: int
    user_id: int
    start_time: datetime
    end_time: datetime
    total_price: float
    status: str


class BookingGroupResponse(CamelModel):
    booking_group_id: int
    user_id: int
    facility_id: int
    status: str
    bookings: List[BookingSlotResponse]


class CancelGroupResponse(CamelModel):
    booking_group_id: int
    cancelled_count: int
    status: str
