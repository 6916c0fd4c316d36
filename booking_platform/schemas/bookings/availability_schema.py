from datetime import date as calendar_date, datetime
from typing import List

from booking_platform.schemas.common_schema import CamelModel


class AvailabilitySlot(CamelModel):
    start_hour: int
    end_hour: int
    available: bool


class AvailabilityResponse(CamelModel):
    facility_id: int
    date: calendar_date
    available_slots: List[AvailabilitySlot]


class FacilityAvailabilityResponse(CamelModel):
    facility_id: int
    start_time: datetime
    end_time: datetime
    available: bool
