from datetime import datetime
from typing import List, Optional

from pydantic import Field

from booking_platform.schemas.common_schema import CamelModel


class PaymentRequest(CamelModel):
    booking_group_id: int
    user_id: int
    facility_id: int
    amount: float = Field(..., ge=0)
    payment_method: str
    payment_status: Optional[str] = None  # Ignored: the handler decides the status
    user_name: Optional[str] = None
    facility_name: Optional[str] = None
    addons_string: Optional[str] = None


class PaymentResponse(CamelModel):
    payment_id: int
    booking_group_id: int
    user_id: int
    user_name: Optional[str] = None
    facility_id: int
    facility_name: Optional[str] = None
    addons_string: Optional[str] = None
    amount: float
    payment_method: str
    payment_status: str
    transaction_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class StatusUpdateResponse(CamelModel):
    message: str
    updated_count: int
    new_status: str
    booking_id: Optional[int] = None
    facility_id: Optional[int] = None


class PaymentMethodsResponse(CamelModel):
    methods: List[str]
