from enum import Enum

from booking_platform.configs.settings import settings


class BookingStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """
    Known payment status values. Stored as free text in the payments table;
    extra values can be allowed through the EXTRA_PAYMENT_STATUSES setting.
    """
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    DELISTED_REFUND_PROCESSING = "DELISTED_REFUND_PROCESSING"
    REFUNDED = "REFUNDED"


def get_allowed_payment_statuses() -> set:
    return {item.value for item in PaymentStatus} | set(settings.EXTRA_PAYMENT_STATUSES)


def validate_payment_status(value: str) -> str:
    """Returns the value when it is a known or configured status, raises ValueError otherwise."""
    if value not in get_allowed_payment_statuses():
        raise ValueError(f"Unknown payment status: {value}")
    return value
