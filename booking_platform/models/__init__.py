from .common.status import BookingStatus, PaymentStatus

from .bookings.booking_slot import BookingSlot
from .payments.payment import Payment
from .users.invalid_token import InvalidToken
