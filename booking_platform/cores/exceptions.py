from typing import Any, Optional

from fastapi import HTTPException, status


class ValidationFailed(HTTPException):
    """Local validation error. Raised before any remote call is made."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ResourceNotFound(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UnsupportedPaymentMethodError(HTTPException):
    """Fatal for the request: no payment record is written and nothing is retried."""

    def __init__(self, payment_method: Any):
        self.payment_method = payment_method
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported payment method: {payment_method}"
        )


class BookingPersistenceError(HTTPException):
    """
    A slot of a booking group could not be saved.
    Slots saved before the failure stay committed, so the group may exist partially.
    """

    def __init__(self, booking_group_id: int, created_count: int, reason: str):
        self.booking_group_id = booking_group_id
        self.created_count = created_count
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": f"Failed to create booking: {reason}",
                "bookingGroupId": booking_group_id,
                "createdCount": created_count,
            }
        )


class AvailabilityError(Exception):
    """Storage failure while deriving the availability of a facility."""


class DownstreamError(HTTPException):
    """
    Non-2xx answer from a remote service.
    The gateway renders `body` verbatim with the downstream status code.
    """

    def __init__(self, service: str, status_code: int, body: Any):
        self.service = service
        self.body = body
        super().__init__(status_code=status_code, detail=body)


class DownstreamUnavailable(DownstreamError):
    """Network error or timeout while calling a remote service."""

    def __init__(self, service: str, reason: str, timed_out: bool = False):
        self.timed_out = timed_out
        status_code = status.HTTP_504_GATEWAY_TIMEOUT if timed_out else status.HTTP_503_SERVICE_UNAVAILABLE
        super().__init__(
            service=service,
            status_code=status_code,
            body={"message": f"{service} service unavailable: {reason}"}
        )


class PartialSagaFailure(DownstreamError):
    """The booking group was committed but the payment step failed."""

    def __init__(self, booking_group_id: Any, status_code: int, body: Any):
        self.booking_group_id = booking_group_id
        super().__init__(service="payment", status_code=status_code, body=body)


class CascadeFailure(Exception):
    """A best-effort status cascade failed. Logged only, never returned to the client."""

    def __init__(self, target: str, status_code: Optional[int], body: Any):
        self.target = target
        self.status_code = status_code
        self.body = body
        super().__init__(f"Cascade to {target} failed (status={status_code}): {body}")


class TokenRejected(Exception):
    """The token validation capability answered 401/403."""


class TokenValidationUnavailable(Exception):
    """The token validation capability could not give a usable answer."""
