"""
Booking-payment saga run at the edge.

Creation is strictly sequential: the booking group first, then the payment that
references it. There is no distributed transaction and no compensation: if the
payment step fails the booking group stays committed and the failure is
reported as a PartialSagaFailure. Cancellation and facility deletion push a
best-effort status change to the payment service afterwards; a failed cascade
is logged and never changes the answer given to the client.
"""

from typing import Any, Dict
import logging

from booking_platform.cores.exceptions import (
    CascadeFailure,
    DownstreamError,
    DownstreamUnavailable,
    PartialSagaFailure,
    ValidationFailed,
)
from booking_platform.external.service_clients import (
    BookingServiceClient,
    FacilityServiceClient,
    PaymentServiceClient,
    ServiceResponse,
)
from booking_platform.models.common.status import PaymentStatus
from booking_platform.schemas.gateway.saga_schema import BookingPaymentRequest

logger = logging.getLogger(__name__)


def build_booking_data(request: BookingPaymentRequest) -> Dict[str, Any]:
    """Booking-service sub-request: who, where, when."""
    return {
        "userId": request.user_id,
        "facilityId": request.facility_id,
        "date": request.date.isoformat(),
        "timeSlots": [slot.model_dump(mode="json", by_alias=True, exclude_none=True) for slot in request.time_slots],
    }


def build_payment_data(request: BookingPaymentRequest, booking_group_id: Any) -> Dict[str, Any]:
    """Payment-service sub-request, tied to the booking group created in step 1."""
    return {
        "bookingGroupId": booking_group_id,
        "userId": request.user_id,
        "facilityId": request.facility_id,
        "amount": request.total_amount,
        "paymentMethod": request.payment_method,
        "paymentStatus": request.payment_status,
        "userName": request.user_name,
        "facilityName": request.facility_name,
        "addonsString": request.addons_string,
    }


class BookingPaymentSaga:
    """Sequences the remote calls. Holds no state beyond its injected clients."""

    def __init__(
        self,
        booking_client: BookingServiceClient,
        payment_client: PaymentServiceClient,
        facility_client: FacilityServiceClient
    ):
        self.booking_client = booking_client
        self.payment_client = payment_client
        self.facility_client = facility_client

    async def create_booking_with_payment(self, request: BookingPaymentRequest) -> Dict[str, Any]:
        if not request.time_slots:
            raise ValidationFailed("No valid time slots provided for booking")

        # Step 1: booking group
        booking_data = build_booking_data(request)
        logger.info(f"Creating booking for user {request.user_id} at facility {request.facility_id} on {request.date}")
        booking_response = await self.booking_client.create_booking_group(booking_data)

        # Step 2: nothing to pay for if the booking was not created
        if not booking_response.ok:
            logger.error(f"❌ Failed to create booking. Status: {booking_response.status_code}")
            raise DownstreamError("booking", booking_response.status_code, booking_response.body)

        booking_body = booking_response.body
        booking_group_id = booking_body.get("bookingGroupId") if isinstance(booking_body, dict) else None
        if booking_group_id is None:
            logger.error(f"❌ Booking service answered without a booking group id: {booking_body}")
            raise DownstreamError("booking", 502, {"message": "Booking service response has no bookingGroupId"})
        logger.info(f"✅ Booking group {booking_group_id} created")

        # Step 3 and 4: payment referencing the group
        payment_data = build_payment_data(request, booking_group_id)
        try:
            payment_response = await self.payment_client.create_payment(payment_data)
        except DownstreamUnavailable as e:
            logger.error(
                f"❌ Partial saga failure: booking group {booking_group_id} committed, payment service unreachable"
            )
            raise PartialSagaFailure(booking_group_id, e.status_code, e.body) from e

        # Step 5: no compensation, the booking group stays
        if not payment_response.ok:
            logger.error(
                f"❌ Partial saga failure: booking group {booking_group_id} committed, "
                f"payment failed with status {payment_response.status_code}: {payment_response.body}"
            )
            raise PartialSagaFailure(booking_group_id, payment_response.status_code, payment_response.body)

        # Step 6: combined answer
        logger.info(f"✅ Payment processed for booking group {booking_group_id}")
        combined = dict(booking_body)
        combined["payment"] = payment_response.body
        return combined

    async def cancel_booking_group(self, booking_group_id: int) -> ServiceResponse:
        logger.info(f"Cancelling booking group {booking_group_id}")
        booking_response = await self.booking_client.cancel_booking_group(booking_group_id)
        if not booking_response.ok:
            logger.error(f"❌ Failed to cancel booking group {booking_group_id}. Status: {booking_response.status_code}")
            raise DownstreamError("booking", booking_response.status_code, booking_response.body)

        await self.send_status_cascade(
            f"payments of booking group {booking_group_id}",
            self.payment_client.update_status_by_booking_group(booking_group_id, PaymentStatus.CANCELLED.value)
        )
        return booking_response

    async def delete_facility(self, facility_id: int) -> ServiceResponse:
        logger.info(f"Deleting facility {facility_id}")
        facility_response = await self.facility_client.delete_facility(facility_id)
        if not facility_response.ok:
            logger.error(f"❌ Failed to delete facility {facility_id}. Status: {facility_response.status_code}")
            raise DownstreamError("facility", facility_response.status_code, facility_response.body)

        await self.send_status_cascade(
            f"payments of facility {facility_id}",
            self.payment_client.update_status_by_facility(
                facility_id, PaymentStatus.DELISTED_REFUND_PROCESSING.value
            )
        )
        return facility_response

    async def send_status_cascade(self, target: str, call) -> bool:
        """Awaits one cascade call. Failures are logged as CascadeFailure and swallowed."""
        try:
            response = await call
            if not response.ok:
                raise CascadeFailure(target, response.status_code, response.body)
        except DownstreamUnavailable as e:
            failure = CascadeFailure(target, e.status_code, e.body)
            logger.error(f"❌ Orchestration error: {failure}")
            return False
        except CascadeFailure as failure:
            logger.error(f"❌ Orchestration error: {failure}")
            return False

        logger.info(f"✅ Cascaded status update to {target}: {response.body}")
        return True
