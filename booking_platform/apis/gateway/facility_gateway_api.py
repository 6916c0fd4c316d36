from fastapi import APIRouter, Depends, Query

from booking_platform.apis.deps import get_saga
from booking_platform.apis.gateway.relay import relay_response
from booking_platform.services.gateway.saga_orchestrator import BookingPaymentSaga

router = APIRouter()


@router.delete("/delete")
async def delete_facility(
    facility_id: int = Query(..., alias="facilityId"),
    saga: BookingPaymentSaga = Depends(get_saga)
):
    """Delists the facility, then moves its payments to DELISTED_REFUND_PROCESSING."""
    return relay_response("facility", await saga.delete_facility(facility_id))
