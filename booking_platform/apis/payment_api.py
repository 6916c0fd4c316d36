from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from booking_platform.apis.deps import get_payment_db, get_payment_dispatcher
from booking_platform.models.common.status import validate_payment_status
from booking_platform.schemas.payments.payment_schema import (
    PaymentMethodsResponse, PaymentRequest, PaymentResponse, StatusUpdateResponse
)
from booking_platform.services.payments.payment_service import (
    get_payment_by_booking_group,
    get_payment_by_id,
    get_payments_by_facility,
    get_payments_by_user,
    process_payment,
    refund_payment,
    update_payment_status,
    update_payment_status_by_booking_group,
    update_payment_status_by_facility,
)
from booking_platform.services.payments.payment_strategies import PaymentDispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


def check_status(new_status: str) -> str:
    try:
        return validate_payment_status(new_status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/create", response_model=PaymentResponse, status_code=201)
async def create_payment(
    request: PaymentRequest,
    db: AsyncSession = Depends(get_payment_db),
    dispatcher: PaymentDispatcher = Depends(get_payment_dispatcher)
):
    return await process_payment(db, dispatcher, request)


@router.get("/methods", response_model=PaymentMethodsResponse)
async def payment_methods(dispatcher: PaymentDispatcher = Depends(get_payment_dispatcher)):
    return {"methods": dispatcher.get_supported_methods()}


@router.put("/update_status_by_bookingID", response_model=StatusUpdateResponse)
async def update_status_by_booking(
    booking_id: int = Query(..., alias="bookingId"),
    status: str = Query(...),
    db: AsyncSession = Depends(get_payment_db)
):
    """bookingId is the booking group id the payment was created for."""
    new_status = check_status(status)
    updated_count = await update_payment_status_by_booking_group(db, booking_id, new_status)
    return {
        "message": "Payment status update completed",
        "updated_count": updated_count,
        "booking_id": booking_id,
        "new_status": new_status,
    }


@router.put("/update_status_by_facilityId", response_model=StatusUpdateResponse)
async def update_status_by_facility(
    facility_id: int = Query(..., alias="facilityId"),
    status: str = Query(...),
    db: AsyncSession = Depends(get_payment_db)
):
    new_status = check_status(status)
    updated_count = await update_payment_status_by_facility(db, facility_id, new_status)
    return {
        "message": "Payment status update completed",
        "updated_count": updated_count,
        "facility_id": facility_id,
        "new_status": new_status,
    }


@router.get("/booking/{booking_group_id}", response_model=PaymentResponse)
async def payment_by_booking_group(booking_group_id: int, db: AsyncSession = Depends(get_payment_db)):
    return await get_payment_by_booking_group(db, booking_group_id)


@router.get("/facility/{facility_id}", response_model=List[PaymentResponse])
async def facility_payments(facility_id: int, db: AsyncSession = Depends(get_payment_db)):
    return await get_payments_by_facility(db, facility_id)


@router.get("/user/{user_id}", response_model=List[PaymentResponse])
async def user_payments(user_id: int, db: AsyncSession = Depends(get_payment_db)):
    payments = await get_payments_by_user(db, user_id)
    logger.info(f"Found {len(payments)} payments for user ID: {user_id}")
    return payments


@router.put("/{payment_id}/status", response_model=PaymentResponse)
async def change_payment_status(
    payment_id: int,
    new_status: str = Query(..., alias="newStatus"),
    db: AsyncSession = Depends(get_payment_db)
):
    payment = await update_payment_status(db, payment_id, check_status(new_status))
    if not payment:
        raise HTTPException(status_code=404, detail=f"Payment {payment_id} not found")
    return payment


@router.post("/{payment_id}/refund", response_model=PaymentResponse)
async def refund(payment_id: int, db: AsyncSession = Depends(get_payment_db)):
    payment = await refund_payment(db, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail=f"Payment {payment_id} not found")
    return payment


@router.get("/{payment_id}", response_model=PaymentResponse)
async def payment_detail(payment_id: int, db: AsyncSession = Depends(get_payment_db)):
    return await get_payment_by_id(db, payment_id)
