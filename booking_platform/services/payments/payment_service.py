from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from booking_platform.cores.exceptions import ResourceNotFound
from booking_platform.models.common.status import PaymentStatus
from booking_platform.models.payments.payment import Payment
from booking_platform.schemas.payments.payment_schema import PaymentRequest
from booking_platform.services.payments.payment_strategies import PaymentDispatcher

logger = logging.getLogger(__name__)


async def process_payment(db: AsyncSession, dispatcher: PaymentDispatcher, request: PaymentRequest) -> Payment:
    """
    Settles the payment through the handler of its method, then stores it.
    An unsupported method fails inside the dispatcher, before anything is written.
    """
    logger.info(f"Processing payment for booking group {request.booking_group_id} with method: {request.payment_method}")
    amount = Decimal(str(request.amount))
    settlement = dispatcher.process_payment(request.payment_method, amount, request.booking_group_id)

    payment = Payment(
        booking_group_id=request.booking_group_id,
        user_id=request.user_id,
        user_name=request.user_name,
        facility_id=request.facility_id,
        facility_name=request.facility_name,
        addons_string=request.addons_string,
        amount=amount,
        payment_method=request.payment_method,
        payment_status=settlement.payment_status,
        transaction_id=settlement.transaction_id,
        created_at=settlement.created_at,
        updated_at=settlement.created_at
    )
    db.add(payment)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        logger.error(f"❌ Error saving payment of booking group {request.booking_group_id}: {str(e)}")
        await db.rollback()
        raise
    await db.refresh(payment)

    logger.info(f"✅ Payment record created with ID: {payment.payment_id}")
    return payment


async def get_payment_by_id(db: AsyncSession, payment_id: int) -> Payment:
    result = await db.execute(select(Payment).where(Payment.payment_id == payment_id))
    payment = result.scalar_one_or_none()
    if not payment:
        raise ResourceNotFound(f"Payment {payment_id} not found")
    return payment


async def get_payment_by_booking_group(db: AsyncSession, booking_group_id: int) -> Payment:
    # Most recent one wins if a group was ever paid twice
    result = await db.execute(
        select(Payment)
        .where(Payment.booking_group_id == booking_group_id)
        .order_by(Payment.created_at.desc(), Payment.payment_id.desc())
        .limit(1)
    )
    payment = result.scalar_one_or_none()
    if not payment:
        raise ResourceNotFound(f"No payment found for booking group {booking_group_id}")
    return payment


async def get_payments_by_user(db: AsyncSession, user_id: int) -> List[Payment]:
    result = await db.execute(
        select(Payment).where(Payment.user_id == user_id).order_by(Payment.created_at.desc())
    )
    return result.scalars().all()


async def get_payments_by_facility(db: AsyncSession, facility_id: int) -> List[Payment]:
    result = await db.execute(
        select(Payment).where(Payment.facility_id == facility_id).order_by(Payment.created_at.desc())
    )
    return result.scalars().all()


async def update_payment_status(db: AsyncSession, payment_id: int, new_status: str) -> Optional[Payment]:
    result = await db.execute(select(Payment).where(Payment.payment_id == payment_id))
    payment = result.scalar_one_or_none()
    if not payment:
        logger.warning(f"Payment with ID {payment_id} not found for status update")
        return None

    payment.payment_status = new_status
    payment.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(payment)
    logger.info(f"Updated payment {payment_id} status to {new_status}")
    return payment


async def refund_payment(db: AsyncSession, payment_id: int) -> Optional[Payment]:
    return await update_payment_status(db, payment_id, PaymentStatus.REFUNDED.value)


async def update_payment_status_by_booking_group(db: AsyncSession, booking_group_id: int, new_status: str) -> int:
    """Bulk status change for every payment of a booking group. Returns the number of rows changed."""
    result = await db.execute(
        update(Payment)
        .where(Payment.booking_group_id == booking_group_id)
        .values(payment_status=new_status, updated_at=datetime.utcnow())
    )
    await db.commit()
    updated_count = result.rowcount or 0
    logger.info(f"Updated {updated_count} payments for booking group {booking_group_id} to status {new_status}")
    return updated_count


async def update_payment_status_by_facility(db: AsyncSession, facility_id: int, new_status: str) -> int:
    result = await db.execute(
        update(Payment)
        .where(Payment.facility_id == facility_id)
        .values(payment_status=new_status, updated_at=datetime.utcnow())
    )
    await db.commit()
    updated_count = result.rowcount or 0
    logger.info(f"Updated {updated_count} payments for facility {facility_id} to status {new_status}")
    return updated_count
