from sqlalchemy import BigInteger, Column, Integer, String, DateTime, Numeric

from booking_platform.cores.db import BookingBase
from booking_platform.models.common.status import BookingStatus


class BookingSlot(BookingBase):
    __tablename__ = "booking_slots"

    booking_id = Column(Integer, primary_key=True, index=True)
    booking_group_id = Column(BigInteger, index=True, nullable=False)
    facility_id = Column(Integer, index=True, nullable=False)
    user_id = Column(Integer, index=True, nullable=False)
    # Local calendar times, resolved by the caller
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)

    def __repr__(self):
        return f"<BookingSlot(booking_id={self.booking_id}, group={self.booking_group_id}, facility_id={self.facility_id}, status={self.status})>"
