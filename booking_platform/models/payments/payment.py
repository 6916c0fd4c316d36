from datetime import datetime

from sqlalchemy import BigInteger, Column, Integer, String, DateTime, Numeric

from booking_platform.cores.db import PaymentBase


class Payment(PaymentBase):
    __tablename__ = "payments"

    payment_id = Column(Integer, primary_key=True, index=True)
    # At most one live payment per group is expected but not enforced
    booking_group_id = Column(BigInteger, index=True, nullable=False)
    user_id = Column(Integer, index=True, nullable=False)
    user_name = Column(String(50), nullable=True)
    facility_id = Column(Integer, index=True, nullable=False)
    facility_name = Column(String(100), nullable=True)
    addons_string = Column(String(200), nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)
    payment_status = Column(String(1000), nullable=False)
    transaction_id = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Payment(payment_id={self.payment_id}, booking_group_id={self.booking_group_id}, status={self.payment_status})>"
