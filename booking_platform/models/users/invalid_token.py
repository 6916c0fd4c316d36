from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from booking_platform.cores.db import UserBase


class InvalidToken(UserBase):
    """Token ids (jti) revoked through logout."""
    __tablename__ = "invalid_tokens"

    id = Column(Integer, primary_key=True, index=True)
    token_id = Column(String(64), unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<InvalidToken(token_id={self.token_id})>"
