from typing import Dict
import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import IntegrityError

from booking_platform.cores.token import JWTError, decode_token
from booking_platform.models.users.invalid_token import InvalidToken

logger = logging.getLogger(__name__)


async def get_token_payload(token: str) -> Dict:
    try:
        payload = decode_token(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    if payload.get("type") != "access" or not payload.get("jti"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token format")
    return payload


async def validate_access_token(db: AsyncSession, token: str) -> Dict:
    """
    Validation capability used by the edge gate.
    Rejects tampered, expired and logged-out tokens with 401.
    """
    payload = await get_token_payload(token)

    result = await db.execute(select(InvalidToken).where(InvalidToken.token_id == payload["jti"]))
    if result.scalar_one_or_none():
        logger.warning(f"Rejected invalidated token {payload['jti']}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has been invalidated")

    return {
        "valid": True,
        "user_id": payload.get("user_id"),
        "role": payload.get("role"),
        "token_id": payload["jti"],
    }


async def invalidate_token(db: AsyncSession, token: str) -> None:
    """Logout: the token's jti goes to the invalid token table. Logging out twice is harmless."""
    payload = await get_token_payload(token)

    db.add(InvalidToken(token_id=payload["jti"]))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info(f"Token {payload['jti']} was already invalidated")
        return

    logger.info(f"✅ Token {payload['jti']} invalidated for user {payload.get('user_id')}")
