from datetime import datetime, timedelta, UTC
from typing import Optional
import uuid

from jose import JWTError, jwt

from booking_platform.configs.settings import settings


ALGORITHM = "HS256"


"""
Builds a signed JWT from `data`.
    - `expires_delta` overrides the configured lifetime.
    - Every token carries a unique `jti` so it can be invalidated on logout.
    - The token includes the "exp" key so its validity can be checked.
"""
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"type": "access", "exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Raises JWTError when the signature or the expiry does not check out."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])


def get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Returns the token of a `Bearer <token>` header, None for anything else."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None
    return parts[1]


__all__ = ["ALGORITHM", "JWTError", "create_access_token", "decode_token", "get_bearer_token"]
