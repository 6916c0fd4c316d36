from typing import Optional

from pydantic import BaseModel


class TokenValidationResponse(BaseModel):
    valid: bool
    user_id: Optional[int] = None
    role: Optional[str] = None
    token_id: Optional[str] = None


class LogoutRequest(BaseModel):
    access_token: str


class LogoutResponse(BaseModel):
    success: bool
    message: str
