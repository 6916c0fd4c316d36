from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from booking_platform.apis.deps import get_user_db
from booking_platform.schemas.auths.token_schema import LogoutRequest, LogoutResponse, TokenValidationResponse
from booking_platform.services.auths.token_validation_service import invalidate_token, validate_access_token

router = APIRouter()


@router.post("/validate-token", response_model=TokenValidationResponse)
async def validate_token(
    token: str = Query(...),
    db: AsyncSession = Depends(get_user_db)
):
    """Validation capability the edge gate delegates to. 200 for a usable token, 401 otherwise."""
    return await validate_access_token(db, token)


@router.post("/logout", response_model=LogoutResponse)
async def logout(request: LogoutRequest, db: AsyncSession = Depends(get_user_db)):
    await invalidate_token(db, request.access_token)
    return {"success": True, "message": "Logout successful"}
