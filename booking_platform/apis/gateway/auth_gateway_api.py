from fastapi import APIRouter, Depends

from booking_platform.apis.deps import get_user_client
from booking_platform.apis.gateway.relay import relay_response
from booking_platform.external.service_clients import UserServiceClient
from booking_platform.schemas.auths.token_schema import LogoutRequest

router = APIRouter()


@router.post("/logout")
async def logout(request: LogoutRequest, user_client: UserServiceClient = Depends(get_user_client)):
    return relay_response("user", await user_client.logout(request.model_dump(by_alias=True)))
