import logging
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from booking_platform.configs.settings import settings
from booking_platform.cores.exceptions import TokenRejected, TokenValidationUnavailable
from booking_platform.cores.token import get_bearer_token

logger = logging.getLogger(__name__)


def check_public_path(path: str) -> bool:
    if path == "/":
        return True
    return any(path == prefix or path.startswith(prefix + "/") for prefix in settings.PUBLIC_ENDPOINTS)


class AuthGateMiddleware(BaseHTTPMiddleware):
    """
    Edge authentication for the gateway.

    Public paths pass untouched. Otherwise the bearer token is handed to the
    user service for validation before the request reaches a router:
    - valid: the principal is stored on `request.state.principal`
    - rejected by the user service (401/403): 401 "Invalid JWT Token"
    - validation not possible (unreachable, malformed answer): 500 "Internal Error"
    Requests with no bearer header are forwarded unauthenticated unless
    REJECT_MISSING_TOKEN is set.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.principal = None
        if check_public_path(request.url.path):
            return await call_next(request)

        token = get_bearer_token(request.headers.get("Authorization"))
        if token is None:
            logger.warning(f"Missing or malformed Authorization header for {request.method} {request.url.path}")
            if settings.REJECT_MISSING_TOKEN:
                return JSONResponse(status_code=401, content={"message": "Missing JWT Token"})
            return await call_next(request)

        user_client = request.app.state.user_client
        try:
            principal = await user_client.validate_token(token)
        except TokenRejected as e:
            logger.warning(f"❌ Token rejected for {request.url.path}: {str(e)}")
            return JSONResponse(status_code=401, content={"message": "Invalid JWT Token"})
        except TokenValidationUnavailable as e:
            logger.error(f"❌ Token validation failed for {request.url.path}: {str(e)}")
            return JSONResponse(status_code=500, content={"message": "Internal Error"})

        request.state.principal = principal
        return await call_next(request)
