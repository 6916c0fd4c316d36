from fastapi.responses import JSONResponse, Response

from booking_platform.cores.exceptions import DownstreamError
from booking_platform.external.service_clients import ServiceResponse


def relay_response(service: str, response: ServiceResponse) -> Response:
    """Hands a downstream answer back unchanged: 2xx as-is, anything else as DownstreamError."""
    if not response.ok:
        raise DownstreamError(service, response.status_code, response.body)
    if response.body is None:
        return Response(status_code=response.status_code)
    return JSONResponse(status_code=response.status_code, content=response.body)


async def handle_downstream_error(request, exc: DownstreamError) -> Response:
    if exc.body is None:
        return Response(status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=exc.body)
