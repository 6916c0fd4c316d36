"""
httpx clients for every remote boundary the gateway talks to.

Each client wraps one `httpx.AsyncClient` pointed at one service. Calls return a
`ServiceResponse` for any HTTP status so the caller decides what a failure
means; only transport problems (connection refused, timeout) raise, as
`DownstreamUnavailable`. Nothing is retried here.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

import httpx

from booking_platform.configs.settings import settings
from booking_platform.cores.exceptions import DownstreamUnavailable, TokenRejected, TokenValidationUnavailable

logger = logging.getLogger(__name__)


@dataclass
class ServiceResponse:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ServiceClient:
    service_name = "remote"

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @classmethod
    def from_url(cls, base_url: str, timeout: float = None):
        return cls(httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout if timeout is not None else settings.REMOTE_TIMEOUT_SECONDS
        ))

    async def close(self) -> None:
        await self.client.aclose()

    async def request(self, method: str, path: str, **kwargs) -> ServiceResponse:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"❌ Timeout calling {self.service_name} service {method} {path}: {str(e)}")
            raise DownstreamUnavailable(self.service_name, "request timed out", timed_out=True) from e
        except httpx.HTTPError as e:
            logger.error(f"❌ Error calling {self.service_name} service {method} {path}: {str(e)}")
            raise DownstreamUnavailable(self.service_name, str(e)) from e

        return ServiceResponse(status_code=response.status_code, body=_read_body(response))


def _read_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class BookingServiceClient(ServiceClient):
    service_name = "booking"

    async def create_booking_group(self, booking_data: Dict) -> ServiceResponse:
        return await self.request("POST", "/create", json=booking_data)

    async def cancel_booking_group(self, booking_group_id: int) -> ServiceResponse:
        return await self.request("DELETE", "/cancel-group", params={"bookingGroupId": booking_group_id})

    async def get_available_slots(self, facility_id: int, date: str) -> ServiceResponse:
        return await self.request("GET", "/get_available_slots", params={"facilityId": facility_id, "date": date})

    async def check_availability(self, facility_id: int, start_time: str, end_time: str) -> ServiceResponse:
        return await self.request(
            "GET", "/check_availability",
            params={"facilityId": facility_id, "startTime": start_time, "endTime": end_time}
        )

    async def get_user_bookings(self, user_id: int) -> ServiceResponse:
        return await self.request("GET", "/user", params={"userId": user_id})

    async def get_booking(self, booking_id: int) -> ServiceResponse:
        return await self.request("GET", f"/{booking_id}")


class PaymentServiceClient(ServiceClient):
    service_name = "payment"

    async def create_payment(self, payment_data: Dict) -> ServiceResponse:
        return await self.request("POST", "/create", json=payment_data)

    async def update_status_by_booking_group(self, booking_group_id: int, status: str) -> ServiceResponse:
        return await self.request(
            "PUT", "/update_status_by_bookingID", params={"bookingId": booking_group_id, "status": status}
        )

    async def update_status_by_facility(self, facility_id: int, status: str) -> ServiceResponse:
        return await self.request(
            "PUT", "/update_status_by_facilityId", params={"facilityId": facility_id, "status": status}
        )

    async def get_payments_by_user(self, user_id: int) -> ServiceResponse:
        return await self.request("GET", f"/user/{user_id}")

    async def get_payments_by_facility(self, facility_id: int) -> ServiceResponse:
        return await self.request("GET", f"/facility/{facility_id}")

    async def get_payment_by_booking_group(self, booking_group_id: int) -> ServiceResponse:
        return await self.request("GET", f"/booking/{booking_group_id}")


class FacilityServiceClient(ServiceClient):
    """Facility CRUD lives elsewhere; the gateway only needs delete."""
    service_name = "facility"

    async def delete_facility(self, facility_id: int) -> ServiceResponse:
        return await self.request("DELETE", "/delete", params={"facilityId": facility_id})


class UserServiceClient(ServiceClient):
    service_name = "user"

    async def validate_token(self, token: str) -> Dict:
        """
        Returns the principal for a valid token.
        Raises TokenRejected on 401/403 and TokenValidationUnavailable for anything else.
        """
        try:
            response = await self.request("POST", "/validate-token", params={"token": token})
        except DownstreamUnavailable as e:
            raise TokenValidationUnavailable(str(e.body)) from e

        if response.status_code in (401, 403):
            raise TokenRejected(str(response.body))
        if not response.ok or not isinstance(response.body, dict) or not response.body.get("valid"):
            raise TokenValidationUnavailable(f"Unexpected validation answer {response.status_code}: {response.body}")
        return response.body

    async def logout(self, logout_data: Dict) -> ServiceResponse:
        return await self.request("POST", "/logout", json=logout_data)
