"""
Application factories for the gateway and the three domain services.
Each service is its own FastAPI app with its own database; the lifespan of
each app creates the tables it owns, the gateway's lifespan opens and closes
the httpx clients it talks to the services with.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from booking_platform.configs.settings import settings
from booking_platform.cores.auth_gate import AuthGateMiddleware
from booking_platform.cores.db import (
    BookingBase, PaymentBase, UserBase, booking_engine, payment_engine, user_engine
)
from booking_platform.cores.exceptions import DownstreamError
from booking_platform.external.service_clients import (
    BookingServiceClient, FacilityServiceClient, PaymentServiceClient, UserServiceClient
)
from booking_platform.services.bookings.booking_group_service import BookingGroupIdGenerator
from booking_platform.services.gateway.saga_orchestrator import BookingPaymentSaga
from booking_platform.services.payments.payment_strategies import PaymentDispatcher, create_default_dispatcher

# Models must be imported so their tables are registered on the bases
import booking_platform.models  # noqa: F401

from booking_platform.apis.booking_api import router as booking_router
from booking_platform.apis.payment_api import router as payment_router
from booking_platform.apis.auth_api import router as auth_router
from booking_platform.apis.gateway.booking_gateway_api import router as booking_gateway_router
from booking_platform.apis.gateway.payment_gateway_api import router as payment_gateway_router
from booking_platform.apis.gateway.facility_gateway_api import router as facility_gateway_router
from booking_platform.apis.gateway.auth_gateway_api import router as auth_gateway_router
from booking_platform.apis.gateway.relay import handle_downstream_error


async def create_tables(engine: AsyncEngine, base) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(base.metadata.create_all)


def add_health_route(app: FastAPI, service: str) -> None:
    @app.get("/")
    def root():
        return {"status": "ok", "service": service}


@asynccontextmanager
async def booking_lifespan(app: FastAPI):
    await create_tables(booking_engine, BookingBase)
    yield


@asynccontextmanager
async def payment_lifespan(app: FastAPI):
    await create_tables(payment_engine, PaymentBase)
    yield


@asynccontextmanager
async def user_lifespan(app: FastAPI):
    await create_tables(user_engine, UserBase)
    yield


def create_booking_app() -> FastAPI:
    app = FastAPI(title="booking-service", lifespan=booking_lifespan)
    app.state.group_id_generator = BookingGroupIdGenerator()

    app.include_router(booking_router, prefix="/api/bookings", tags=["Bookings"])
    add_health_route(app, "booking")
    return app


def create_payment_app(dispatcher: PaymentDispatcher = None) -> FastAPI:
    app = FastAPI(title="payment-service", lifespan=payment_lifespan)
    app.state.payment_dispatcher = dispatcher or create_default_dispatcher()

    app.include_router(payment_router, prefix="/api/payments", tags=["Payments"])
    add_health_route(app, "payment")
    return app


def create_user_app() -> FastAPI:
    app = FastAPI(title="user-service", lifespan=user_lifespan)

    app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
    add_health_route(app, "user")
    return app


def set_gateway_clients(app: FastAPI, booking_client, payment_client, facility_client, user_client) -> None:
    app.state.booking_client = booking_client
    app.state.payment_client = payment_client
    app.state.facility_client = facility_client
    app.state.user_client = user_client
    app.state.saga = BookingPaymentSaga(booking_client, payment_client, facility_client)


"""
Builds the edge gateway.
    - Clients passed in are used as-is and never closed by the gateway (tests wire them to in-process apps).
    - Missing clients are created from the configured service URLs at startup and closed at shutdown.
"""
def create_gateway_app(
    booking_client: BookingServiceClient = None,
    payment_client: PaymentServiceClient = None,
    facility_client: FacilityServiceClient = None,
    user_client: UserServiceClient = None
) -> FastAPI:

    @asynccontextmanager
    async def gateway_lifespan(app: FastAPI):
        owned = []
        clients = {}
        for name, given, client_class, base_url in (
            ("booking", booking_client, BookingServiceClient, settings.BOOKING_SERVICE_URL),
            ("payment", payment_client, PaymentServiceClient, settings.PAYMENT_SERVICE_URL),
            ("facility", facility_client, FacilityServiceClient, settings.FACILITY_SERVICE_URL),
            ("user", user_client, UserServiceClient, settings.USER_SERVICE_URL),
        ):
            if given is None:
                given = client_class.from_url(base_url)
                owned.append(given)
            clients[name] = given

        set_gateway_clients(app, clients["booking"], clients["payment"], clients["facility"], clients["user"])
        try:
            yield
        finally:
            for client in owned:
                await client.close()

    app = FastAPI(title="booking-gateway", lifespan=gateway_lifespan)

    # Lifespan does not run under ASGITransport, so injected clients are wired right away
    if None not in (booking_client, payment_client, facility_client, user_client):
        set_gateway_clients(app, booking_client, payment_client, facility_client, user_client)

    app.add_middleware(AuthGateMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DownstreamError, handle_downstream_error)

    app.include_router(booking_gateway_router, prefix="/bookings", tags=["Bookings"])
    app.include_router(payment_gateway_router, prefix="/payments", tags=["Payments"])
    app.include_router(facility_gateway_router, prefix="/facilities", tags=["Facilities"])
    app.include_router(auth_gateway_router, prefix="/api/auth", tags=["Auth"])
    add_health_route(app, "gateway")
    return app
