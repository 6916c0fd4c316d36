from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from booking_platform.cores.db import booking_session, payment_session, user_session
from booking_platform.external.service_clients import BookingServiceClient, PaymentServiceClient, UserServiceClient
from booking_platform.services.bookings.booking_group_service import BookingGroupIdGenerator
from booking_platform.services.gateway.saga_orchestrator import BookingPaymentSaga
from booking_platform.services.payments.payment_strategies import PaymentDispatcher

"""
Dependency providers shared by the routers.
Each service gets a session on its own store; collaborators built at startup
(dispatch table, id generator, saga, remote clients) are read from `app.state`
so tests can swap them for fakes.
"""
async def get_booking_db() -> AsyncGenerator[AsyncSession, None]:
    session = booking_session()
    try:
        yield session
    finally:
        await session.close()


async def get_payment_db() -> AsyncGenerator[AsyncSession, None]:
    session = payment_session()
    try:
        yield session
    finally:
        await session.close()


async def get_user_db() -> AsyncGenerator[AsyncSession, None]:
    session = user_session()
    try:
        yield session
    finally:
        await session.close()


def get_group_id_generator(request: Request) -> BookingGroupIdGenerator:
    return request.app.state.group_id_generator


def get_payment_dispatcher(request: Request) -> PaymentDispatcher:
    return request.app.state.payment_dispatcher


def get_saga(request: Request) -> BookingPaymentSaga:
    return request.app.state.saga


def get_principal(request: Request) -> Optional[dict]:
    """Principal attached by the auth gate, None when the request came in without a bearer token."""
    return getattr(request.state, "principal", None)


def get_booking_client(request: Request) -> BookingServiceClient:
    return request.app.state.booking_client


def get_payment_client(request: Request) -> PaymentServiceClient:
    return request.app.state.payment_client


def get_user_client(request: Request) -> UserServiceClient:
    return request.app.state.user_client
