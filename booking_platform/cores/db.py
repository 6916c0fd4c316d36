"""
SQLAlchemy configuration for async database access.
Every domain service owns its own store, so each one gets its own engine,
session factory and declarative base. SQLite (development) and any async
driver URL (production) are supported through settings.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from booking_platform.configs.settings import settings


def create_engine_for(database_url: str) -> AsyncEngine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # SQLite requires check_same_thread=False for async
        connect_args = {"check_same_thread": False}

    return create_async_engine(
        database_url,
        connect_args=connect_args,
        echo=False
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False
    )


BookingBase = declarative_base()
PaymentBase = declarative_base()
UserBase = declarative_base()

booking_engine = create_engine_for(settings.BOOKING_DATABASE_URI)
payment_engine = create_engine_for(settings.PAYMENT_DATABASE_URI)
user_engine = create_engine_for(settings.USER_DATABASE_URI)

booking_session = create_session_factory(booking_engine)
payment_session = create_session_factory(payment_engine)
user_session = create_session_factory(user_engine)
