from typing import List
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

"""
Loaded automatically from the `.env` file or the process environment.
    - One settings object shared by the gateway and the three domain services.
    - Each service only reads the keys it needs (its own database, the URLs of its peers).
    - Global configuration
"""
class Settings(BaseSettings):
    SERVICE_NAME: str = "gateway"
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:8080"]

    BOOKING_DATABASE_URI: str = "sqlite+aiosqlite:///./bookings.db"
    PAYMENT_DATABASE_URI: str = "sqlite+aiosqlite:///./payments.db"
    USER_DATABASE_URI: str = "sqlite+aiosqlite:///./users.db"

    BOOKING_SERVICE_URL: str = "http://127.0.0.1:8081/api/bookings"
    PAYMENT_SERVICE_URL: str = "http://127.0.0.1:8082/api/payments"
    FACILITY_SERVICE_URL: str = "http://127.0.0.1:8083/api/facilities"
    USER_SERVICE_URL: str = "http://127.0.0.1:8084/api/auth"
    REMOTE_TIMEOUT_SECONDS: float = 10.0

    SECRET_KEY: str = "change-me-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Fixed hourly rate used to price every booked hour
    HOURLY_RATE: float = 20.0

    PUBLIC_ENDPOINTS: List[str] = [
        "/api/auth/register",
        "/api/auth/login",
        "/api/auth/refresh_token",
        "/api/auth/logout",
    ]
    # False keeps the historical behavior of forwarding requests without a bearer header
    REJECT_MISSING_TOKEN: bool = False

    EXTRA_PAYMENT_STATUSES: List[str] = []

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
