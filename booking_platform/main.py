# booking_platform/main.py

import logging
import sys

import uvicorn

from booking_platform import create_booking_app, create_gateway_app, create_payment_app, create_user_app
from booking_platform.configs.settings import settings

APP_FACTORIES = {
    "gateway": create_gateway_app,
    "booking": create_booking_app,
    "payment": create_payment_app,
    "user": create_user_app,
}


def create_selected_app(service_name: str):
    try:
        factory = APP_FACTORIES[service_name]
    except KeyError:
        raise SystemExit(f"Unknown service '{service_name}'. Choose one of: {', '.join(APP_FACTORIES)}")
    return factory()


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = create_selected_app(settings.SERVICE_NAME)

if __name__ == "__main__":
    if len(sys.argv) > 1:
        app = create_selected_app(sys.argv[1])
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
