import logging
from datetime import timedelta

import pytest
from jose import jwt

from booking_platform.configs.settings import settings
from booking_platform.cores.auth_gate import check_public_path
from booking_platform.cores.token import ALGORITHM, create_access_token, get_bearer_token
from booking_platform.external.service_clients import UserServiceClient
from tests.service_doubles import create_asgi_client, create_failing_client, create_status_client


def create_auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.parametrize("path, expected", [
    ("/", True),
    ("/api/auth/login", True),
    ("/api/auth/logout", True),
    ("/api/auth/register/student", True),
    ("/api/auth/registerX", False),
    ("/api/auth/logout-all", False),
    ("/bookings/user", False),
    ("/payments/create", False),
])
def test_public_paths(path, expected):
    assert check_public_path(path) is expected


@pytest.mark.parametrize("header, expected", [
    ("Bearer abc", "abc"),
    ("bearer abc", "abc"),
    ("Basic abc", None),
    ("Bearer", None),
    ("", None),
    (None, None),
])
def test_bearer_token_extraction(header, expected):
    assert get_bearer_token(header) == expected


async def test_valid_token_reaches_router(gateway_client):
    token = create_access_token({"user_id": 1, "role": "student"})

    response = await gateway_client.get("/bookings/user", params={"userId": 1}, headers=create_auth_header(token))

    assert response.status_code == 200
    assert response.json() == []


async def test_valid_token_runs_saga(gateway_client):
    token = create_access_token({"user_id": 1, "role": "student"})

    response = await gateway_client.post("/payments/create", headers=create_auth_header(token), json={
        "userId": 1,
        "facilityId": 5,
        "date": "2024-06-01",
        "timeSlots": [{"startHour": 10, "endHour": 12}],
        "totalAmount": 40,
        "paymentMethod": "PayPal",
    })

    assert response.status_code == 200
    assert response.json()["payment"]["transactionId"].startswith("pp_")


@pytest.mark.parametrize("token", [
    "not-a-jwt",
    create_access_token({"user_id": 1}, expires_delta=timedelta(minutes=-5)),
])
async def test_rejected_token_is_401(gateway_client, token, caplog):
    caplog.set_level(logging.WARNING)

    response = await gateway_client.get("/bookings/user", params={"userId": 1}, headers=create_auth_header(token))

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid JWT Token"}
    assert "Token rejected" in caplog.text


@pytest.mark.parametrize("user_client_factory", [
    lambda: create_failing_client("http://user"),
    lambda: create_status_client("http://user", 502, {"message": "bad gateway"}),
    lambda: create_status_client("http://user", 200, {"valid": False}),
])
async def test_validation_failure_is_500(build_gateway, user_client_factory):
    gateway = build_gateway(user_client=UserServiceClient(user_client_factory()))
    async with create_asgi_client(gateway, "http://test") as client:
        response = await client.get(
            "/bookings/user", params={"userId": 1}, headers=create_auth_header(create_access_token({"user_id": 1}))
        )

    assert response.status_code == 500
    assert response.json() == {"message": "Internal Error"}


async def test_public_path_skips_validation(build_gateway):
    # Validation would fail, but the health route never asks for it
    gateway = build_gateway(user_client=UserServiceClient(create_failing_client("http://user")))
    async with create_asgi_client(gateway, "http://test") as client:
        response = await client.get("/", headers=create_auth_header("garbage"))

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "gateway"}


async def test_missing_header_is_forwarded(gateway_client, caplog):
    caplog.set_level(logging.WARNING)

    response = await gateway_client.get("/bookings/user", params={"userId": 1})

    assert response.status_code == 200
    assert "Missing or malformed Authorization header" in caplog.text


async def test_missing_header_can_be_rejected(gateway_client, monkeypatch):
    monkeypatch.setattr(settings, "REJECT_MISSING_TOKEN", True)

    response = await gateway_client.get("/bookings/user", params={"userId": 1})

    assert response.status_code == 401


async def test_logout_invalidates_token(gateway_client):
    token = create_access_token({"user_id": 1, "role": "student"})

    logout = await gateway_client.post("/api/auth/logout", json={"access_token": token})
    again = await gateway_client.post("/api/auth/logout", json={"access_token": token})
    response = await gateway_client.get("/bookings/user", params={"userId": 1}, headers=create_auth_header(token))

    assert logout.status_code == 200
    assert logout.json() == {"success": True, "message": "Logout successful"}
    assert again.status_code == 200
    assert response.status_code == 401


async def test_user_service_validation(user_app):
    token = create_access_token({"user_id": 9, "role": "admin"})

    async with create_asgi_client(user_app, "http://user") as client:
        valid = await client.post("/api/auth/validate-token", params={"token": token})
        refresh = await client.post("/api/auth/validate-token", params={"token": jwt.encode(
            {"user_id": 9, "type": "refresh", "jti": "r1"}, settings.SECRET_KEY, algorithm=ALGORITHM
        )})

    assert valid.status_code == 200
    body = valid.json()
    assert body["valid"] is True
    assert body["user_id"] == 9
    assert body["role"] == "admin"
    assert body["token_id"]
    assert refresh.status_code == 401
    assert refresh.json() == {"detail": "Invalid token format"}
