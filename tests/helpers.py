"""Test helper functions for common request patterns."""

from typing import Any
from uuid import uuid7

from httpx import AsyncClient

from src.authgate.models import User
from tests.factories import DEFAULT_TEST_PASSWORD


def bearer(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


def signup_payload(**overrides: Any) -> dict[str, Any]:
    """Build a valid sign-up body with unique username and email."""
    unique_id = uuid7().hex[-8:]
    payload: dict[str, Any] = {
        "name": "New User",
        "username": f"new_{unique_id}",
        "email": f"new_{unique_id}@example.com",
        "password": DEFAULT_TEST_PASSWORD,
    }
    payload.update(overrides)
    return payload


async def sign_up(client: AsyncClient, **overrides: Any) -> dict[str, Any]:
    """Sign up over HTTP and return the response body."""
    response = await client.post("/api/v1/auth/signup", json=signup_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


async def sign_in(client: AsyncClient, login: str, password: str = DEFAULT_TEST_PASSWORD) -> dict:
    """Sign in over HTTP and return the response body."""
    response = await client.post(
        "/api/v1/auth/signin",
        json={"login": login, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()


async def sign_in_headers(client: AsyncClient, user: User) -> dict[str, str]:
    """Sign `user` in over HTTP and return bearer headers."""
    body = await sign_in(client, user.username)
    return bearer(body["access_token"])
