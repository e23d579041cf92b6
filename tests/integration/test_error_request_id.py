"""Tests that error responses carry the request correlation id."""

import pytest
from httpx import AsyncClient

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def test_not_found_includes_request_id(client: AsyncClient) -> None:
    response = await client.get("/api/v1/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["request_id"]
    assert body["request_id"] == response.headers["X-Request-ID"]


async def test_unauthenticated_includes_request_id_and_challenge(client: AsyncClient) -> None:
    response = await client.get("/api/v1/users/me")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["request_id"] == response.headers["X-Request-ID"]


async def test_client_request_id_is_echoed(client: AsyncClient) -> None:
    request_id = "7f2c1d9e4b8a4c6f9e0d1a2b3c4d5e6f"

    response = await client.get("/api/v1/users/me", headers={"X-Request-ID": request_id})

    assert response.headers["X-Request-ID"] == request_id
    assert response.json()["request_id"] == request_id


async def test_validation_error_status(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/signin", json={"login": "someone"})
    assert response.status_code == 422
