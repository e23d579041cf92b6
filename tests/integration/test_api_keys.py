"""Tests for API key issuance, validation and lifecycle."""

from datetime import timedelta
from uuid import uuid7

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.authgate.core.errors import NotFoundError
from src.authgate.core.security import hash_token
from src.authgate.models import ApiKey, User
from src.authgate.models.base import utc_now
from src.authgate.services import ApiKeyService
from src.authgate.services.api_key_service import drain_background_tasks, stamp_last_used
from tests.factories import ApiKeyFactory, UserFactory

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


class TestApiKeyService:
    async def test_create_returns_raw_key_once(
        self, api_key_service: ApiKeyService, test_user: User
    ) -> None:
        api_key, raw_key = await api_key_service.create(test_user.id, "ci")

        assert raw_key.startswith("sk_")
        assert len(raw_key) == len("sk_") + 43
        assert api_key.key_hash == hash_token(raw_key)
        assert api_key.name == "ci"
        assert api_key.is_active is True
        listed = await api_key_service.list_for_user(test_user.id)
        assert [k.id for k in listed] == [api_key.id]

    async def test_create_for_unknown_user(self, api_key_service: ApiKeyService) -> None:
        with pytest.raises(NotFoundError):
            await api_key_service.create(uuid7(), "ghost")

    async def test_validate_resolves_owner(
        self, api_key_service: ApiKeyService, test_user: User
    ) -> None:
        api_key, raw_key = await api_key_service.create(test_user.id)

        principal = await api_key_service.validate(raw_key)

        assert principal is not None
        assert principal.user_id == test_user.id
        assert principal.auth_method == "api_key"
        assert principal.api_key_id == api_key.id
        assert principal.session_id is None

    async def test_validate_stamps_last_used(
        self, api_key_service: ApiKeyService, db_session: AsyncSession, test_user: User
    ) -> None:
        api_key, raw_key = await api_key_service.create(test_user.id)

        await api_key_service.validate(raw_key)
        await drain_background_tasks()

        await db_session.refresh(api_key)
        assert api_key.last_used_at is not None

    async def test_validate_succeeds_when_stamping_fails(
        self,
        api_key_service: ApiKeyService,
        test_user: User,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _, raw_key = await api_key_service.create(test_user.id)

        def broken_factory():
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(
            "src.authgate.services.api_key_service.get_session_factory", broken_factory
        )

        principal = await api_key_service.validate(raw_key)
        await drain_background_tasks()

        assert principal is not None

    async def test_stamp_last_used(self, db_session: AsyncSession, test_user: User) -> None:
        api_key = ApiKeyFactory.build(user_id=test_user.id)
        db_session.add(api_key)
        await db_session.commit()
        used_at = utc_now()

        await stamp_last_used(api_key.id, used_at)

        await db_session.refresh(api_key)
        assert api_key.last_used_at == used_at

    @pytest.mark.parametrize("factory_method", ["revoked", "expired"])
    async def test_inactive_keys_do_not_validate(
        self,
        api_key_service: ApiKeyService,
        db_session: AsyncSession,
        test_user: User,
        factory_method: str,
    ) -> None:
        raw_key = "sk_" + "x" * 43
        build = getattr(ApiKeyFactory, factory_method)
        db_session.add(build(user_id=test_user.id, key_hash=hash_token(raw_key)))
        await db_session.commit()

        assert await api_key_service.validate(raw_key) is None

    async def test_future_expiry_validates(
        self, api_key_service: ApiKeyService, test_user: User
    ) -> None:
        _, raw_key = await api_key_service.create(
            test_user.id, expires_at=utc_now() + timedelta(days=1)
        )

        assert await api_key_service.validate(raw_key) is not None

    async def test_unknown_key(self, api_key_service: ApiKeyService) -> None:
        assert await api_key_service.validate("sk_unknown") is None

    async def test_revoke(self, api_key_service: ApiKeyService, test_user: User) -> None:
        api_key, raw_key = await api_key_service.create(test_user.id)

        await api_key_service.revoke(api_key.id, test_user.id)

        assert await api_key_service.validate(raw_key) is None
        listed = await api_key_service.list_for_user(test_user.id)
        assert listed[0].is_active is False

    async def test_delete(self, api_key_service: ApiKeyService, test_user: User) -> None:
        api_key, raw_key = await api_key_service.create(test_user.id)

        await api_key_service.delete(api_key.id, test_user.id)

        assert await api_key_service.validate(raw_key) is None
        assert await api_key_service.list_for_user(test_user.id) == []

    async def test_foreign_key_operations(
        self, api_key_service: ApiKeyService, db_session: AsyncSession, test_user: User
    ) -> None:
        other = UserFactory.build()
        db_session.add(other)
        await db_session.commit()
        api_key, raw_key = await api_key_service.create(test_user.id)

        with pytest.raises(NotFoundError):
            await api_key_service.revoke(api_key.id, other.id)
        with pytest.raises(NotFoundError):
            await api_key_service.delete(api_key.id, other.id)
        assert await api_key_service.validate(raw_key) is not None

    async def test_list_is_newest_first(
        self, api_key_service: ApiKeyService, test_user: User
    ) -> None:
        first, _ = await api_key_service.create(test_user.id, "first")
        second, _ = await api_key_service.create(test_user.id, "second")

        listed = await api_key_service.list_for_user(test_user.id)

        assert [k.id for k in listed] == [second.id, first.id]


class TestApiKeyApi:
    async def test_create_and_authenticate(self, client: AsyncClient, user_headers: dict) -> None:
        response = await client.post(
            "/api/v1/api-keys", json={"name": "deploy"}, headers=user_headers
        )

        assert response.status_code == 201
        created = response.json()
        assert created["key"].startswith("sk_")
        assert created["name"] == "deploy"
        assert created["is_active"] is True

        me = await client.get("/api/v1/users/me", headers={"X-API-Key": created["key"]})
        await drain_background_tasks()
        assert me.status_code == 200

        listed = await client.get("/api/v1/api-keys", headers=user_headers)
        assert listed.status_code == 200
        assert [k["id"] for k in listed.json()] == [created["id"]]
        assert "key" not in listed.json()[0]
        assert "key_hash" not in listed.json()[0]

    async def test_revoked_key_is_rejected(self, client: AsyncClient, user_headers: dict) -> None:
        created = (
            await client.post("/api/v1/api-keys", json={}, headers=user_headers)
        ).json()

        response = await client.patch(
            f"/api/v1/api-keys/{created['id']}/revoke", headers=user_headers
        )
        assert response.status_code == 204

        me = await client.get("/api/v1/users/me", headers={"X-API-Key": created["key"]})
        assert me.status_code == 401
        assert me.json()["detail"] == "Invalid API key"

    async def test_invalid_key_falls_through_to_bearer(
        self, client: AsyncClient, user_headers: dict
    ) -> None:
        me = await client.get(
            "/api/v1/users/me", headers={**user_headers, "X-API-Key": "sk_not-a-real-key"}
        )

        assert me.status_code == 200

    async def test_delete(self, client: AsyncClient, user_headers: dict) -> None:
        created = (
            await client.post("/api/v1/api-keys", json={}, headers=user_headers)
        ).json()

        response = await client.delete(f"/api/v1/api-keys/{created['id']}", headers=user_headers)
        assert response.status_code == 204

        listed = await client.get("/api/v1/api-keys", headers=user_headers)
        assert listed.json() == []

    async def test_other_users_key_is_not_found(
        self, client: AsyncClient, user_headers: dict, admin_headers: dict
    ) -> None:
        created = (
            await client.post("/api/v1/api-keys", json={}, headers=user_headers)
        ).json()

        revoke = await client.patch(
            f"/api/v1/api-keys/{created['id']}/revoke", headers=admin_headers
        )
        delete = await client.delete(f"/api/v1/api-keys/{created['id']}", headers=admin_headers)

        assert revoke.status_code == 404
        assert delete.status_code == 404

    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/api-keys")
        assert response.status_code == 401


async def test_deleted_key_row_is_gone(
    api_key_service: ApiKeyService, db_session: AsyncSession, test_user: User
) -> None:
    api_key, _ = await api_key_service.create(test_user.id)
    await api_key_service.delete(api_key.id, test_user.id)

    assert await db_session.get(ApiKey, api_key.id) is None
