"""Tests for the password reset flow."""

import pytest
from httpx import AsyncClient
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.authgate.core.config import get_settings
from src.authgate.core.errors import InvalidCredentialsError, InvalidOrExpiredResetTokenError
from src.authgate.core.security import hash_token
from src.authgate.models import PasswordResetToken, User
from src.authgate.services import AuthService
from tests.factories import DEFAULT_TEST_PASSWORD, PasswordResetTokenFactory
from tests.helpers import bearer, sign_in

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

NEW_PASSWORD = "purple-monkey-dishwasher-99"


async def count_reset_tokens(session: AsyncSession) -> int:
    query = select(func.count()).select_from(PasswordResetToken)
    return (await session.execute(query)).scalar_one()


class TestResetService:
    async def test_unknown_email_returns_none(
        self, auth_service: AuthService, db_session: AsyncSession
    ) -> None:
        assert await auth_service.request_password_reset("nobody@example.com") is None
        assert await count_reset_tokens(db_session) == 0

    async def test_only_hash_is_stored(
        self, auth_service: AuthService, db_session: AsyncSession, test_user: User
    ) -> None:
        token = await auth_service.request_password_reset(test_user.email)

        assert token is not None
        assert len(token) == 64
        record = (await db_session.execute(select(PasswordResetToken))).scalar_one()
        assert record.token_hash == hash_token(token)
        assert record.token_hash != token

    async def test_new_request_replaces_outstanding_token(
        self, auth_service: AuthService, db_session: AsyncSession, test_user: User
    ) -> None:
        first = await auth_service.request_password_reset(test_user.email)
        second = await auth_service.request_password_reset(test_user.email)

        assert first != second
        assert await count_reset_tokens(db_session) == 1
        with pytest.raises(InvalidOrExpiredResetTokenError):
            await auth_service.confirm_password_reset(first, NEW_PASSWORD)

    async def test_confirm_changes_password_and_revokes_sessions(
        self, auth_service: AuthService, db_session: AsyncSession, test_user: User
    ) -> None:
        signed_in = await auth_service.sign_in(test_user.username, DEFAULT_TEST_PASSWORD)
        token = await auth_service.request_password_reset(test_user.email)

        await auth_service.confirm_password_reset(token, NEW_PASSWORD)

        with pytest.raises(InvalidCredentialsError):
            await auth_service.sign_in(test_user.username, DEFAULT_TEST_PASSWORD)
        result = await auth_service.sign_in(test_user.username, NEW_PASSWORD)
        assert result.user.id == test_user.id
        assert [s.id for s in await auth_service.list_sessions(test_user.id)] == [
            result.session_id
        ]
        assert signed_in.session_id != result.session_id
        assert await count_reset_tokens(db_session) == 0

    async def test_token_is_single_use(self, auth_service: AuthService, test_user: User) -> None:
        token = await auth_service.request_password_reset(test_user.email)
        await auth_service.confirm_password_reset(token, NEW_PASSWORD)

        with pytest.raises(InvalidOrExpiredResetTokenError):
            await auth_service.confirm_password_reset(token, "another-strong-passphrase-77")

    async def test_token_consumed_concurrently_is_rejected(
        self,
        auth_service: AuthService,
        db_session: AsyncSession,
        engine: AsyncEngine,
        test_user: User,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        token = await auth_service.request_password_reset(test_user.email)
        original_digest = test_user.hashed_password
        real_hasher = auth_service.hasher

        class RacingHasher:
            """Lets another transaction use the token while the new password is hashed."""

            async def hash_async(self, password: str) -> tuple[str, str]:
                async with AsyncSession(engine) as other:
                    await other.execute(delete(PasswordResetToken))
                    await other.commit()
                return await real_hasher.hash_async(password)

        monkeypatch.setattr(auth_service, "hasher", RacingHasher())

        with pytest.raises(InvalidOrExpiredResetTokenError):
            await auth_service.confirm_password_reset(token, NEW_PASSWORD)

        await db_session.refresh(test_user)
        assert test_user.hashed_password == original_digest

    async def test_expired_token_leaves_user_unchanged(
        self, auth_service: AuthService, db_session: AsyncSession, test_user: User
    ) -> None:
        raw_token = "a" * 64
        db_session.add(
            PasswordResetTokenFactory.expired(user_id=test_user.id, token_hash=hash_token(raw_token))
        )
        await db_session.commit()
        original_digest = test_user.hashed_password

        with pytest.raises(InvalidOrExpiredResetTokenError):
            await auth_service.confirm_password_reset(raw_token, NEW_PASSWORD)

        await db_session.refresh(test_user)
        assert test_user.hashed_password == original_digest

    async def test_unknown_token(self, auth_service: AuthService) -> None:
        with pytest.raises(InvalidOrExpiredResetTokenError):
            await auth_service.confirm_password_reset("f" * 64, NEW_PASSWORD)


class TestResetApi:
    async def test_responses_match_for_known_and_unknown_email(
        self, client: AsyncClient, test_user: User
    ) -> None:
        known = await client.post(
            "/api/v1/auth/password-reset/request", json={"email": test_user.email}
        )
        unknown = await client.post(
            "/api/v1/auth/password-reset/request", json={"email": "nobody@example.com"}
        )

        assert known.status_code == unknown.status_code == 200
        assert known.json()["message"] == unknown.json()["message"]
        # Non-production environments expose the token for testing
        assert len(known.json()["token"]) == 64
        assert "token" not in unknown.json()

    async def test_token_hidden_in_production(
        self, client: AsyncClient, test_user: User, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(get_settings(), "app_env", "production")

        response = await client.post(
            "/api/v1/auth/password-reset/request", json={"email": test_user.email}
        )

        assert response.status_code == 200
        assert "token" not in response.json()

    async def test_full_flow(self, client: AsyncClient, test_user: User) -> None:
        before = await sign_in(client, test_user.username)
        requested = await client.post(
            "/api/v1/auth/password-reset/request", json={"email": test_user.email}
        )

        confirmed = await client.post(
            "/api/v1/auth/password-reset/confirm",
            json={"token": requested.json()["token"], "password": NEW_PASSWORD},
        )

        assert confirmed.status_code == 200
        assert confirmed.json()["message"]
        me = await client.get("/api/v1/users/me", headers=bearer(before["access_token"]))
        assert me.status_code == 401
        await sign_in(client, test_user.username, NEW_PASSWORD)

    async def test_invalid_token(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/password-reset/confirm",
            json={"token": "0" * 64, "password": NEW_PASSWORD},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid or expired reset token"

    async def test_weak_new_password(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/auth/password-reset/confirm",
            json={"token": "0" * 64, "password": "password"},
        )

        assert response.status_code == 422
