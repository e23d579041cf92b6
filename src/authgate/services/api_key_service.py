"""API key service - issuance, validation and lifecycle of long-lived keys."""

import asyncio
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.authgate.core.audit import audit_event
from src.authgate.core.config import Settings
from src.authgate.core.db import get_session_factory
from src.authgate.core.errors import NotFoundError
from src.authgate.core.logging import get_logger
from src.authgate.core.security import generate_api_key, hash_token
from src.authgate.models import ApiKey
from src.authgate.models.base import to_naive_utc, utc_now
from src.authgate.repositories import ApiKeyRepository, UserRepository
from src.authgate.services.principal import Principal

logger = get_logger(__name__)

# Strong references to in-flight last_used_at writes
_background_tasks: set[asyncio.Task[None]] = set()


async def stamp_last_used(key_id: UUID, used_at: datetime) -> None:
    """Record key usage on a dedicated session. Failures are logged, never raised."""
    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            await ApiKeyRepository(session).touch_last_used(key_id, used_at)
            await session.commit()
    except Exception as e:
        logger.warning(
            "Failed to update API key last_used_at",
            api_key_id=str(key_id),
            error=str(e),
        )


def _schedule_stamp(key_id: UUID) -> None:
    task = asyncio.create_task(stamp_last_used(key_id, utc_now()))
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


async def drain_background_tasks() -> None:
    """Wait for pending last_used_at writes. Call during shutdown."""
    if _background_tasks:
        await asyncio.gather(*_background_tasks, return_exceptions=True)


class ApiKeyService:
    """API key lifecycle.

    Only the SHA-256 of a key is stored. The raw key is returned once, by
    `create`, and cannot be recovered afterwards.
    """

    def __init__(
        self,
        api_key_repo: ApiKeyRepository,
        user_repo: UserRepository,
        session: AsyncSession,
        settings: Settings,
    ):
        self.api_key_repo = api_key_repo
        self.user_repo = user_repo
        self.session = session
        self.settings = settings

    async def create(
        self,
        user_id: UUID,
        name: str | None = None,
        expires_at: datetime | None = None,
    ) -> tuple[ApiKey, str]:
        """Issue a key for a user.

        Returns:
            Tuple of (stored key record, raw key)

        Raises:
            NotFoundError: the user does not exist
        """
        if await self.user_repo.get_by_id(user_id) is None:
            raise NotFoundError("User not found")

        raw_key = generate_api_key(self.settings.api_key_prefix)
        try:
            api_key = ApiKey(
                key_hash=hash_token(raw_key),
                user_id=user_id,
                name=name,
                expires_at=to_naive_utc(expires_at) if expires_at else None,
            )
            self.api_key_repo.add(api_key)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("api_key.created", user_id=user_id, api_key_id=api_key.id)
        return api_key, raw_key

    async def validate(self, raw_key: str) -> Principal | None:
        """Resolve a raw key to its owner.

        Unknown, revoked and expired keys all yield None. A successful
        lookup schedules a last_used_at update that never delays or fails
        the caller.
        """
        row = await self.api_key_repo.get_by_hash_with_user(hash_token(raw_key))
        if row is None:
            return None
        api_key, user = row
        if not api_key.is_active:
            return None
        if api_key.expires_at is not None and api_key.expires_at <= utc_now():
            return None

        _schedule_stamp(api_key.id)
        return Principal(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            auth_method="api_key",
            api_key_id=api_key.id,
        )

    async def list_for_user(self, user_id: UUID) -> list[ApiKey]:
        """List a user's keys, newest first."""
        return await self.api_key_repo.list_for_user(user_id)

    async def _get_owned(self, key_id: UUID, user_id: UUID) -> ApiKey:
        api_key = await self.api_key_repo.get_owned(key_id, user_id)
        if api_key is None:
            raise NotFoundError("API key not found")
        return api_key

    async def revoke(self, key_id: UUID, user_id: UUID) -> None:
        """Deactivate a key owned by the user.

        Raises:
            NotFoundError: no such key, or it belongs to another user
        """
        api_key = await self._get_owned(key_id, user_id)
        try:
            api_key.is_active = False
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("api_key.revoked", user_id=user_id, api_key_id=key_id)

    async def delete(self, key_id: UUID, user_id: UUID) -> None:
        """Delete a key owned by the user.

        Raises:
            NotFoundError: no such key, or it belongs to another user
        """
        api_key = await self._get_owned(key_id, user_id)
        try:
            await self.api_key_repo.delete(api_key)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("api_key.deleted", user_id=user_id, api_key_id=key_id)
