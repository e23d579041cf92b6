"""Repository for ApiKey entity."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import update
from sqlmodel import col, select

from src.authgate.models import ApiKey, User
from src.authgate.repositories.base import BaseRepository


class ApiKeyRepository(BaseRepository[ApiKey]):
    """Repository for API keys."""

    model = ApiKey

    async def get_by_hash_with_user(self, key_hash: str) -> tuple[ApiKey, User] | None:
        """Get an API key by hash together with its owner."""
        query = (
            select(ApiKey, User)
            .join(User, col(User.id) == col(ApiKey.user_id))
            .where(ApiKey.key_hash == key_hash)
        )
        row = (await self.session.execute(query)).first()
        if row is None:
            return None
        return row[0], row[1]

    async def get_owned(self, key_id: UUID, user_id: UUID) -> ApiKey | None:
        """Get an API key only if it belongs to `user_id`."""
        result = await self.session.execute(
            select(ApiKey).where(ApiKey.id == key_id, ApiKey.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: UUID) -> list[ApiKey]:
        """List a user's API keys, newest first."""
        result = await self.session.execute(
            select(ApiKey)
            .where(ApiKey.user_id == user_id)
            .order_by(col(ApiKey.created_at).desc(), col(ApiKey.id).desc())
        )
        return list(result.scalars().all())

    async def touch_last_used(self, key_id: UUID, used_at: datetime) -> None:
        """Stamp last_used_at (no commit)."""
        await self.session.execute(
            update(ApiKey).where(col(ApiKey.id) == key_id).values(last_used_at=used_at)
        )
