"""Repository for PasswordResetToken entity."""

from uuid import UUID

from sqlalchemy import delete
from sqlmodel import col, select

from src.authgate.models import PasswordResetToken
from src.authgate.models.base import utc_now
from src.authgate.repositories.base import BaseRepository


class PasswordResetTokenRepository(BaseRepository[PasswordResetToken]):
    """Repository for password reset tokens."""

    model = PasswordResetToken

    async def get_valid_by_hash(self, token_hash: str) -> PasswordResetToken | None:
        """Get and row-lock an unexpired reset token by hash. Consumed tokens no longer exist."""
        query = (
            select(PasswordResetToken)
            .where(
                PasswordResetToken.token_hash == token_hash,
                PasswordResetToken.expires_at > utc_now(),
            )
            .with_for_update()
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def delete_for_user(self, user_id: UUID) -> None:
        """Delete all outstanding reset tokens for a user (no commit)."""
        await self.session.execute(
            delete(PasswordResetToken).where(col(PasswordResetToken.user_id) == user_id)
        )

    async def consume(self, token_id: UUID) -> bool:
        """Delete one reset token (no commit). False when it was already gone."""
        result = await self.session.execute(
            delete(PasswordResetToken).where(col(PasswordResetToken.id) == token_id)
        )
        return result.rowcount > 0
