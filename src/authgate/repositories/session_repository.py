"""Repository for UserSession entity."""

from typing import Any
from uuid import UUID

from sqlalchemy import update
from sqlmodel import col, select

from src.authgate.models import User, UserSession
from src.authgate.models.base import utc_now
from src.authgate.repositories.base import BaseRepository


class SessionRepository(BaseRepository[UserSession]):
    """Repository for UserSession entity.

    A session is live when it is not revoked and its refresh expiry lies in
    the future. Expired rows are never swept; every lookup filters them out.
    """

    model = UserSession

    def _live(self) -> Any:
        return select(UserSession).where(
            col(UserSession.revoked_at).is_(None),
            UserSession.refresh_expires_at > utc_now(),
        )

    async def get_valid(self, session_id: UUID, for_update: bool = False) -> UserSession | None:
        """Get a live session by id.

        Args:
            session_id: The session id (the `sid` token claim)
            for_update: Lock the row until the transaction ends (no-op on SQLite)
        """
        query = self._live().where(UserSession.id == session_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_valid_with_user(self, session_id: UUID) -> tuple[UserSession, User] | None:
        """Get a live session together with its owning user."""
        query = (
            select(UserSession, User)
            .join(User, col(User.id) == col(UserSession.user_id))
            .where(
                UserSession.id == session_id,
                col(UserSession.revoked_at).is_(None),
                UserSession.refresh_expires_at > utc_now(),
            )
        )
        row = (await self.session.execute(query)).first()
        if row is None:
            return None
        return row[0], row[1]

    async def get_valid_for_user(self, session_id: UUID, user_id: UUID) -> UserSession | None:
        """Get a live session only if it belongs to `user_id`."""
        query = self._live().where(UserSession.id == session_id, UserSession.user_id == user_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_valid_for_user(self, user_id: UUID) -> list[UserSession]:
        """List live sessions of a user, newest first."""
        query = self._live().where(UserSession.user_id == user_id)
        query = query.order_by(col(UserSession.created_at).desc(), col(UserSession.id).desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def revoke_all_for_user(self, user_id: UUID) -> int:
        """Revoke every live session of a user (no commit). Returns the count."""
        result = await self.session.execute(
            update(UserSession)
            .where(
                col(UserSession.user_id) == user_id,
                col(UserSession.revoked_at).is_(None),
                col(UserSession.refresh_expires_at) > utc_now(),
            )
            .values(revoked_at=utc_now())
        )
        return result.rowcount or 0  # type: ignore[attr-defined]
