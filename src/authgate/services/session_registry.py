"""Session registry - lifecycle of the server-side session behind each token pair."""

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID, uuid7

from src.authgate.core.errors import NotFoundError
from src.authgate.models import User, UserSession
from src.authgate.models.base import utc_now
from src.authgate.repositories import SessionRepository


@dataclass(frozen=True)
class DeviceInfo:
    """Client description recorded on a session."""

    device_id: str | None = None
    user_agent: str | None = None


class SessionRegistry:
    """Creates, rotates, lists and revokes sessions.

    Never commits; the caller owns the transaction.
    """

    def __init__(self, session_repo: SessionRepository, refresh_ttl: timedelta):
        self.session_repo = session_repo
        self.refresh_ttl = refresh_ttl

    def create(
        self,
        user_id: UUID,
        device: DeviceInfo,
        refresh_token_hash: str,
        session_id: UUID | None = None,
    ) -> UserSession:
        """Stage a new session expiring one refresh TTL from now."""
        user_session = UserSession(
            id=session_id or uuid7(),
            user_id=user_id,
            device_id=device.device_id,
            user_agent=device.user_agent,
            refresh_token_hash=refresh_token_hash,
            refresh_expires_at=utc_now() + self.refresh_ttl,
        )
        self.session_repo.add(user_session)
        return user_session

    async def find_valid(self, session_id: UUID, for_update: bool = False) -> UserSession | None:
        return await self.session_repo.get_valid(session_id, for_update=for_update)

    async def find_valid_with_user(self, session_id: UUID) -> tuple[UserSession, User] | None:
        return await self.session_repo.get_valid_with_user(session_id)

    def rotate(self, user_session: UserSession, refresh_token_hash: str) -> UserSession:
        """Bind a new refresh token to the session and extend its expiry. Keeps the id."""
        now = utc_now()
        user_session.refresh_token_hash = refresh_token_hash
        user_session.refresh_expires_at = now + self.refresh_ttl
        user_session.rotated_at = now
        return user_session

    async def revoke(self, session_id: UUID, user_id: UUID) -> UserSession:
        """Revoke one live session owned by `user_id`.

        Raises:
            NotFoundError: no live session with that id belongs to the user
        """
        user_session = await self.session_repo.get_valid_for_user(session_id, user_id)
        if user_session is None:
            raise NotFoundError("Session not found")
        user_session.revoked_at = utc_now()
        return user_session

    async def revoke_all(self, user_id: UUID) -> int:
        return await self.session_repo.revoke_all_for_user(user_id)

    async def list_for_user(self, user_id: UUID) -> list[UserSession]:
        """Live sessions of a user, newest first."""
        return await self.session_repo.list_valid_for_user(user_id)
