"""Repository for User entity."""

from typing import Any

from sqlalchemy import delete, func, or_
from sqlmodel import col, select

from src.authgate.models import ApiKey, PasswordResetToken, User, UserSession
from src.authgate.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address (exact match)."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        """Get user by username (exact match)."""
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_login(self, login: str) -> User | None:
        """Get user whose username OR email equals `login`."""
        result = await self.session.execute(
            select(User).where(or_(User.username == login, User.email == login))
        )
        return result.scalars().first()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with the given email exists."""
        return await self.get_by_email(email) is not None

    async def exists_by_username(self, username: str) -> bool:
        """Check if a user with the given username exists."""
        return await self.get_by_username(username) is not None

    def _filtered(self, query: Any, search: str | None, role: str | None) -> Any:
        """Apply the search and role filters shared by the list and count queries."""
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    col(User.name).ilike(pattern),
                    col(User.username).ilike(pattern),
                    col(User.email).ilike(pattern),
                )
            )
        if role:
            query = query.where(User.role == role)
        return query

    async def list_page(
        self,
        page: int,
        limit: int,
        search: str | None = None,
        role: str | None = None,
    ) -> tuple[list[User], int]:
        """List users newest first with offset pagination.

        Returns:
            Tuple of (users on this page, total matching users)
        """
        count_query = self._filtered(select(func.count()).select_from(User), search, role)
        total = (await self.session.execute(count_query)).scalar_one()

        query = self._filtered(select(User), search, role)
        query = (
            query.order_by(col(User.created_at).desc(), col(User.id).desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def delete_with_credentials(self, user: User) -> None:
        """Delete a user and every credential row that belongs to it (no commit)."""
        for model in (UserSession, PasswordResetToken, ApiKey):
            await self.session.execute(
                delete(model).where(model.user_id == user.id)  # type: ignore[attr-defined]
            )
        await self.session.delete(user)

