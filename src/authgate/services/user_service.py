"""User management service - profiles and admin CRUD."""

import math
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.authgate.core.audit import audit_event
from src.authgate.core.errors import (
    DuplicateCredentialError,
    ForbiddenError,
    InvalidOperationError,
    NotFoundError,
)
from src.authgate.core.security import PasswordHasher
from src.authgate.models import User
from src.authgate.models.base import utc_now
from src.authgate.models.enums import UserRole
from src.authgate.repositories import UserRepository
from src.authgate.schemas.pagination import PageMeta
from src.authgate.schemas.user import UserCreate, UserSelfUpdate, UserUpdate
from src.authgate.services.principal import Principal, has_role


class UserService:
    """User management service.

    Access rules live here, not only in the routes: a user may read and edit
    their own record, admins may read and edit any record, and only admins
    may change a role.
    """

    def __init__(self, user_repo: UserRepository, session: AsyncSession, hasher: PasswordHasher):
        self.user_repo = user_repo
        self.session = session
        self.hasher = hasher

    async def _get_or_404(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _ensure_self_or_admin(principal: Principal, user_id: UUID) -> None:
        if principal.user_id != user_id and not has_role(principal, UserRole.ADMIN):
            raise ForbiddenError("Access denied")

    async def get_for(self, principal: Principal, user_id: UUID) -> User:
        """Read a user as `principal`. Self or admin only."""
        self._ensure_self_or_admin(principal, user_id)
        return await self._get_or_404(user_id)

    async def create(self, data: UserCreate) -> User:
        """Create a user (admin operation).

        Raises:
            DuplicateCredentialError: email or username already taken
        """
        if await self.user_repo.exists_by_email(data.email):
            raise DuplicateCredentialError("email")
        if await self.user_repo.exists_by_username(data.username):
            raise DuplicateCredentialError("username")

        salt, digest = await self.hasher.hash_async(data.password)
        try:
            user = User(
                name=data.name,
                username=data.username,
                email=data.email,
                hashed_password=digest,
                password_salt=salt,
                role=(data.role or UserRole.USER).value,
            )
            self.user_repo.add(user)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            field = "email" if await self.user_repo.exists_by_email(data.email) else "username"
            raise DuplicateCredentialError(field) from e
        except Exception:
            await self.session.rollback()
            raise

        audit_event("user.created", user_id=user.id, role=user.role)
        return user

    async def list_users(
        self,
        page: int,
        limit: int,
        search: str | None = None,
        role: UserRole | None = None,
    ) -> tuple[list[User], PageMeta]:
        """List users newest first, optionally filtered by search text and role."""
        users, total = await self.user_repo.list_page(
            page, limit, search=search, role=role.value if role else None
        )
        meta = PageMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if total else 0,
        )
        return users, meta

    async def update(
        self,
        principal: Principal,
        user_id: UUID,
        data: UserUpdate | UserSelfUpdate,
    ) -> User:
        """Update a user as `principal`.

        Raises:
            ForbiddenError: not self or admin, or a non-admin changing a role
            NotFoundError: unknown user
            DuplicateCredentialError: new email or username already taken
        """
        self._ensure_self_or_admin(principal, user_id)
        update_data = data.model_dump(exclude_unset=True)
        if "role" in update_data and not has_role(principal, UserRole.ADMIN):
            raise ForbiddenError("Only admins can change roles")

        user = await self._get_or_404(user_id)

        email = update_data.get("email")
        if email is not None and email != user.email:
            if await self.user_repo.exists_by_email(email):
                raise DuplicateCredentialError("email")
        username = update_data.get("username")
        if username is not None and username != user.username:
            if await self.user_repo.exists_by_username(username):
                raise DuplicateCredentialError("username")

        try:
            for field, value in update_data.items():
                if value is None:
                    continue
                setattr(user, field, value.value if isinstance(value, UserRole) else value)
            user.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateCredentialError("email" if email else "username") from e
        except Exception:
            await self.session.rollback()
            raise

        if "role" in update_data:
            audit_event("user.role_changed", user_id=user.id, role=user.role, by=principal.user_id)
        return user

    async def delete(self, principal: Principal, user_id: UUID) -> None:
        """Delete a user with all of their sessions, reset tokens and API keys.

        Raises:
            ForbiddenError: caller is not an admin
            InvalidOperationError: caller tries to delete their own account
            NotFoundError: unknown user
        """
        if not has_role(principal, UserRole.ADMIN):
            raise ForbiddenError("Access denied")
        if principal.user_id == user_id:
            raise InvalidOperationError("Cannot delete your own account")

        user = await self._get_or_404(user_id)
        try:
            await self.user_repo.delete_with_credentials(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("user.deleted", user_id=user_id, by=principal.user_id)
