"""Authentication-related models - sessions, reset tokens and API keys."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlmodel import Field, SQLModel

from src.authgate.models.base import utc_now


class UserSession(SQLModel, table=True):
    """One login instance - the unit of revocation.

    The id is embedded as the `sid` claim of every token issued for it.
    `refresh_token_hash` binds the session to the refresh token issued last;
    older refresh tokens for the same session stop matching after a refresh.
    """

    __tablename__ = "user_sessions"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    device_id: str | None = Field(default=None, max_length=64)
    user_agent: str | None = Field(default=None, max_length=512)
    refresh_token_hash: str = Field(max_length=64, index=True)
    refresh_expires_at: datetime = Field(index=True)
    revoked_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    rotated_at: datetime | None = Field(default=None)


class PasswordResetToken(SQLModel, table=True):
    """One-time password reset token. Only the SHA-256 of the raw value is stored."""

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    token_hash: str = Field(max_length=64, unique=True, index=True)
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)


class ApiKey(SQLModel, table=True):
    """Long-lived bearer credential. The raw key is shown once and never stored."""

    __tablename__ = "api_keys"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    key_hash: str = Field(max_length=64, unique=True, index=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    name: str | None = Field(default=None, max_length=100)
    created_at: datetime = Field(default_factory=utc_now)
    last_used_at: datetime | None = Field(default=None)
    expires_at: datetime | None = Field(default=None)
    is_active: bool = Field(default=True)
