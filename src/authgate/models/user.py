"""User model."""

from datetime import datetime
from uuid import UUID, uuid7

from sqlmodel import Field, SQLModel

from src.authgate.models.base import utc_now
from src.authgate.models.enums import UserRole


class User(SQLModel, table=True):
    """Identity record. Username and email are each globally unique."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    name: str = Field(max_length=100)
    username: str = Field(max_length=30, unique=True, index=True)
    email: str = Field(max_length=255, unique=True, index=True)
    hashed_password: str = Field(max_length=255)
    password_salt: str = Field(max_length=64)
    role: str = Field(default=UserRole.USER.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
