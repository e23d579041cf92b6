from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.authgate.core.validators import (
    EmailAddress,
    validate_password_strength,
    validate_username,
)
from src.authgate.models.enums import UserRole


class UserRead(BaseModel):
    """Outward representation of a user. Never carries password material."""

    id: UUID
    name: str
    username: str
    email: str
    role: UserRole
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    username: str = Field(min_length=3, max_length=30)
    email: EmailAddress
    password: str = Field(min_length=8, max_length=128)
    role: UserRole | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return validate_username(v)

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, v: str) -> str:
        return validate_password_strength(v)


class UserSelfUpdate(BaseModel):
    """Profile fields a user may change on their own account."""

    name: str | None = Field(None, min_length=1, max_length=100)
    username: str | None = Field(None, min_length=3, max_length=30)
    email: EmailAddress | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str | None) -> str | None:
        return validate_username(v) if v is not None else v


class UserUpdate(UserSelfUpdate):
    """Fields accepted by PATCH /users/{id}. Changing `role` requires ADMIN."""

    role: UserRole | None = None
