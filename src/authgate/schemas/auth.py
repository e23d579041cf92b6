from pydantic import BaseModel, Field, field_validator

from src.authgate.core.validators import (
    EmailAddress,
    validate_password_strength,
    validate_username,
)
from src.authgate.schemas.user import UserRead


class SignUpRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    username: str = Field(min_length=3, max_length=30)
    email: EmailAddress
    password: str = Field(min_length=8, max_length=128)
    device_id: str | None = Field(None, max_length=64)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return validate_username(v)

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, v: str) -> str:
        return validate_password_strength(v)


class SignInRequest(BaseModel):
    """Sign in with a username or an email address."""

    login: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)
    device_id: str | None = Field(None, max_length=64)


class AuthResponse(BaseModel):
    user: UserRead
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: str


class RefreshResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class PasswordResetRequest(BaseModel):
    email: EmailAddress


class PasswordResetRequestResponse(BaseModel):
    """Identical for known and unknown emails, apart from `token` outside production."""

    message: str = "If the email exists, a password reset link has been sent"
    token: str | None = None


class PasswordResetConfirm(BaseModel):
    token: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, v: str) -> str:
        return validate_password_strength(v)


class MessageResponse(BaseModel):
    message: str
