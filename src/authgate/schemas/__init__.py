"""Request and response schemas."""

from src.authgate.schemas.api_key import ApiKeyCreate, ApiKeyCreated, ApiKeyRead
from src.authgate.schemas.auth import (
    AuthResponse,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetRequestResponse,
    RefreshRequest,
    RefreshResponse,
    SignInRequest,
    SignUpRequest,
)
from src.authgate.schemas.pagination import PageMeta, PaginatedResponse
from src.authgate.schemas.session import SessionRead
from src.authgate.schemas.user import UserCreate, UserRead, UserSelfUpdate, UserUpdate

__all__ = [
    "ApiKeyCreate",
    "ApiKeyCreated",
    "ApiKeyRead",
    "AuthResponse",
    "MessageResponse",
    "PageMeta",
    "PaginatedResponse",
    "PasswordResetConfirm",
    "PasswordResetRequest",
    "PasswordResetRequestResponse",
    "RefreshRequest",
    "RefreshResponse",
    "SessionRead",
    "SignInRequest",
    "SignUpRequest",
    "UserCreate",
    "UserRead",
    "UserSelfUpdate",
    "UserUpdate",
]
