"""FastAPI dependency injection definitions."""

from src.authgate.api.dependencies.auth import (
    AdminPrincipal,
    BearerToken,
    CurrentPrincipal,
    get_bearer_token,
    get_current_principal,
    require_admin,
)
from src.authgate.api.dependencies.db import DBSession, get_db_session
from src.authgate.api.dependencies.repositories import (
    ApiKeyRepo,
    PasswordResetRepo,
    SessionRepo,
    UserRepo,
)
from src.authgate.api.dependencies.services import (
    ApiKeyServiceDep,
    AuthServiceDep,
    PasswordHasherDep,
    RequestAuthenticatorDep,
    SettingsDep,
    TokenCodecDep,
    UserServiceDep,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "AdminPrincipal",
    "BearerToken",
    "CurrentPrincipal",
    "get_bearer_token",
    "get_current_principal",
    "require_admin",
    # Repositories
    "ApiKeyRepo",
    "PasswordResetRepo",
    "SessionRepo",
    "UserRepo",
    # Services
    "ApiKeyServiceDep",
    "AuthServiceDep",
    "PasswordHasherDep",
    "RequestAuthenticatorDep",
    "SettingsDep",
    "TokenCodecDep",
    "UserServiceDep",
]
