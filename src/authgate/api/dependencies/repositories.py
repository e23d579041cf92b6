"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.authgate.api.dependencies.db import DBSession
from src.authgate.repositories import (
    ApiKeyRepository,
    PasswordResetTokenRepository,
    SessionRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_session_repository(session: DBSession) -> SessionRepository:
    return SessionRepository(session)


def get_password_reset_repository(session: DBSession) -> PasswordResetTokenRepository:
    return PasswordResetTokenRepository(session)


def get_api_key_repository(session: DBSession) -> ApiKeyRepository:
    return ApiKeyRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
SessionRepo = Annotated[SessionRepository, Depends(get_session_repository)]
PasswordResetRepo = Annotated[
    PasswordResetTokenRepository, Depends(get_password_reset_repository)
]
ApiKeyRepo = Annotated[ApiKeyRepository, Depends(get_api_key_repository)]
