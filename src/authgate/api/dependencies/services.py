"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.authgate.api.dependencies.db import DBSession
from src.authgate.api.dependencies.repositories import (
    ApiKeyRepo,
    PasswordResetRepo,
    SessionRepo,
    UserRepo,
)
from src.authgate.core.config import Settings, get_settings
from src.authgate.core.security import (
    PasswordHasher,
    TokenCodec,
    get_password_hasher,
)
from src.authgate.services import (
    ApiKeyService,
    AuthService,
    RequestAuthenticator,
    UserService,
)

SettingsDep = Annotated[Settings, Depends(get_settings)]
PasswordHasherDep = Annotated[PasswordHasher, Depends(get_password_hasher)]


def get_token_codec(settings: SettingsDep) -> TokenCodec:
    """Token codec built from the configured secret."""
    return TokenCodec.from_settings(settings)


TokenCodecDep = Annotated[TokenCodec, Depends(get_token_codec)]


def get_auth_service(
    user_repo: UserRepo,
    session_repo: SessionRepo,
    reset_repo: PasswordResetRepo,
    session: DBSession,
    codec: TokenCodecDep,
    hasher: PasswordHasherDep,
    settings: SettingsDep,
) -> AuthService:
    return AuthService(user_repo, session_repo, reset_repo, session, codec, hasher, settings)


def get_api_key_service(
    api_key_repo: ApiKeyRepo,
    user_repo: UserRepo,
    session: DBSession,
    settings: SettingsDep,
) -> ApiKeyService:
    return ApiKeyService(api_key_repo, user_repo, session, settings)


def get_user_service(
    user_repo: UserRepo,
    session: DBSession,
    hasher: PasswordHasherDep,
) -> UserService:
    return UserService(user_repo, session, hasher)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ApiKeyServiceDep = Annotated[ApiKeyService, Depends(get_api_key_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def get_request_authenticator(
    auth_service: AuthServiceDep,
    api_key_service: ApiKeyServiceDep,
) -> RequestAuthenticator:
    return RequestAuthenticator(auth_service, api_key_service)


RequestAuthenticatorDep = Annotated[RequestAuthenticator, Depends(get_request_authenticator)]
