"""Service layer - business logic and transaction boundaries."""

from src.authgate.services.api_key_service import ApiKeyService
from src.authgate.services.auth_service import AuthResult, AuthService, TokenPair
from src.authgate.services.authenticator import RequestAuthenticator
from src.authgate.services.principal import Principal, has_role
from src.authgate.services.session_registry import DeviceInfo, SessionRegistry
from src.authgate.services.user_service import UserService

__all__ = [
    "ApiKeyService",
    "AuthResult",
    "AuthService",
    "DeviceInfo",
    "Principal",
    "RequestAuthenticator",
    "SessionRegistry",
    "TokenPair",
    "UserService",
    "has_role",
]
