"""Request authenticator - resolves request credentials to a Principal."""

from src.authgate.core.errors import ForbiddenError, UnauthenticatedError
from src.authgate.models.enums import UserRole
from src.authgate.services.api_key_service import ApiKeyService
from src.authgate.services.auth_service import AuthService
from src.authgate.services.principal import Principal, has_role

__all__ = ["Principal", "RequestAuthenticator", "has_role", "parse_bearer", "require_role"]


def parse_bearer(authorization: str | None) -> str | None:
    """Extract the token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def require_role(principal: Principal, role: UserRole) -> Principal:
    """Raise ForbiddenError unless the principal holds `role`."""
    if not has_role(principal, role):
        raise ForbiddenError("Insufficient permissions")
    return principal


class RequestAuthenticator:
    """Authenticates a request by API key or bearer access token.

    The API key header is tried first. A rejected key falls through to the
    bearer token when one is present.
    """

    def __init__(self, auth_service: AuthService, api_key_service: ApiKeyService):
        self.auth_service = auth_service
        self.api_key_service = api_key_service

    async def authenticate(
        self,
        authorization: str | None,
        api_key: str | None = None,
    ) -> Principal:
        """Resolve credentials to a principal.

        Raises:
            UnauthenticatedError: no usable credentials
            InvalidOrExpiredTokenError: bearer token rejected
        """
        if api_key:
            principal = await self.api_key_service.validate(api_key)
            if principal is not None:
                return principal
            if not authorization:
                raise UnauthenticatedError("Invalid API key")

        token = parse_bearer(authorization)
        if token is None:
            raise UnauthenticatedError()
        return await self.auth_service.authenticate_access_token(token)
