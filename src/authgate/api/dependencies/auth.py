"""Authentication and authorization dependencies."""

from typing import Annotated

from fastapi import Depends, Header

from src.authgate.api.dependencies.services import RequestAuthenticatorDep
from src.authgate.core.errors import UnauthenticatedError
from src.authgate.core.logging import bind_principal_context
from src.authgate.models.enums import UserRole
from src.authgate.services.authenticator import parse_bearer, require_role
from src.authgate.services.principal import Principal


async def get_current_principal(
    authenticator: RequestAuthenticatorDep,
    authorization: Annotated[str | None, Header()] = None,
    x_api_key: Annotated[str | None, Header()] = None,
) -> Principal:
    """Authenticate the request by X-API-Key or Authorization: Bearer.

    Binds the principal to the log context for the rest of the request.
    """
    principal = await authenticator.authenticate(authorization, x_api_key)
    bind_principal_context(
        principal.user_id,
        principal.role,
        principal.auth_method,
        principal.email,
    )
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


async def require_admin(principal: CurrentPrincipal) -> Principal:
    """Require the ADMIN role."""
    return require_role(principal, UserRole.ADMIN)


AdminPrincipal = Annotated[Principal, Depends(require_admin)]


async def get_bearer_token(
    principal: CurrentPrincipal,
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Raw bearer token of an authenticated request (sign-out needs its `sid`)."""
    token = parse_bearer(authorization)
    if token is None:
        raise UnauthenticatedError("Bearer token required")
    return token


BearerToken = Annotated[str, Depends(get_bearer_token)]
