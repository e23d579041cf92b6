"""Authenticated principal and the role capability check."""

from dataclasses import dataclass
from uuid import UUID

from src.authgate.models.enums import UserRole


@dataclass(frozen=True)
class Principal:
    """Identity attached to an authenticated request.

    `session_id` is set for bearer-token requests; `api_key_id` for API-key
    requests. The role always comes from the user row at authentication time.
    """

    user_id: UUID
    username: str
    email: str
    role: str
    auth_method: str
    session_id: UUID | None = None
    api_key_id: UUID | None = None


def has_role(principal: Principal, role: UserRole) -> bool:
    """Single capability check for role-gated operations. ADMIN includes USER."""
    if principal.role == UserRole.ADMIN.value:
        return True
    return principal.role == role.value
