"""User management endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.authgate.api.dependencies import AdminPrincipal, CurrentPrincipal, UserServiceDep
from src.authgate.models.enums import UserRole
from src.authgate.schemas.pagination import PaginatedResponse
from src.authgate.schemas.user import UserCreate, UserRead, UserSelfUpdate, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])

_USER_EXAMPLE = {
    "id": "0192f5e4-7c3a-7b1e-9d2f-3a4b5c6d7e8f",
    "name": "Jane Doe",
    "username": "jane_doe",
    "email": "jane@example.com",
    "role": "USER",
    "created_at": "2026-01-15T10:30:00Z",
    "updated_at": "2026-01-15T10:30:00Z",
}


@router.get(
    "/me",
    response_model=UserRead,
    responses={
        200: {
            "description": "Current user profile",
            "content": {"application/json": {"example": _USER_EXAMPLE}},
        },
        401: {"description": "Not authenticated"},
    },
)
async def get_current_user(principal: CurrentPrincipal, service: UserServiceDep) -> UserRead:
    """Get current authenticated user."""
    user = await service.get_for(principal, principal.user_id)
    return UserRead.model_validate(user)


@router.patch(
    "/me",
    response_model=UserRead,
    responses={
        401: {"description": "Not authenticated"},
        409: {"description": "Email or username already exists"},
        422: {"description": "Validation error"},
    },
)
async def update_current_user(
    data: UserSelfUpdate,
    principal: CurrentPrincipal,
    service: UserServiceDep,
) -> UserRead:
    """Update the caller's own profile. Roles cannot be changed here."""
    user = await service.update(principal, principal.user_id, data)
    return UserRead.model_validate(user)


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Admin role required"},
        409: {"description": "Email or username already exists"},
    },
)
async def create_user(
    data: UserCreate,
    _admin: AdminPrincipal,
    service: UserServiceDep,
) -> UserRead:
    """Create a user (admin only)."""
    user = await service.create(data)
    return UserRead.model_validate(user)


@router.get(
    "",
    response_model=PaginatedResponse[UserRead],
    responses={403: {"description": "Admin role required"}},
)
async def list_users(
    _admin: AdminPrincipal,
    service: UserServiceDep,
    page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Number of items per page")] = 10,
    search: Annotated[
        str | None,
        Query(max_length=100, description="Case-insensitive match on name, username or email"),
    ] = None,
    role: Annotated[UserRole | None, Query(description="Filter by role")] = None,
) -> PaginatedResponse[UserRead]:
    """List users newest first (admin only)."""
    users, meta = await service.list_users(page, limit, search=search, role=role)
    return PaginatedResponse(
        items=[UserRead.model_validate(u) for u in users],
        meta=meta,
    )


@router.get(
    "/{user_id}",
    response_model=UserRead,
    responses={
        403: {"description": "Not allowed to view this user"},
        404: {"description": "User not found"},
    },
)
async def get_user(
    user_id: UUID,
    principal: CurrentPrincipal,
    service: UserServiceDep,
) -> UserRead:
    """Get a user. Admins can read anyone; users only themselves."""
    user = await service.get_for(principal, user_id)
    return UserRead.model_validate(user)


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    responses={
        403: {"description": "Not allowed to update this user or change roles"},
        404: {"description": "User not found"},
        409: {"description": "Email or username already exists"},
    },
)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    principal: CurrentPrincipal,
    service: UserServiceDep,
) -> UserRead:
    """Update a user. Only admins may change `role`."""
    user = await service.update(principal, user_id, data)
    return UserRead.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Cannot delete your own account"},
        403: {"description": "Admin role required"},
        404: {"description": "User not found"},
    },
)
async def delete_user(user_id: UUID, admin: AdminPrincipal, service: UserServiceDep) -> None:
    """Delete a user and all of their credentials (admin only)."""
    await service.delete(admin, user_id)
