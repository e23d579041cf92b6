"""API key endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.authgate.api.dependencies import ApiKeyServiceDep, CurrentPrincipal
from src.authgate.schemas.api_key import ApiKeyCreate, ApiKeyCreated, ApiKeyRead

router = APIRouter(prefix="/api-keys", tags=["api-keys"])


@router.post(
    "",
    response_model=ApiKeyCreated,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "API key created. The raw key is only shown in this response."},
        401: {"description": "Not authenticated"},
    },
)
async def create_api_key(
    data: ApiKeyCreate,
    principal: CurrentPrincipal,
    service: ApiKeyServiceDep,
) -> ApiKeyCreated:
    api_key, raw_key = await service.create(principal.user_id, data.name, data.expires_at)
    return ApiKeyCreated(
        **ApiKeyRead.model_validate(api_key).model_dump(),
        key=raw_key,
    )


@router.get("", response_model=list[ApiKeyRead])
async def list_api_keys(
    principal: CurrentPrincipal,
    service: ApiKeyServiceDep,
) -> list[ApiKeyRead]:
    """List the caller's API keys, newest first. Raw keys are never returned."""
    api_keys = await service.list_for_user(principal.user_id)
    return [ApiKeyRead.model_validate(k) for k in api_keys]


@router.patch(
    "/{key_id}/revoke",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "API key not found"}},
)
async def revoke_api_key(
    key_id: UUID,
    principal: CurrentPrincipal,
    service: ApiKeyServiceDep,
) -> None:
    """Deactivate an API key. The record is kept."""
    await service.revoke(key_id, principal.user_id)


@router.delete(
    "/{key_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "API key not found"}},
)
async def delete_api_key(
    key_id: UUID,
    principal: CurrentPrincipal,
    service: ApiKeyServiceDep,
) -> None:
    await service.delete(key_id, principal.user_id)
