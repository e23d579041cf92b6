from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ApiKeyCreate(BaseModel):
    name: str | None = Field(None, max_length=100)
    expires_at: datetime | None = None


class ApiKeyRead(BaseModel):
    id: UUID
    name: str | None
    created_at: datetime
    last_used_at: datetime | None
    expires_at: datetime | None
    is_active: bool

    model_config = {"from_attributes": True}


class ApiKeyCreated(ApiKeyRead):
    """Creation response. `key` is shown exactly once."""

    key: str
