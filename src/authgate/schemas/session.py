from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class SessionRead(BaseModel):
    id: UUID
    user_agent: str | None
    device_id: str | None
    expires_at: datetime = Field(validation_alias="refresh_expires_at")
    created_at: datetime

    model_config = {"from_attributes": True}
