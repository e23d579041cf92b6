"""Pagination schemas for offset-based pagination."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageMeta(BaseModel):
    """Position of a page within the full result set."""

    page: int = Field(ge=1)
    limit: int = Field(ge=1, le=100)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response.

    `total_pages` is 0 when nothing matches; requesting a page past the end
    returns an empty `items` list with the same metadata.
    """

    items: list[T]
    meta: PageMeta
