"""
Base schema classes and the paginated list envelope.
"""

from __future__ import annotations

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
    "PaginationParams",
    "ListResponse",
    "MessageResponse",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All application-facing schemas inherit from this to get consistent
    ORM loading, whitespace stripping and assignment validation.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class BaseCreateSchema(BaseSchema):
    """Base schema for create payloads; unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


class BaseUpdateSchema(BaseSchema):
    """Base schema for partial updates; only explicitly sent fields are applied."""

    model_config = ConfigDict(extra="forbid")


class BaseResponseSchema(BaseSchema):
    """Common audit fields returned for every persisted record."""

    id: str
    created_on: datetime
    last_modified_on: datetime
    created_by: Optional[str] = None
    changed_by: Optional[str] = None
    is_active: bool = True
    index: Optional[int] = Field(
        default=None,
        description="Descending position in a list response",
    )


class PaginationParams(BaseSchema):
    """Pagination query parameters."""

    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    size: int = Field(default=20, ge=1, le=100, description="Items per page")

    @computed_field  # type: ignore[misc]
    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


class ListResponse(BaseSchema, Generic[T]):
    """List envelope: the current page of items and the total match count."""

    data: List[T]
    count: int


class MessageResponse(BaseSchema):
    message: str
    count: Optional[int] = None
