"""Shared payload shapes: error documents and paged responses."""

from typing import Any, Generic, TypeVar

from pydantic import Field

from .base import SweapModel
from .enums import Status

ItemT = TypeVar("ItemT")


class APIErrorBody(SweapModel):
    """Error document returned by the API alongside non-2xx statuses.

    Example:
        {"error": "NOT_FOUND", "code": 404, "message": "guest not found"}
    """

    error: str = Field(default="", description="Error identifier")
    code: int = Field(default=0, description="Numeric error code")
    message: str = Field(default="", description="Human readable description")


class Pageable(SweapModel):
    """Pagination metadata of a paged response."""

    size: int = Field(default=0, description="Items per page")
    total_elements: int = Field(default=0, description="Items across all pages")
    total_pages: int = Field(default=0, description="Number of pages")
    page: int = Field(default=0, description="Zero-based page index")


class Page(SweapModel, Generic[ItemT]):
    """A single page of a paged listing.

    Example:
        {
            "status": "OK",
            "content": [...],
            "pageable": {"size": 2, "totalElements": 133, "totalPages": 67, "page": 0}
        }
    """

    status: Status | None = Field(default=None, description="Envelope status")
    content: list[ItemT] = Field(default_factory=list, description="Items on this page")
    error: APIErrorBody | None = Field(default=None, description="Error details, if any")
    pageable: Pageable = Field(default_factory=Pageable, description="Pagination metadata")

    @property
    def is_last(self) -> bool:
        """Whether no further page follows this one."""
        return self.pageable.page + 1 >= self.pageable.total_pages


class CustomFieldDefinition(SweapModel):
    """Definition of a custom guest field configured on an event."""

    id: str = Field(description="Custom field id")
    name: str = Field(default="", description="Field name")
    type: str = Field(default="", description="Field type")
    sort_index: int = Field(default=0, description="Display order")
    group_name: str | None = Field(default=None, description="Optional group label")
    options: Any = Field(default=None, description="Type specific options")
