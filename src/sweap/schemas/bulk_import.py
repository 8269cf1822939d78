"""Guest bulk import schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field

from .base import SweapModel
from .common import CustomFieldDefinition
from .enums import GuestBulkImportStatus
from .guest import Guest


class GuestBulkImportState(SweapModel):
    """State document of a bulk import.

    Maps to: GET/PUT /guest-bulk-imports/{id}/state
    """

    id: str | None = Field(default=None, description="Bulk import id")
    state: GuestBulkImportStatus = Field(description="Current state")


class GuestBulkImport(SweapModel):
    """Server side collection of guest batches imported together.

    Maps to: GET /guest-bulk-imports/{id}
    """

    # Common
    id: str | None = Field(default=None, description="Bulk import id")
    version: int = Field(default=0, description="Optimistic locking version")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    external_id: Any = Field(default=None, description="Caller supplied id")

    # Specific
    name: str = Field(default="", description="Display name")
    state: GuestBulkImportStatus | None = Field(default=None, description="Current state")
    guests: list[Guest] | None = Field(default=None, description="Guests imported in one go")
    event_id: str | None = Field(default=None, description="Target event")
    custom_field_definitions: list[CustomFieldDefinition] = Field(
        default_factory=list, description="Custom fields used by the imported guests"
    )
