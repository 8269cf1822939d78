"""Guest and category schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field

from .base import SweapModel
from .common import Page
from .enums import AttendanceState, GuestUpdateType, InvitationState


class Guest(SweapModel):
    """Guest of an event.

    Maps to: GET /guests/{id}

    ``id`` stays unset when creating a guest; the API assigns it.
    """

    # Common fields
    id: str | None = Field(default=None, description="Guest id")
    version: int = Field(default=0, description="Optimistic locking version")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    external_id: Any = Field(default=None, description="Caller supplied id")

    # Specific fields
    event_id: str | None = Field(default=None, description="Event the guest belongs to")
    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    entourage_count: int = Field(default=0, ge=0, description="Number of companions")
    comment: Any = Field(default=None, description="Free text comment")
    email: str | None = Field(default=None, description="E-mail address")
    custom_fields: dict[str, Any] = Field(
        default_factory=dict, description="Values of the event's custom fields"
    )
    invitation_id: str | None = Field(default=None, description="Invitation id")
    invitation_state: InvitationState = Field(
        default=InvitationState.NONE, description="Answer to the invitation"
    )
    ticket_id: str | None = Field(default=None, description="Ticket id")
    parent_guest_id: str | None = Field(default=None, description="Host guest of a companion")
    category_id: str | None = Field(default=None, description="Guest category")
    attendance_state: AttendanceState | None = Field(default=None, description="Check-in state")

    @property
    def full_name(self) -> str:
        """First and last name joined by a space."""
        return f"{self.first_name} {self.last_name}".strip()


GuestPage = Page[Guest]


class GuestUpdate(SweapModel):
    """Notification emitted by the guest listener."""

    type: GuestUpdateType = Field(description="Kind of change")
    guest: Guest = Field(description="Guest as last fetched")


class Category(SweapModel):
    """Guest category of an event.

    Maps to: GET /categories/{id}
    """

    id: str = Field(description="Category id")
    name: str = Field(default="", description="Category name")
    color_hex: str | None = Field(default=None, description="Display color")
    sort_index: int = Field(default=0, description="Display order")
    event_id: str | None = Field(default=None, description="Event the category belongs to")
