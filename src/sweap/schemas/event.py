"""Event and event statistics schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field

from .base import SweapModel
from .common import CustomFieldDefinition, Page
from .enums import AttendanceMode, EventState


class Event(SweapModel):
    """Sweap event.

    Maps to: GET /events/{id}
    """

    # Common fields
    id: str = Field(description="Event id")
    version: int = Field(default=0, description="Optimistic locking version")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    external_id: Any = Field(default=None, description="Caller supplied id")

    # Specific fields
    name: str = Field(default="", description="Event name")
    start_date: datetime | None = Field(default=None, description="Event start")
    end_date: datetime | None = Field(default=None, description="Event end")
    zone_id: str | None = Field(default=None, description="IANA time zone of the event")
    attendance_mode: AttendanceMode | None = Field(default=None, description="How guests attend")
    state: EventState | None = Field(default=None, description="Lifecycle state")
    custom_field_definitions: list[CustomFieldDefinition] = Field(
        default_factory=list, description="Custom guest fields"
    )

    def __str__(self) -> str:
        return f"{self.name}:{self.id}"


EventPage = Page[Event]


class EventStatistic(SweapModel):
    """Guest counters of one event. All counts include companions.

    Maps to: GET /event-statistics/{id}
    """

    id: str = Field(description="Event id")
    version: int = Field(default=0, description="Optimistic locking version")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    external_id: Any = Field(default=None, description="Caller supplied id")

    guest_count: int = Field(default=0, description="Guests overall")
    accepted_count: int = Field(default=0, description="Guests that accepted")
    declined_count: int = Field(default=0, description="Guests that declined")
    no_reply_count: int = Field(default=0, description="Guests without reply")
    checkin_count: int = Field(default=0, description="Guests checked in")
