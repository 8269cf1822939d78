"""Search parameter builders.

Each builder holds optional filters and translates the ones that are set
into query values for the corresponding listing endpoint.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import EventState, GuestBulkImportStatus, InvitationState


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as RFC 3339 with second precision.

    Naive datetimes are taken to be UTC. UTC is rendered with a ``Z``
    suffix, other offsets are kept as they are.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.replace(microsecond=0).isoformat()
    if value.utcoffset() == timedelta(0):
        text = text.removesuffix("+00:00") + "Z"
    return text


def _format_value(value: Any) -> str:
    if isinstance(value, datetime):
        return format_timestamp(value)
    return str(value)


class SearchParameters(BaseModel):
    """Base class for query filters.

    Field names are snake_case; query keys are the camelCase aliases.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_query(self) -> dict[str, str]:
        """Query values for all filters that are set.

        Empty strings count as unset.
        """
        query: dict[str, str] = {}
        for key, value in self.model_dump(by_alias=True, exclude_none=True).items():
            if value == "":
                continue
            query[key] = _format_value(value)
        return query


class EventSearchParameters(SearchParameters):
    """Filters for GET /events."""

    id: str | None = Field(default=None, description="Equal event id")
    name: str | None = Field(default=None, description="Equal name, case insensitive")
    name_contains: str | None = Field(
        default=None, description="Name contains, case insensitive"
    )
    state: EventState | None = Field(default=None, description="DRAFT, ACTIVE or CLOSED")
    start_date_after: datetime | None = Field(default=None, description="startDate greater than")
    end_date_after: datetime | None = Field(default=None, description="endDate greater than")
    external_id: str | None = Field(default=None, description="Equal externalId")
    created_after: datetime | None = Field(default=None, description="createdAt greater than")
    updated_after: datetime | None = Field(default=None, description="updatedAt greater than")


class GuestSearchParameters(SearchParameters):
    """Filters for GET /guests.

    ``id`` and ``invitation_id`` each narrow the result to at most one
    guest and can replace the event id.
    """

    id: str | None = Field(default=None, description="Equal guest id")
    first_name: str | None = Field(default=None, description="Equal firstName, case insensitive")
    first_name_contains: str | None = Field(
        default=None, description="firstName contains, case insensitive"
    )
    last_name: str | None = Field(default=None, description="Equal lastName, case insensitive")
    last_name_contains: str | None = Field(
        default=None, description="lastName contains, case insensitive"
    )
    email: str | None = Field(default=None, description="Equal email, case insensitive")
    invitation_state: InvitationState | None = Field(
        default=None, description="NONE, NO_REPLY, ACCEPTED or DECLINED"
    )
    external_id: str | None = Field(default=None, description="Equal externalId")
    ticket_id: str | None = Field(default=None, description="Equal ticketId")
    created_after: datetime | None = Field(default=None, description="createdAt greater than")
    updated_after: datetime | None = Field(default=None, description="updatedAt greater than")
    invitation_id: str | None = Field(default=None, description="Equal invitationId")


class CategorySearchParameters(SearchParameters):
    """Filters for GET /categories. The event id is passed separately."""

    guest_id: str | None = Field(default=None, alias="id", description="Equal guest id")
    name: str | None = Field(default=None, description="Equal name, case insensitive")
    external_id: str | None = Field(default=None, description="Equal externalId")
    created_after: datetime | None = Field(default=None, description="createdAt greater than")
    updated_after: datetime | None = Field(default=None, description="updatedAt greater than")


class GuestBulkImportSearchParameters(SearchParameters):
    """Filters for GET /guest-bulk-imports."""

    guest_bulk_import_id: str | None = Field(
        default=None, alias="id", description="Equal guest-bulk-import id"
    )
    event_id: str | None = Field(default=None, description="Equal event id")
    state: GuestBulkImportStatus | None = Field(default=None, description="Equal state")
    external_id: str | None = Field(default=None, description="Equal externalId")
    created_after: datetime | None = Field(default=None, description="createdAt greater than")
    updated_after: datetime | None = Field(default=None, description="updatedAt greater than")


class EventStatisticsSearchParameters(SearchParameters):
    """Filters for GET /event-statistics.

    Count bounds are inclusive. Negative bounds are treated as unset.
    """

    id: str | None = Field(default=None, description="Equal event id")
    external_id: str | None = Field(default=None, description="Equal externalId")
    created_after: datetime | None = Field(default=None, description="createdAt greater than")
    updated_after: datetime | None = Field(default=None, description="updatedAt greater than")

    min_guest_count: int | None = None
    max_guest_count: int | None = None
    min_accepted_count: int | None = None
    max_accepted_count: int | None = None
    min_declined_count: int | None = None
    max_declined_count: int | None = None
    min_no_reply_count: int | None = None
    max_no_reply_count: int | None = None
    min_checkin_count: int | None = None
    max_checkin_count: int | None = None

    def to_query(self) -> dict[str, str]:
        query = super().to_query()
        for key, value in self.model_dump(by_alias=True, exclude_none=True).items():
            if isinstance(value, int) and value < 0:
                del query[key]
        return query


class PaginationParameters(BaseModel):
    """Page selection for paginated listings."""

    page: int = Field(default=0, ge=0, description="Zero-based page index")
    size: int = Field(default=100, ge=1, description="Items per page")

    def to_query(self) -> dict[str, str]:
        return {"page": str(self.page), "size": str(self.size)}
