"""Enums for Sweap API schemas."""

from enum import StrEnum


class Status(StrEnum):
    """Status reported in Sweap response envelopes."""

    OK = "OK"
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_EXCEPTION = "VALIDATION_EXCEPTION"
    EXCEPTION = "EXCEPTION"
    WRONG_CREDENTIALS = "WRONG_CREDENTIALS"
    ACCESS_DENIED = "ACCESS_DENIED"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_ENTITY = "DUPLICATE_ENTITY"


class SortBy(StrEnum):
    """Sortable fields."""

    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    START_DATE = "startDate"
    END_DATE = "endDate"
    NAME = "name"


class SortOrder(StrEnum):
    """Sort direction."""

    ASC = "ASC"
    DESC = "DESC"


class EventState(StrEnum):
    """Lifecycle state of an event."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class AttendanceMode(StrEnum):
    """How guests attend an event."""

    OFFLINE = "OFFLINE"
    ONLINE = "ONLINE"
    MIXED = "MIXED"


class InvitationState(StrEnum):
    """A guest's answer to the invitation."""

    NONE = "NONE"
    NO_REPLY = "NO_REPLY"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class AttendanceState(StrEnum):
    """Check-in state of a guest."""

    NONE = "NONE"
    PRESENT = "PRESENT"
    GONE = "GONE"


class GuestBulkImportStatus(StrEnum):
    """Progress of a guest bulk import."""

    UPLOAD_STARTED = "UPLOAD_STARTED"
    UPLOAD_FINISHED = "UPLOAD_FINISHED"
    IMPORT_STARTED = "IMPORT_STARTED"
    IMPORT_FINISHED = "IMPORT_FINISHED"


class GuestUpdateType(StrEnum):
    """Kind of change reported by the guest listener."""

    NEW_GUEST = "NEW_GUEST"
    UPDATE_GUEST = "UPDATE_GUEST"
