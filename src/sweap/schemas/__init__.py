"""Pydantic schemas for the Sweap API.

This module provides the wire models and the search parameter builders.
"""

from .base import SweapModel
from .bulk_import import GuestBulkImport, GuestBulkImportState
from .common import APIErrorBody, CustomFieldDefinition, Page, Pageable
from .enums import (
    AttendanceMode,
    AttendanceState,
    EventState,
    GuestBulkImportStatus,
    GuestUpdateType,
    InvitationState,
    SortBy,
    SortOrder,
    Status,
)
from .event import Event, EventPage, EventStatistic
from .guest import Category, Guest, GuestPage, GuestUpdate
from .search import (
    CategorySearchParameters,
    EventSearchParameters,
    EventStatisticsSearchParameters,
    GuestBulkImportSearchParameters,
    GuestSearchParameters,
    PaginationParameters,
    SearchParameters,
    format_timestamp,
)

__all__ = [
    # Base
    "SweapModel",
    # Shared shapes
    "APIErrorBody",
    "CustomFieldDefinition",
    "Page",
    "Pageable",
    # Enums
    "AttendanceMode",
    "AttendanceState",
    "EventState",
    "GuestBulkImportStatus",
    "GuestUpdateType",
    "InvitationState",
    "SortBy",
    "SortOrder",
    "Status",
    # Entities
    "Category",
    "Event",
    "EventPage",
    "EventStatistic",
    "Guest",
    "GuestBulkImport",
    "GuestBulkImportState",
    "GuestPage",
    "GuestUpdate",
    # Search
    "CategorySearchParameters",
    "EventSearchParameters",
    "EventStatisticsSearchParameters",
    "GuestBulkImportSearchParameters",
    "GuestSearchParameters",
    "PaginationParameters",
    "SearchParameters",
    "format_timestamp",
]
