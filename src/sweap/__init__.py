"""Typed async client for the Sweap event and guest management API."""

from sweap.client import SweapClient
from sweap.config import Environment, Settings, get_settings
from sweap.exceptions import (
    StatusCodeError,
    SweapAccessDeniedError,
    SweapAuthenticationError,
    SweapDecodeError,
    SweapError,
    SweapLibraryError,
    SweapNotFoundError,
    SweapTransportError,
)
from sweap.listen import GuestListener

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Client
    "SweapClient",
    "GuestListener",
    # Configuration
    "Environment",
    "Settings",
    "get_settings",
    # Exceptions
    "StatusCodeError",
    "SweapAccessDeniedError",
    "SweapAuthenticationError",
    "SweapDecodeError",
    "SweapError",
    "SweapLibraryError",
    "SweapNotFoundError",
    "SweapTransportError",
]
