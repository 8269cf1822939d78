"""Test fixtures for the Sweap client."""

from .sweap_api import ACCESS_TOKEN, API_URL, TOKEN_URL, MockSweapAPI, json_response

__all__ = [
    "ACCESS_TOKEN",
    "API_URL",
    "TOKEN_URL",
    "MockSweapAPI",
    "json_response",
]
