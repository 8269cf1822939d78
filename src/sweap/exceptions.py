"""Sweap client exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sweap.schemas.common import APIErrorBody


class SweapError(Exception):
    """Base exception for Sweap client errors."""

    pass


class SweapLibraryError(SweapError):
    """Raised when a call is rejected client-side (missing ids, bad arguments)."""

    def __init__(self, message: str) -> None:
        super().__init__(f"sweap internal error: {message}")
        self.message = message


class SweapAuthenticationError(SweapError):
    """Raised when the token endpoint does not hand out an access token."""

    pass


class SweapTransportError(SweapError):
    """Raised when a request could not be sent or no response arrived."""

    pass


class SweapDecodeError(SweapError):
    """Raised when a response body does not match the expected schema."""

    pass


class StatusCodeError(SweapError):
    """Raised for any HTTP response other than 200, 201 or 204.

    If the response body decoded as a Sweap error document, it is
    available as ``error_body``.
    """

    def __init__(
        self,
        status_code: int,
        status: str,
        error_body: APIErrorBody | None = None,
    ) -> None:
        self.status_code = status_code
        self.status = status
        self.error_body = error_body
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.error_body is not None:
            body = self.error_body
            return f"Code {body.code}: {body.error} - {body.message}"
        return f"sweap server error: {self.status}"

    @property
    def retryable(self) -> bool:
        """Whether the failure is transient (server error or throttling)."""
        return self.status_code >= 500 or self.status_code == 429


class SweapAccessDeniedError(StatusCodeError):
    """Raised when the API rejects the token (401/403)."""

    pass


class SweapNotFoundError(StatusCodeError):
    """Raised when a resource is not found (404)."""

    pass
