"""Async Sweap API client.

This module provides a typed async interface to the Sweap REST API:
events, guests, categories, guest bulk imports and event statistics.
All endpoints share one request pipeline that builds the request, logs it,
checks the status code and validates the JSON body into pydantic schemas.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from sweap.auth import ClientCredentialsAuth
from sweap.config import ENDPOINTS, Environment, Settings, get_settings
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
from sweap.logging import get_logger, get_wire_logger
from sweap.schemas import (
    APIErrorBody,
    Category,
    CategorySearchParameters,
    Event,
    EventSearchParameters,
    EventStatistic,
    EventStatisticsSearchParameters,
    Guest,
    GuestBulkImport,
    GuestBulkImportSearchParameters,
    GuestBulkImportState,
    GuestBulkImportStatus,
    GuestPage,
    GuestSearchParameters,
    PaginationParameters,
)

logger = get_logger(__name__)
wire_logger = get_wire_logger()

T = TypeVar("T")

SUCCESS_STATUS_CODES = frozenset({200, 201, 204})
ERROR_BODY_KEYS = frozenset({"error", "code", "message"})


@lru_cache
def _adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


class SweapClient:
    """Async Sweap API client.

    Usage:
        async with SweapClient(client_id, client_secret) as client:
            events = await client.search_events(EventSearchParameters(name="Summer Party"))
            guests = await client.get_guests(events[0].id)

    Or without context manager:
        client = SweapClient()  # credentials from CLIENT_ID / CLIENT_SECRET
        events = await client.get_events()
        await client.close()
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        *,
        environment: Environment | str | None = None,
        api_url: str | None = None,
        token_url: str | None = None,
        debug: bool | None = None,
        verify_credentials: bool | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the Sweap client.

        Args:
            client_id: OAuth2 client id. Defaults to CLIENT_ID from settings.
            client_secret: OAuth2 client secret. Defaults to CLIENT_SECRET.
            environment: Deployment whose endpoints to use (production,
                         staging or development).
            api_url: Explicit API base URL, overrides the environment.
            token_url: Explicit token endpoint, overrides the environment.
            debug: Log full request and response dumps.
            verify_credentials: Check credentials when entering the context
                                manager. Always on for development.
            timeout: HTTP timeout in seconds.
            transport: Optional httpx transport (used by tests).
            settings: Settings to fall back on instead of get_settings().

        Raises:
            SweapAuthenticationError: If no credentials are available.
        """
        settings = settings or get_settings()

        self._client_id = client_id or settings.client_id
        self._client_secret = client_secret or settings.client_secret
        if not self._client_id or not self._client_secret:
            raise SweapAuthenticationError(
                "Sweap credentials required. Set CLIENT_ID and CLIENT_SECRET environment variables."
            )

        self._environment = Environment(environment) if environment else settings.environment
        default_api_url, default_token_url = ENDPOINTS[self._environment]
        if environment:
            resolved_api_url = api_url or default_api_url
            self._token_url = token_url or default_token_url
        else:
            resolved_api_url = api_url or settings.resolved_api_url
            self._token_url = token_url or settings.resolved_token_url
        self._api_url = resolved_api_url if resolved_api_url.endswith("/") else resolved_api_url + "/"

        self._debug = settings.debug if debug is None else debug
        if verify_credentials is None:
            verify_credentials = settings.verify_credentials
        self._verify_credentials = (
            verify_credentials or self._environment is Environment.DEVELOPMENT
        )
        self._timeout = timeout or settings.request_timeout
        self._transport = transport
        self._settings = settings

        self._auth = ClientCredentialsAuth(self._client_id, self._client_secret, self._token_url)
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_env_file(cls, path: str | Path, **kwargs: Any) -> SweapClient:
        """Create a client with credentials read from an env file.

        The file may set CLIENTID (or CLIENT_ID) and CLIENT_SECRET, plus any
        other setting.

        Raises:
            FileNotFoundError: If the env file does not exist.
        """
        settings = Settings.from_env_file(path)
        return cls(settings=settings, **kwargs)

    @property
    def _http(self) -> httpx.AsyncClient:
        """Get or create the httpx client instance."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._api_url,
                auth=self._auth,
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def token_url(self) -> str:
        return self._token_url

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def debug(self) -> bool:
        """Whether request and response dumps are logged."""
        return self._debug

    @property
    def settings(self) -> Settings:
        return self._settings

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> SweapClient:
        """Async context manager entry.

        Raises:
            SweapAuthenticationError: If credential verification is enabled
                and the API rejects the credentials.
        """
        if self._verify_credentials:
            try:
                await self.check_credentials()
            except SweapError as e:
                await self.close()
                raise SweapAuthenticationError(
                    f"authorization at endpoint {self._token_url} failed. Check credentials"
                ) from e
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Request Pipeline
    # -------------------------------------------------------------------------
    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Send a request and check its status.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            params: Query values
            json: JSON serializable request body

        Returns:
            The response, with a 2xx status

        Raises:
            StatusCodeError: For any other status
            SweapTransportError: If the request could not be sent
        """
        request = self._http.build_request(method, path, params=params or None, json=json)
        self._log_request(request)

        try:
            response = await self._http.send(request)
        except httpx.TransportError as e:
            raise SweapTransportError(f"{method} {request.url} failed: {e}") from e

        self._log_response(response)
        if response.status_code not in SUCCESS_STATUS_CODES:
            raise self._handle_error(response)
        return response

    def _decode(self, response: httpx.Response, response_type: Any) -> Any:
        """Validate a response body into ``response_type``.

        Returns None when the body is empty.

        Raises:
            SweapDecodeError: If the body does not match the schema.
        """
        if not response.content.strip():
            return None
        try:
            return _adapter(response_type).validate_json(response.content)
        except ValidationError as e:
            raise SweapDecodeError(
                f"unexpected response body from {response.request.url}: {e}"
            ) from e

    async def _get(
        self,
        path: str,
        response_type: Any,
        params: dict[str, str] | None = None,
    ) -> Any:
        """GET a resource, passing ``params`` as query values."""
        response = await self._request("GET", path, params=params)
        return self._decode(response, response_type)

    async def _post_json(self, path: str, body: Any, response_type: Any = None) -> Any:
        """POST a JSON body; decode the response if a type is given."""
        response = await self._request("POST", path, json=body)
        if response_type is None:
            return None
        return self._decode(response, response_type)

    async def _put_json(self, path: str, body: Any, response_type: Any = None) -> Any:
        """PUT a JSON body; decode the response if a type is given."""
        response = await self._request("PUT", path, json=body)
        if response_type is None:
            return None
        return self._decode(response, response_type)

    async def _delete(self, path: str, params: dict[str, str] | None = None) -> None:
        await self._request("DELETE", path, params=params)

    @staticmethod
    def _require(value: T | None, what: str) -> T:
        if value is None:
            raise SweapDecodeError(f"empty response where {what} was expected")
        return value

    def _log_request(self, request: httpx.Request) -> None:
        if not self._debug:
            logger.trace("{} {}", request.method, request.url)
            return
        body = request.content.decode("utf-8", errors="replace") if request.content else ""
        wire_logger.debug("Request: {} {}\n{}", request.method, request.url, body)

    def _log_response(self, response: httpx.Response) -> None:
        if not self._debug:
            logger.trace("{} {}", response.status_code, response.request.url)
            return
        wire_logger.debug(
            "Response: {} {} ({})\n{}",
            response.status_code,
            response.reason_phrase,
            response.request.url,
            response.text,
        )

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------
    async def check_credentials(self) -> bool:
        """Check whether the client's credentials are accepted.

        Returns:
            True if the API accepted the credentials

        Raises:
            SweapAuthenticationError: If no token could be obtained
            StatusCodeError: If the API rejected the token
        """
        await self._request("GET", "management/check-credentials")
        return True

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------
    async def get_events(self, params: EventSearchParameters | None = None) -> list[Event]:
        """List events, optionally filtered.

        GET /events?[PARAMS]
        """
        query = params.to_query() if params else {}
        return await self._get("events", list[Event], query) or []

    async def search_events(self, params: EventSearchParameters) -> list[Event]:
        """List events matching the given filters."""
        return await self.get_events(params)

    async def get_event(self, event_id: str) -> Event:
        """Get the event with the given id.

        GET /events/{id}

        Raises:
            SweapLibraryError: If no event id is given
            SweapNotFoundError: If the event doesn't exist
        """
        if not event_id:
            raise SweapLibraryError("no event ID given")
        return self._require(await self._get(f"events/{event_id}", Event), "an event")

    # -------------------------------------------------------------------------
    # Guests
    # -------------------------------------------------------------------------
    @staticmethod
    def _guest_query(event_id: str | None, params: GuestSearchParameters | None) -> dict[str, str]:
        """Build the query for guest listings.

        The API only lists guests of one event, unless a guest id or
        invitation id pins down a single guest.
        """
        params = params or GuestSearchParameters()
        if not event_id and not params.id and not params.invitation_id:
            raise SweapLibraryError("neither eventId nor guest ID or invitationId provided")

        query: dict[str, str] = {}
        if event_id:
            query["eventId"] = event_id
        query.update(params.to_query())
        return query

    async def get_guests(
        self,
        event_id: str | None,
        params: GuestSearchParameters | None = None,
    ) -> list[Guest]:
        """List the guests of an event, optionally filtered.

        GET /guests?eventId={event_id}&[PARAMS]

        Args:
            event_id: Event to list guests for. May be empty if ``params``
                      carries a guest id or invitation id.
            params: Optional filters

        Raises:
            SweapLibraryError: If neither an event id, guest id nor
                               invitation id is given
        """
        query = self._guest_query(event_id, params)
        return await self._get("guests", list[Guest], query) or []

    async def search_guests(
        self,
        event_id: str | None,
        params: GuestSearchParameters,
    ) -> list[Guest]:
        """List the guests of an event matching the given filters."""
        return await self.get_guests(event_id, params)

    async def get_guests_paginated(
        self,
        event_id: str | None,
        pagination: PaginationParameters | None = None,
        params: GuestSearchParameters | None = None,
    ) -> GuestPage:
        """Get one page of the guests of an event.

        GET /guests/paginated?eventId={event_id}&page=N&size=M&[PARAMS]
        """
        query = self._guest_query(event_id, params)
        query.update((pagination or PaginationParameters()).to_query())
        page = await self._get("guests/paginated", GuestPage, query)
        return page or GuestPage()

    async def iter_guests(
        self,
        event_id: str | None,
        params: GuestSearchParameters | None = None,
        *,
        page_size: int = 100,
    ) -> AsyncIterator[Guest]:
        """Iterate over all guests of an event page by page.

        Pages are fetched lazily, so breaking early saves requests.

        Yields:
            Guest objects in API order
        """
        page_number = 0
        while True:
            page = await self.get_guests_paginated(
                event_id,
                PaginationParameters(page=page_number, size=page_size),
                params,
            )
            for guest in page.content:
                yield guest
            if not page.content or page.is_last:
                return
            page_number += 1

    async def get_guest(self, guest_id: str) -> Guest:
        """Get the guest with the given id.

        GET /guests/{id}

        Raises:
            SweapLibraryError: If no guest id is given
            SweapNotFoundError: If the guest doesn't exist
        """
        if not guest_id:
            raise SweapLibraryError("no guest ID given")
        return self._require(await self._get(f"guests/{guest_id}", Guest), "a guest")

    async def create_guest(self, guest: Guest) -> Guest:
        """Create a guest in its event.

        POST /guests

        Returns:
            The created guest, carrying its new id

        Raises:
            SweapLibraryError: If the guest has no event id
        """
        if not guest.event_id:
            raise SweapLibraryError(f"no event ID given in guest {guest.full_name!r}")
        created = await self._post_json("guests", guest.to_payload(), Guest)
        return self._require(created, "the created guest")

    async def update_guest(self, guest: Guest) -> Guest:
        """Replace a guest.

        PUT /guests/{id}

        Returns:
            The updated guest

        Raises:
            SweapLibraryError: If the guest has no event id or no id
        """
        if not guest.event_id:
            raise SweapLibraryError(f"no event ID given in guest {guest.full_name!r}")
        if not guest.id:
            raise SweapLibraryError("no guest ID given")
        updated = await self._put_json(f"guests/{guest.id}", guest.to_payload(), Guest)
        return self._require(updated, "the updated guest")

    async def delete_guest(self, guest_id: str) -> None:
        """Delete a guest.

        DELETE /guests/{id}

        Raises:
            SweapLibraryError: If no guest id is given
            SweapNotFoundError: If the guest doesn't exist
        """
        if not guest_id:
            raise SweapLibraryError("no guest ID given")
        await self._delete(f"guests/{guest_id}")

    def listen(
        self,
        event_id: str,
        *,
        poll_interval: float | None = None,
        buffer_size: int | None = None,
        include_existing: bool = True,
    ) -> GuestListener:
        """Create a listener reporting new and changed guests of an event.

        Usage:
            async with client.listen(event_id) as listener:
                async for update in listener:
                    print(update.type, update.guest.full_name)
        """
        config = self._settings.listen
        return GuestListener(
            self,
            event_id,
            poll_interval=poll_interval or config.poll_interval_seconds,
            buffer_size=buffer_size or config.buffer_size,
            include_existing=include_existing,
        )

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------
    async def get_categories(
        self,
        event_id: str,
        params: CategorySearchParameters | None = None,
    ) -> list[Category]:
        """List the guest categories of an event.

        GET /categories?eventId={event_id}&[PARAMS]

        Raises:
            SweapLibraryError: If no event id is given
        """
        if not event_id:
            raise SweapLibraryError("no event ID given")
        query = params.to_query() if params else {}
        query["eventId"] = event_id
        return await self._get("categories", list[Category], query) or []

    async def get_category(self, category_id: str) -> Category:
        """Get the category with the given id.

        GET /categories/{id}
        """
        if not category_id:
            raise SweapLibraryError("no category ID given")
        return self._require(await self._get(f"categories/{category_id}", Category), "a category")

    # -------------------------------------------------------------------------
    # Event Statistics
    # -------------------------------------------------------------------------
    async def get_event_statistics(
        self,
        params: EventStatisticsSearchParameters | None = None,
    ) -> list[EventStatistic]:
        """List guest statistics of all events under the account.

        GET /event-statistics?[PARAMS]
        """
        query = params.to_query() if params else {}
        return await self._get("event-statistics", list[EventStatistic], query) or []

    async def search_event_statistics(
        self,
        params: EventStatisticsSearchParameters,
    ) -> list[EventStatistic]:
        """List event statistics matching the given filters."""
        return await self.get_event_statistics(params)

    async def get_event_statistic(self, event_id: str) -> EventStatistic:
        """Get the guest statistics of one event.

        GET /event-statistics/{id}
        """
        if not event_id:
            raise SweapLibraryError("no event ID given")
        statistic = await self._get(f"event-statistics/{event_id}", EventStatistic)
        return self._require(statistic, "an event statistic")

    # -------------------------------------------------------------------------
    # Guest Bulk Imports
    # -------------------------------------------------------------------------
    async def get_bulk_imports(
        self,
        params: GuestBulkImportSearchParameters | None = None,
    ) -> list[GuestBulkImport]:
        """List bulk imports started or completed.

        GET /guest-bulk-imports?[PARAMS]
        """
        query = params.to_query() if params else {}
        return await self._get("guest-bulk-imports", list[GuestBulkImport], query) or []

    async def get_bulk_import(self, bulk_import_id: str) -> GuestBulkImport:
        """Get a bulk import.

        GET /guest-bulk-imports/{id}
        """
        if not bulk_import_id:
            raise SweapLibraryError("no guest bulk import ID given")
        gbi = await self._get(f"guest-bulk-imports/{bulk_import_id}", GuestBulkImport)
        return self._require(gbi, "a guest bulk import")

    async def get_bulk_import_state(self, bulk_import_id: str) -> GuestBulkImportState:
        """Get the state of a bulk import.

        GET /guest-bulk-imports/{id}/state
        """
        if not bulk_import_id:
            raise SweapLibraryError("no guest bulk import ID given")
        state = await self._get(
            f"guest-bulk-imports/{bulk_import_id}/state", GuestBulkImportState
        )
        return self._require(state, "a guest bulk import state")

    async def create_bulk_import(self, bulk_import: GuestBulkImport) -> GuestBulkImport:
        """Create a bulk import object. Guest batches are uploaded afterwards.

        POST /guest-bulk-imports

        Returns:
            The created bulk import, carrying its new id
        """
        created = await self._post_json(
            "guest-bulk-imports", bulk_import.to_payload(), GuestBulkImport
        )
        return self._require(created, "the created guest bulk import")

    async def import_guests_in_one_go(self, bulk_import: GuestBulkImport) -> GuestBulkImport:
        """Create a bulk import with all guests embedded in a single request.

        POST /guest-bulk-imports

        Raises:
            SweapLibraryError: If the bulk import carries no guests
        """
        if not bulk_import.guests:
            raise SweapLibraryError("no guests given in guest bulk import")
        return await self.create_bulk_import(bulk_import)

    async def delete_bulk_import(self, bulk_import_id: str) -> None:
        """Delete a bulk import.

        DELETE /guest-bulk-imports/{id}
        """
        if not bulk_import_id:
            raise SweapLibraryError("no guest bulk import ID given")
        await self._delete(f"guest-bulk-imports/{bulk_import_id}")

    async def upload_bulk_import_batch(self, bulk_import_id: str, guests: list[Guest]) -> None:
        """Upload a batch of guests into a bulk import.

        PUT /guest-bulk-imports/{id}/upload-batch
        """
        if not bulk_import_id:
            raise SweapLibraryError("no guest bulk import ID given")
        await self._put_json(
            f"guest-bulk-imports/{bulk_import_id}/upload-batch",
            [guest.to_payload() for guest in guests],
        )

    async def finish_bulk_import_upload(self, bulk_import_id: str) -> None:
        """Mark the upload of a bulk import as finished, starting the import.

        PUT /guest-bulk-imports/{id}/state
        """
        if not bulk_import_id:
            raise SweapLibraryError("no guest bulk import ID given")
        state = GuestBulkImportState(state=GuestBulkImportStatus.UPLOAD_FINISHED)
        await self._put_json(f"guest-bulk-imports/{bulk_import_id}/state", state.to_payload())

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, response: httpx.Response) -> StatusCodeError:
        """Convert a non-2xx response into our exceptions.

        Sweap sends an HTML body along with some 5xx codes, so the error
        document is only attached when the body is a JSON error object.
        """
        status = f"{response.status_code} {response.reason_phrase}".strip()
        error_body = self._decode_error_body(response)

        if response.status_code == 404:
            return SweapNotFoundError(response.status_code, status, error_body)
        if response.status_code in (401, 403):
            return SweapAccessDeniedError(response.status_code, status, error_body)
        return StatusCodeError(response.status_code, status, error_body)

    @staticmethod
    def _decode_error_body(response: httpx.Response) -> APIErrorBody | None:
        try:
            payload = response.json()
        except ValueError:
            return None
        if not isinstance(payload, dict) or not ERROR_BODY_KEYS & payload.keys():
            return None
        try:
            return APIErrorBody.model_validate(payload)
        except ValidationError:
            return None
