"""Fake Sweap API served through httpx.MockTransport.

Routes are registered per (method, path) with the path relative to the
API base URL. Token requests are answered automatically.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx

API_URL = "https://api.sweap.test/core/v1/"
TOKEN_URL = "https://auth.sweap.test/realms/users/protocol/openid-connect/token"
ACCESS_TOKEN = "test-access-token"

_API_PATH = httpx.URL(API_URL).path

Handler = Callable[[httpx.Request], httpx.Response]


def json_response(status_code: int = 200, body: Any = None) -> Handler:
    """Handler answering every call with the same JSON document."""

    def handle(request: httpx.Request) -> httpx.Response:
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    return handle


class MockSweapAPI:
    """In-memory stand-in for the Sweap API and its token endpoint.

    Usage:
        api.add("GET", "events", json=[make_event_dict()])
        client = SweapClient(settings=settings, transport=api.transport)
        events = await client.get_events()
        assert api.last_request.url.params["name"] == "..."
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Handler]] = {}
        self.requests: list[httpx.Request] = []
        self.token_requests: list[httpx.Request] = []
        self.token_handler: Handler = json_response(
            200, {"access_token": ACCESS_TOKEN, "expires_in": 300, "token_type": "Bearer"}
        )
        self.transport = httpx.MockTransport(self.handle)

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json: Any = None,
        handler: Handler | None = None,
    ) -> None:
        """Register a response for a route.

        Registering the same route again queues another response; the last
        one keeps answering once the queue is drained.
        """
        self.routes.setdefault((method, path), []).append(
            handler or json_response(status, json)
        )

    def handle(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URL:
            self.token_requests.append(request)
            return self.token_handler(request)

        self.requests.append(request)
        path = request.url.path.removeprefix(_API_PATH)
        handlers = self.routes.get((request.method, path))
        if not handlers:
            return httpx.Response(
                404,
                json={"error": "NOT_FOUND", "code": 404, "message": f"no route {path}"},
            )
        handler = handlers.pop(0) if len(handlers) > 1 else handlers[0]
        return handler(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        """Decoded body of the last API request."""
        return json.loads(self.last_request.content)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        """Requests received for one route."""
        return [
            r
            for r in self.requests
            if r.method == method and r.url.path.removeprefix(_API_PATH) == path
        ]
