"""
Request Context Middleware Tests.

WHAT: Unit tests for the RequestContextMiddleware.

WHY: Request IDs tie access log lines and service log lines together.
These tests ensure correct behavior for:
- Client IP extraction (direct and through proxies)
- Request ID generation and reuse
- Context availability during the request only
"""

from unittest.mock import MagicMock

import pytest
from starlette.requests import Request
from starlette.responses import Response

from subs_aggregator.middleware.request_context import (
    REQUEST_ID_HEADER,
    RequestContextMiddleware,
    get_client_ip,
    get_request_context,
)


def _make_request(
    headers: dict = None,
    client_host: str = "10.0.0.1",
    method: str = "GET",
    path: str = "/subs",
) -> Request:
    """Build a Request from a minimal ASGI scope."""
    scope = {
        "type": "http",
        "method": method,
        "scheme": "http",
        "server": ("test", 80),
        "path": path,
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (client_host, 12345) if client_host else None,
    }
    return Request(scope)


class TestGetClientIp:
    """Tests for the get_client_ip function."""

    def test_from_x_real_ip(self):
        request = _make_request(headers={"X-Real-IP": "192.168.1.100"})
        assert get_client_ip(request) == "192.168.1.100"

    def test_from_x_forwarded_for_first_hop(self):
        request = _make_request(
            headers={"X-Forwarded-For": "203.0.113.50, 70.41.3.18, 150.172.238.178"}
        )
        assert get_client_ip(request) == "203.0.113.50"

    def test_direct_connection(self):
        assert get_client_ip(_make_request()) == "10.0.0.1"

    def test_unknown_fallback(self):
        assert get_client_ip(_make_request(client_host=None)) == "unknown"


class TestRequestContextMiddleware:
    """Tests for the RequestContextMiddleware class."""

    @pytest.mark.asyncio
    async def test_generates_request_id(self):
        async def call_next(req):
            return Response(content="OK", status_code=200)

        middleware = RequestContextMiddleware(app=MagicMock())
        response = await middleware.dispatch(_make_request(), call_next)

        # UUID4 format (36 chars with hyphens)
        assert len(response.headers[REQUEST_ID_HEADER]) == 36

    @pytest.mark.asyncio
    async def test_reuses_incoming_request_id(self):
        async def call_next(req):
            return Response(content="OK", status_code=200)

        middleware = RequestContextMiddleware(app=MagicMock())
        response = await middleware.dispatch(
            _make_request(headers={REQUEST_ID_HEADER: "abc-123"}), call_next
        )

        assert response.headers[REQUEST_ID_HEADER] == "abc-123"

    @pytest.mark.asyncio
    async def test_context_available_during_request(self):
        captured = {}

        async def call_next(req):
            captured["state"] = req.state.context
            captured["var"] = get_request_context()
            return Response(content="OK", status_code=201)

        middleware = RequestContextMiddleware(app=MagicMock())
        await middleware.dispatch(
            _make_request(method="POST", path="/subs", headers={"X-Real-IP": "1.2.3.4"}),
            call_next,
        )

        assert captured["state"] is captured["var"]
        assert captured["var"].method == "POST"
        assert captured["var"].path == "/subs"
        assert captured["var"].client_ip == "1.2.3.4"

    @pytest.mark.asyncio
    async def test_context_reset_after_request(self):
        async def call_next(req):
            return Response(content="OK", status_code=200)

        middleware = RequestContextMiddleware(app=MagicMock())
        await middleware.dispatch(_make_request(), call_next)

        assert get_request_context() is None
