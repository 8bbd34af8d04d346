"""
Request context middleware for access logging.

WHAT: Middleware that gives every request an ID, exposes it through a
ContextVar, and writes one access log line per request.

WHY: Log lines from the service and DAO layers can be correlated with the
HTTP request that caused them, and clients can quote the ID back from the
``X-Request-ID`` response header.

HOW: Uses Starlette's BaseHTTPMiddleware. The context is stored on
``request.state`` (for handlers) and in a ContextVar (for code without the
request object).
"""

import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass
class RequestContext:
    """
    Request-scoped data.

    Fields:
    - request_id: Unique identifier for log correlation
    - client_ip: Client address (first X-Forwarded-For hop when proxied)
    - path: Request path
    - method: HTTP method
    """

    request_id: str
    client_ip: str
    path: str
    method: str


_request_context: ContextVar[Optional[RequestContext]] = ContextVar(
    "request_context", default=None
)


def get_request_context() -> Optional[RequestContext]:
    """
    Get the current request context.

    Returns:
        RequestContext if within a request, None otherwise
    """
    return _request_context.get()


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from a request.

    Checks X-Real-IP, then the first entry of X-Forwarded-For, then the
    direct connection address.
    """
    x_real_ip = request.headers.get("X-Real-IP")
    if x_real_ip:
        return x_real_ip.strip()

    x_forwarded_for = request.headers.get("X-Forwarded-For")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that captures request context and logs each request.

    An incoming ``X-Request-ID`` header is reused; otherwise a UUID4 is
    generated. The ID is echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        context = RequestContext(
            request_id=request_id,
            client_ip=get_client_ip(request),
            path=request.url.path,
            method=request.method,
        )
        request.state.context = context
        token = _request_context.set(context)

        started = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s -> %d (%.1f ms) request_id=%s client=%s",
                context.method,
                context.path,
                response.status_code,
                duration_ms,
                request_id,
                context.client_ip,
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            _request_context.reset(token)
