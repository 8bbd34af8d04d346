"""
Middleware package.

WHY: Cross-cutting request concerns (request IDs, access logging) applied
to every route.
"""

from subs_aggregator.middleware.request_context import (
    REQUEST_ID_HEADER,
    RequestContext,
    RequestContextMiddleware,
    get_client_ip,
    get_request_context,
)

__all__ = [
    "REQUEST_ID_HEADER",
    "RequestContext",
    "RequestContextMiddleware",
    "get_client_ip",
    "get_request_context",
]
