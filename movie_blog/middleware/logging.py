"""
Movie Blog API - Access Log Middleware
=======================================

What:  One access-log line per HTTP request.
How:   After the response is produced, the line records the route template
       that served it (`/posts/{postId}` rather than `/posts/17`), the post ID
       when there is one, the status, the duration and the request ID.
       Requests answered by the catch-all route are logged as `unmatched`.

Level by outcome:
    5xx → ERROR, 4xx → WARNING, anything else → INFO.
    Documentation traffic (/api-docs, /openapi.json) is logged at DEBUG.

Request bodies are never logged.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from movie_blog.middleware.request_id import request_id_var

logger = logging.getLogger("movie_blog.access")

UNMATCHED_ROUTE = "unmatched"
_DOC_PATH_PREFIXES = ("/api-docs", "/openapi.json")


def route_template(request: Request) -> Optional[str]:
    """Path template of the route that handled the request, if any."""
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if template is None:
        return None
    if "unmatched_path" in request.path_params:
        return UNMATCHED_ROUTE
    return template


def level_for(path: str, status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    if path.startswith(_DOC_PATH_PREFIXES):
        return logging.DEBUG
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        path = request.url.path
        route = route_template(request) or path
        post_id = request.path_params.get("postId")
        status = response.status_code
        rid = request_id_var.get("")

        logger.log(
            level_for(path, status),
            "%s %s %d %.1fms [%s]",
            request.method,
            route,
            status,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "route": route,
                "post_id": post_id,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response
