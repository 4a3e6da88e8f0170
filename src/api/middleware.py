"""Request context middleware for correlation ID tracking."""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.logging import get_logger, request_id_ctx, route_ctx

logger = get_logger(__name__)

RequestResponseEndpoint = Callable[[Request], Awaitable[Response]]


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every request with a correlation ID for structured logs.

    Uses the incoming X-Request-ID header when present, otherwise generates
    one, and echoes it back on the response.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_token = request_id_ctx.set(request_id)
        route_token = route_ctx.set(f"{request.method} {request.url.path}")
        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        finally:
            route_ctx.reset(route_token)
            request_id_ctx.reset(request_token)

        response.headers["X-Request-ID"] = request_id
        return response
