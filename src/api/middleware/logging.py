"""
Request logging middleware.

Every request gets a short id. The id and the active workspace scope are
bound into the structlog context, so log events emitted while handling the
request carry both.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.application.services import get_workspace
from src.config import get_logger

logger = get_logger(__name__)

# Polled by health checks; logged at debug only
_QUIET_PATHS = frozenset({"/health", "/api/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request's method, path, status and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        scope = get_workspace().scope
        structlog.contextvars.bind_contextvars(request_id=request_id, scope=scope)

        log = logger.debug if request.url.path in _QUIET_PATHS else logger.info
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "scope")

        duration_ms = (time.perf_counter() - start) * 1000
        log(
            "request_completed",
            request_id=request_id,
            scope=scope,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
