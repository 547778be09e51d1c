"""
Request logging middleware.

Every request gets an id, taken from an incoming ``X-Request-ID`` header when
present, which is bound into the structlog context for the duration of the
request so service-level events carry it too.
"""

import time
import uuid
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from artstock.config import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

# Probes hit these constantly; logged at debug only
QUIET_PATHS = frozenset({"/api/health", "/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs request completion with status and timing."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        bind_request_context(request_id=request_id)

        log = logger.debug if request.url.path in QUIET_PATHS else logger.info
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
        else:
            duration_ms = (time.perf_counter() - start) * 1000
            log(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
            return response
        finally:
            clear_request_context()
