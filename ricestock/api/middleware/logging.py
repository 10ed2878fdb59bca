"""
Request logging middleware.

Binds a short request id and the acting user (``X-Actor``) into structlog's
context, so every event logged while serving the request, including the
use case and unit of work events, carries them.
"""

import time
import uuid
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ricestock.config import get_logger

logger = get_logger(__name__)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once it completes; 4xx as warnings, 5xx as errors."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, actor=request.headers.get("X-Actor"))
        log = logger.bind(method=request.method, path=request.url.path)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            log.error("request_failed", error=str(e), duration_ms=_elapsed_ms(started))
            raise

        duration_ms = _elapsed_ms(started)
        if response.status_code >= 500:
            log.error("request_completed", status=response.status_code, duration_ms=duration_ms)
        elif response.status_code >= 400:
            log.warning("request_completed", status=response.status_code, duration_ms=duration_ms)
        else:
            log.info("request_completed", status=response.status_code, duration_ms=duration_ms)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
