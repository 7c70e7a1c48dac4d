"""Request logging middleware.

Every request gets a request id bound to the log context and exactly one
``request_finished`` (or ``request_failed``) event with its duration.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from knowledge_base.core.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"

# Probes hit the service every few seconds
QUIET_PATH_PREFIXES = ("/health",)


def client_ip(request: Request) -> str:
    """First address of X-Forwarded-For, then X-Real-IP, then the peer."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.headers.get("x-real-ip") or (request.client.host if request.client else "unknown")


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind request context for logging and report the outcome of each request.

    An incoming X-Request-ID is reused so clients can correlate their logs
    with ours. 4xx responses log at warning, 5xx at error and health probes
    at debug.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        bind_context(request_id=request_id, method=request.method, path=request.url.path)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request_failed", duration_ms=_elapsed_ms(started))
            raise
        else:
            duration_ms = _elapsed_ms(started)
            self._log_for(request, response.status_code)(
                "request_finished",
                status_code=response.status_code,
                duration_ms=duration_ms,
                client_ip=client_ip(request),
                query=str(request.query_params) or None,
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers[PROCESS_TIME_HEADER] = f"{duration_ms / 1000:.4f}"
            return response
        finally:
            clear_context()

    @staticmethod
    def _log_for(request: Request, status_code: int) -> Callable[..., None]:
        if status_code >= 500:
            return logger.error
        if status_code >= 400:
            return logger.warning
        if request.url.path.startswith(QUIET_PATH_PREFIXES):
            return logger.debug
        return logger.info
