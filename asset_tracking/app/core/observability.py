"""
Observability setup.

Configures application logging and tags every request with a
correlation ID and timing information.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("asset_tracking.requests")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
CORRELATION_HEADER = "X-Correlation-ID"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the application process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("asset_tracking").setLevel(level.upper())


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Process-Time"] = str(duration_ms)

        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "ip": request.client.host if request.client else "unknown"
        }
        logger.log(
            _level_for(response.status_code),
            "%s %s -> %s (%sms) [%s]",
            request.method, request.url.path, response.status_code, duration_ms, correlation_id,
            extra=log_data
        )

        return response
