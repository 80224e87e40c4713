"""
Observability Middleware.

Tags every request with a correlation ID and writes one structured
`parcel_tracker.http` record per request, including requests whose route
raised (storage engine failures surface that way).
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("parcel_tracker.http")

CORRELATION_HEADER = "X-Correlation-ID"


def request_log_data(request: Request, status_code: int, started: float) -> dict:
    return {
        "correlation_id": request.state.correlation_id,
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        "ip": request.client.host if request.client else "unknown",
    }


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        # Kept on request.state so the unhandled-exception handler can echo it
        request.state.correlation_id = request.headers.get(CORRELATION_HEADER, str(uuid.uuid4()))
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.error("Request Failed", extra=request_log_data(request, 500, started))
            raise

        log_data = request_log_data(request, response.status_code, started)
        response.headers[CORRELATION_HEADER] = log_data["correlation_id"]
        response.headers["X-Process-Time"] = str(log_data["duration_ms"])

        if response.status_code >= 500:
            logger.error("Request Failed", extra=log_data)
        elif response.status_code >= 400:
            logger.warning("Request Error", extra=log_data)
        else:
            logger.info("Request API", extra=log_data)

        return response
