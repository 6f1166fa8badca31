"""Request ID and request logging middleware."""

import logging
import time
import uuid
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

SLOW_REQUEST_THRESHOLD_MS = 1000.0
REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Give every request an ID.

    An inbound ``X-Request-ID`` is reused; otherwise a UUID is generated.
    The ID is stored in ``request.state.request_id`` and echoed back in the
    response header so logs and client reports can be correlated.
    """

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        response: Response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request.

    Requests slower than SLOW_REQUEST_THRESHOLD_MS log at WARNING.
    """

    async def dispatch(self, request: Request, call_next: Any) -> Response:
        start = time.perf_counter()

        response: Response = await call_next(request)

        duration_ms = (time.perf_counter() - start) * 1000.0
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        log = logger.warning if duration_ms >= SLOW_REQUEST_THRESHOLD_MS else logger.info
        log(
            "%s %s -> %d in %.2f ms",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={"request_id": getattr(request.state, "request_id", "unknown")},
        )
        return response


def get_request_id(request: Request) -> str:
    """Request ID assigned by RequestIDMiddleware (or a fresh one)."""
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())
