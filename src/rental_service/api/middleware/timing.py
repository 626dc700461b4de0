from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from rental_service.api.middleware.correlation_id import request_id_ctx

logger = logging.getLogger(__name__)

# Slower API calls are logged at WARNING.
SLOW_REQUEST_MS = 1000.0


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        level = logging.WARNING if elapsed_ms >= SLOW_REQUEST_MS else logging.INFO
        logger.log(
            level,
            "[%s] %s %s -> %d in %.1fms",
            request_id_ctx.get(),
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response
