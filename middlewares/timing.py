import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from dependencies.rate_limit import client_address

logger = logging.getLogger("attendance.access")

# load balancer probes
_QUIET_PATHS = {"/health", "/api/meta/health"}


class TimingMiddleware(BaseHTTPMiddleware):
    """X-Latency-Ms on every response, one access log line per request."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = int((time.perf_counter() - start) * 1000)
        response.headers["X-Latency-Ms"] = str(latency_ms)
        if request.url.path not in _QUIET_PATHS:
            logger.info(
                "%s %s %s -> %s (%d ms)",
                client_address(request), request.method, request.url.path,
                response.status_code, latency_ms,
            )
        return response
