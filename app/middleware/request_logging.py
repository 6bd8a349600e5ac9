import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("app")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request. Reads are logged at DEBUG unless they fail."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        method = request.method
        status_code = response.status_code
        if status_code >= 500:
            level = logging.ERROR
        elif method != "GET" or status_code >= 400:
            level = logging.INFO
        else:
            level = logging.DEBUG
        logger.log(level, f"{method} {request.url.path} -> {status_code} in {elapsed:.4f}s")

        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response
