"""
BrettAppsCode Backend - Request Logging Middleware
====================================================

What:  One access-log line per request: method, path, status, duration,
       request ID and client IP.
How:   Measures wall time around call_next and picks the log level from the
       status class (5xx ERROR, 4xx WARNING, otherwise INFO). An exception no
       handler claimed becomes the 500 envelope here, while the request ID
       is still bound.

Never logged: request bodies (file contents, prompts), query strings
(the Gemini key travels upstream as one, and clients may copy that habit),
or headers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import error_response, request_id_var

logger = logging.getLogger("brettappscode.access")

# Probed every few seconds by the container runtime
QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await self._call(request, call_next)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await self._call(request, call_next)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response

    async def _call(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unhandled %s on %s %s",
                request_id_var.get(""),
                type(exc).__name__,
                request.method,
                request.url.path,
                exc_info=True,
            )
            return error_response(500, "An unexpected error occurred")
