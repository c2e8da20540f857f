"""
BrettAppsCode Backend - Request ID Middleware
===============================================

What:  Tags every request with a short correlation ID and echoes it back in
       the X-Request-ID response header.
How:   Reuses a client-supplied X-Request-ID when it looks sane, otherwise
       generates one. The ID lives in a ContextVar so exception handlers and
       loggers can read it without access to the Request object.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Any, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client IDs end up in log lines, so only short plain tokens are accepted
_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def new_request_id() -> str:
    return str(uuid.uuid4())[:8]


def error_response(status_code: int, message: str, details: Optional[Any] = None) -> JSONResponse:
    """Build the uniform error envelope, stamped with the current request ID."""
    content = {
        "success": False,
        "error": message,
        "request_id": request_id_var.get(""),
    }
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns the correlation ID before any other processing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        client_id = request.headers.get("X-Request-ID", "")
        rid = client_id if _CLIENT_ID_PATTERN.match(client_id) else new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
