"""
BrettAppsCode Backend - Custom Exception Hierarchy
====================================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these and
       return the JSON error envelope with the matching HTTP status code.
Who:   Raised by services and routes; caught by global handlers.

Exception Hierarchy:
    BrettAppsCodeError (base)                → 500
    ├── ValidationError                      → 400 Bad Request (client can fix)
    │   ├── NoFileProvidedError              → "No file uploaded"
    │   ├── MissingParametersError           → "Filename and content required", ...
    │   └── InvalidServiceError              → "Invalid service"
    ├── AccessDeniedError                    → 403 Forbidden
    ├── NotFoundError                        → 404 Not Found
    ├── FileStorageError                     → 500 Internal Server Error
    └── GatewayError                         → 500 Internal Server Error
        ├── UpstreamError                    → provider returned non-2xx / unreachable
        └── MalformedUpstreamResponseError   → reply lacks the expected text field

Error envelope (every failure):
    {"success": false, "error": "<message>", "request_id": "a1b2c3d4"}
"""

from typing import Any, Dict, Optional


class BrettAppsCodeError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BrettAppsCodeError):
    """
    Raised when client input is missing or unusable.

    HTTP:    400 Bad Request
    No side effects have happened when this is raised.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NoFileProvidedError(ValidationError):
    """The upload request carried no `file` part."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="No file uploaded", field="file", context=context)


class MissingParametersError(ValidationError):
    """A required JSON body field is absent (an empty string may still be valid)."""

    def __init__(
        self,
        message: str = "Filename and content required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidServiceError(ValidationError):
    """
    Raised when the gateway is asked for a provider it does not know.

    Raised before any outbound request is built.
    """

    def __init__(self, service: Any = None):
        super().__init__(
            message="Invalid service",
            field="service",
            context={"service": repr(service)},
        )
        self.service = service


class AccessDeniedError(BrettAppsCodeError):
    """
    Raised when a filename would resolve outside the storage root.

    HTTP:    403 Forbidden
    The response message is always the generic "Access denied"; the offending
    name goes into context for the server log only. The resolved path is
    never included anywhere.
    """

    status_code = 403

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Access denied", context=context)


class NotFoundError(BrettAppsCodeError):
    """
    Raised when a requested file or key does not exist.

    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        message: str = "File not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(BrettAppsCodeError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, storage root is not a directory.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class GatewayError(BrettAppsCodeError):
    """
    Base for failures of a single upstream chat-completion call.

    HTTP:    500 Internal Server Error
    Never retried: the caller decides whether to try again.
    """

    def __init__(
        self,
        message: str = "AI service request failed",
        provider: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if provider:
            ctx["provider"] = provider
        super().__init__(message=message, context=ctx)
        self.provider = provider


class UpstreamError(GatewayError):
    """
    The provider answered with a non-success status, timed out, or was unreachable.

    `upstream_status` is None when no HTTP response was received at all.
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        upstream_status: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if upstream_status is not None:
            ctx["upstream_status"] = upstream_status
        super().__init__(message=message, provider=provider, context=ctx)
        self.upstream_status = upstream_status


class MalformedUpstreamResponseError(GatewayError):
    """The provider answered 2xx but the generated text could not be located."""

    def __init__(self, provider: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Malformed response from {provider} API",
            provider=provider,
            context=context,
        )
