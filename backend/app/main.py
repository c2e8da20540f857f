"""
BrettAppsCode Backend - FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn app.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Logging → GZip → CORS     │
    │                                                      │
    │  Routes:                                             │
    │    /api/upload /api/download /api/read /api/write    │
    │    /api/files  /api/gateway  /api/datasheet          │
    │    /api/databank  /health  /  (static front end)     │
    │                                                      │
    │  Exception Handlers:                                 │
    │    Validation→400  AccessDenied→403  NotFound→404    │
    │    Gateway→500     FileStorage→500   anything→500    │
    └──────────────────────────────────────────────────────┘

Every failure leaves as {"success": false, "error": "...", "request_id": "..."}.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import settings
from app.exceptions import (
    AccessDeniedError,
    BrettAppsCodeError,
    FileStorageError,
    GatewayError,
    NotFoundError,
    ValidationError,
)
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, error_response, request_id_var
from app.routes import datastore, files, gateway, health
from app.services.file_service import get_file_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # httpx logs full request URLs at INFO, and Gemini URLs carry the API key
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, then a summary of the effective configuration.
    The storage root is NOT created here; the first write or upload does that.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("BrettAppsCode Backend %s starting up...", __version__)
    logger.info("Storage root: %s", get_file_service().storage_root)
    logger.info("Upstream timeout: %.0fs", settings.upstream_timeout)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("BrettAppsCode Backend shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the error envelope.

    Handler hierarchy:
        ValidationError         → 400 (NoFileProvided, MissingParameters, InvalidService)
        RequestValidationError  → 400 (body not the expected JSON shape)
        AccessDeniedError       → 403
        NotFoundError           → 404
        GatewayError            → 500 (UpstreamError, MalformedUpstreamResponse)
        FileStorageError        → 500
        BrettAppsCodeError      → 500
        StarletteHTTPException  → its own status (unknown route, wrong method)
        Exception               → 500 generic message, stack trace logged only
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Malformed request body on %s", request_id_var.get(""), request.url.path)
        return error_response(400, "Invalid request", details=jsonable_encoder(exc.errors()))

    @app.exception_handler(AccessDeniedError)
    async def handle_access_denied(request: Request, exc: AccessDeniedError):
        # context holds the raw name; the response never does
        logger.warning("[%s] Access denied: %s", request_id_var.get(""), exc.context)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(GatewayError)
    async def handle_gateway_error(request: Request, exc: GatewayError):
        logger.error("[%s] Gateway error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error("[%s] File storage error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(BrettAppsCodeError)
    async def handle_app_error(request: Request, exc: BrettAppsCodeError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        response = error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return error_response(500, "An unexpected error occurred")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="BrettAppsCode API",
        description=(
            "File storage and AI gateway backend for the BrettAppsCode browser editor. "
            "Stores files in one flat directory and forwards prompts to DeepSeek, "
            "Gemini, or OpenAI with the caller's own API key."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(files.router)
    app.include_router(gateway.router)
    app.include_router(datastore.router)
    app.include_router(health.router)

    # Front-end bundle last so it never shadows /api or /health
    public = settings.public_path
    if public.is_dir():
        app.mount("/", StaticFiles(directory=str(public), html=True), name="public")
        logger.info("Serving static front end from %s", public)

    return app


app = create_app()
