"""
BrettAppsCode Backend - Health Check Route
============================================

What:  Liveness/readiness probe for the container HEALTHCHECK and load balancers.
How:   Reports the state of the storage root. Upstream AI providers are not
       probed: their keys belong to callers, not to this server.

Status levels:
    healthy:   storage root writable, or absent with a writable parent
               (it will be created on first write)
    degraded:  storage root cannot be written; reads may still work
"""

import logging
import os
import time
from pathlib import Path

from fastapi import APIRouter, Depends

from app import __version__
from app.schemas.common import HealthResponse
from app.services.file_service import FileService, get_file_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


def _storage_state(root: Path) -> str:
    if root.is_dir():
        return "ready" if os.access(root, os.W_OK) else "unwritable"
    if root.exists():
        # something other than a directory is in the way
        return "unwritable"
    parent = next((p for p in root.parents if p.exists()), None)
    if parent is not None and os.access(parent, os.W_OK):
        return "absent"
    return "unwritable"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(files: FileService = Depends(get_file_service)) -> HealthResponse:
    storage = _storage_state(files.storage_root)
    overall = "degraded" if storage == "unwritable" else "healthy"
    if overall != "healthy":
        logger.warning("Health check: storage root %s is %s", files.storage_root, storage)

    return HealthResponse(
        status=overall,
        version=__version__,
        storage=storage,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
