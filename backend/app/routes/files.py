"""
BrettAppsCode Backend - File Store Route Handlers
===================================================

What:  The five file endpoints used by the editor's open/save/upload dialogs.
How:   Extract the request data, delegate to FileService, shape the response.
       Errors propagate as exceptions to the global handlers in main.py.

Routes:
    POST /api/upload               multipart `file`        → UploadResponse
    GET  /api/download/{filename}  attachment stream
    GET  /api/read/{filename}                              → ReadResponse
    POST /api/write                {filename, content}     → WriteResponse
    GET  /api/files                                        → FileListResponse

`{filename:path}` lets names containing "/" reach the sanitizer, so a
traversal attempt is answered with 403 rather than a routing 404.
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.exceptions import MissingParametersError, NoFileProvidedError
from app.schemas.common import ErrorResponse
from app.schemas.files import (
    FileListResponse,
    ReadResponse,
    UploadResponse,
    WriteRequest,
    WriteResponse,
)
from app.services.file_service import FileService, get_file_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Files"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"description": "No file uploaded", "model": ErrorResponse}},
    summary="Upload a file into the storage root",
)
async def upload_file(
    file: Union[UploadFile, str, None] = File(default=None, description="File to store"),
    files: FileService = Depends(get_file_service),
) -> UploadResponse:
    """
    Store the `file` part under "<ms stamp>-<basename>".

    Uploading the same original name twice always yields two different
    stored names.
    """
    # a plain text field named "file" is not a file part
    if not isinstance(file, StarletteUploadFile):
        raise NoFileProvidedError()

    try:
        content = await file.read()
        logger.info(
            "Received upload: filename=%s, size=%d bytes",
            file.filename or "unknown",
            len(content),
        )
        stored = await files.save_upload(file.filename, content)
    finally:
        await file.close()

    return UploadResponse(
        filename=stored.filename,
        path=stored.path,
        original_name=stored.original_name,
    )


@router.get(
    "/download/{filename:path}",
    response_class=FileResponse,
    responses={
        200: {"description": "File contents as an attachment"},
        403: {"description": "Access denied", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
    summary="Download a stored file",
)
async def download_file(
    filename: str,
    files: FileService = Depends(get_file_service),
) -> FileResponse:
    basename, path = await files.locate(filename)
    return FileResponse(path=str(path), filename=basename)


@router.get(
    "/read/{filename:path}",
    response_model=ReadResponse,
    responses={
        403: {"description": "Access denied", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
    summary="Read a stored file as text",
)
async def read_file(
    filename: str,
    files: FileService = Depends(get_file_service),
) -> ReadResponse:
    content = await files.read_text(filename)
    return ReadResponse(content=content)


@router.post(
    "/write",
    response_model=WriteResponse,
    responses={
        400: {"description": "Filename and content required", "model": ErrorResponse},
        403: {"description": "Access denied", "model": ErrorResponse},
    },
    summary="Create or overwrite a text file",
)
async def write_file(
    payload: Optional[WriteRequest] = None,
    files: FileService = Depends(get_file_service),
) -> WriteResponse:
    """
    Write `content` to `filename` (sanitized to its basename).

    `content` may be an empty string; only an absent (or null) value is
    rejected.
    """
    if payload is None or not payload.filename or payload.content is None:
        raise MissingParametersError()

    written = await files.write_text(payload.filename, payload.content)
    return WriteResponse(filename=written)


@router.get(
    "/files",
    response_model=FileListResponse,
    summary="List stored files",
)
async def list_files(files: FileService = Depends(get_file_service)) -> FileListResponse:
    return FileListResponse(files=await files.list_names())
