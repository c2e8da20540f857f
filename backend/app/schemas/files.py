"""
BrettAppsCode Backend - File Store Schemas
============================================

What:  Request/response models for /api/upload, /api/read, /api/write, /api/files.
How:   Field aliases keep the camelCase names the browser editor already uses
       (`originalName`); FastAPI serializes responses by alias.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    success: bool = True
    filename: str = Field(description="Generated name the file was stored under")
    path: str = Field(description="Absolute storage path of the stored file")
    original_name: str = Field(alias="originalName", description="Client-supplied filename")

    model_config = {"populate_by_name": True}


class ReadResponse(BaseModel):
    success: bool = True
    content: str = Field(description="Whole file decoded as UTF-8 text")


class WriteRequest(BaseModel):
    """
    Body of POST /api/write.

    Both fields are optional at the schema level so the route can report a
    missing one as "Filename and content required" (400) instead of a
    generic validation failure. An empty `content` is valid.
    """

    filename: Optional[str] = None
    content: Optional[str] = None


class WriteResponse(BaseModel):
    success: bool = True
    filename: str = Field(description="Sanitized name actually written")


class FileListResponse(BaseModel):
    files: List[str] = Field(default_factory=list)
