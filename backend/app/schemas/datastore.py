"""
BrettAppsCode Backend - Datasheet / Databank Schemas
======================================================
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class DatasheetCreateRequest(BaseModel):
    id: Optional[str] = None
    data: Any = None


class DatasheetUpdateRequest(BaseModel):
    data: Any = None


class DatasheetResponse(BaseModel):
    success: bool = True
    data: Any = None


class DatasheetSavedResponse(BaseModel):
    success: bool = True
    id: str


class DatabankSetRequest(BaseModel):
    key: Optional[str] = None
    value: Any = None


class DatabankValueResponse(BaseModel):
    success: bool = True
    value: Any = None


class DatabankSavedResponse(BaseModel):
    success: bool = True
    key: str


class DatabankDumpResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any] = Field(default_factory=dict)
