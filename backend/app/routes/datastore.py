"""
BrettAppsCode Backend - Datasheet & Databank Route Handlers
=============================================================

What:  Scratch key-value storage for the editor's notebook cells.
How:   Thin handlers over two injected KeyValueStore instances. Nothing here
       survives a restart.

Routes:
    GET  /api/datasheet/{sheet_id}     → {success, data}   | 404 "Data sheet not found"
    POST /api/datasheet  {id, data}    → {success, id}
    PUT  /api/datasheet/{sheet_id}     → {success, id}
    GET  /api/databank/{key}           → {success, value}  | 404 "Key not found"
    POST /api/databank   {key, value}  → {success, key}
    GET  /api/databank                 → {success, data}
"""

from typing import Optional

from fastapi import APIRouter, Depends

from app.exceptions import MissingParametersError
from app.schemas.common import ErrorResponse
from app.schemas.datastore import (
    DatabankDumpResponse,
    DatabankSavedResponse,
    DatabankSetRequest,
    DatabankValueResponse,
    DatasheetCreateRequest,
    DatasheetResponse,
    DatasheetSavedResponse,
    DatasheetUpdateRequest,
)
from app.services.kv_store import KeyValueStore, get_databank_store, get_datasheet_store

router = APIRouter(prefix="/api", tags=["Data Store"])


# ── Datasheets ────────────────────────────────────────────────────────────

@router.get(
    "/datasheet/{sheet_id}",
    response_model=DatasheetResponse,
    responses={404: {"description": "Data sheet not found", "model": ErrorResponse}},
)
async def get_datasheet(
    sheet_id: str,
    sheets: KeyValueStore = Depends(get_datasheet_store),
) -> DatasheetResponse:
    return DatasheetResponse(data=sheets.get(sheet_id))


@router.post(
    "/datasheet",
    response_model=DatasheetSavedResponse,
    responses={400: {"description": "Missing id", "model": ErrorResponse}},
)
async def create_datasheet(
    payload: Optional[DatasheetCreateRequest] = None,
    sheets: KeyValueStore = Depends(get_datasheet_store),
) -> DatasheetSavedResponse:
    if payload is None or not payload.id:
        raise MissingParametersError(message="Data sheet id required")
    sheets.set(payload.id, payload.data)
    return DatasheetSavedResponse(id=payload.id)


@router.put("/datasheet/{sheet_id}", response_model=DatasheetSavedResponse)
async def update_datasheet(
    sheet_id: str,
    payload: Optional[DatasheetUpdateRequest] = None,
    sheets: KeyValueStore = Depends(get_datasheet_store),
) -> DatasheetSavedResponse:
    sheets.set(sheet_id, payload.data if payload else None)
    return DatasheetSavedResponse(id=sheet_id)


# ── Databank ──────────────────────────────────────────────────────────────

@router.get("/databank", response_model=DatabankDumpResponse)
async def dump_databank(
    bank: KeyValueStore = Depends(get_databank_store),
) -> DatabankDumpResponse:
    return DatabankDumpResponse(data=bank.snapshot())


@router.get(
    "/databank/{key}",
    response_model=DatabankValueResponse,
    responses={404: {"description": "Key not found", "model": ErrorResponse}},
)
async def get_databank_value(
    key: str,
    bank: KeyValueStore = Depends(get_databank_store),
) -> DatabankValueResponse:
    return DatabankValueResponse(value=bank.get(key))


@router.post(
    "/databank",
    response_model=DatabankSavedResponse,
    responses={400: {"description": "Missing key", "model": ErrorResponse}},
)
async def set_databank_value(
    payload: Optional[DatabankSetRequest] = None,
    bank: KeyValueStore = Depends(get_databank_store),
) -> DatabankSavedResponse:
    if payload is None or not payload.key:
        raise MissingParametersError(message="Databank key required")
    bank.set(payload.key, payload.value)
    return DatabankSavedResponse(key=payload.key)
