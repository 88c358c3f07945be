"""
Endpoints de lectura directa de Google Sheets (sin tocar la base de datos).
"""
import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from timetable_sync.application.dto.timetable_dto import SheetDataDTO
from timetable_sync.api.v1.dependencies.service_deps import get_sheets_client, get_sync_config
from timetable_sync.core.config import GoogleSheetsSyncConfig, parse_sheet_names
from timetable_sync.infrastructure.external.google_sheets.sheets_client import GoogleSheetsClient
from timetable_sync.shared.exceptions.sync import SyncConfigError


router = APIRouter(prefix="/google-sheets", tags=["Google Sheets"])


def _require_spreadsheet_id(config: GoogleSheetsSyncConfig) -> str:
    if not config.spreadsheet_id:
        raise SyncConfigError("GOOGLE_SPREADSHEET_ID no esta configurado.")
    return config.spreadsheet_id


@router.get("/sheet", response_model=SheetDataDTO)
async def get_sheet(
    sheet_name: Optional[str] = Query(default=None, alias="sheetName"),
    config: GoogleSheetsSyncConfig = Depends(get_sync_config),
    client: GoogleSheetsClient = Depends(get_sheets_client),
) -> SheetDataDTO:
    """Devuelve encabezados y filas de una hoja."""
    spreadsheet_id = _require_spreadsheet_id(config)
    sheet = (sheet_name or "").strip() or config.default_sheet
    data = await asyncio.to_thread(client.get_sheet_data, spreadsheet_id, sheet)
    return SheetDataDTO.model_validate(data)


@router.get("/all-sheets", response_model=List[SheetDataDTO])
async def get_all_sheets(
    sheet_names: Optional[str] = Query(
        default=None,
        alias="sheetNames",
        description="Nombres separados por coma. Si se omite se usa GOOGLE_SHEET_NAMES."
    ),
    config: GoogleSheetsSyncConfig = Depends(get_sync_config),
    client: GoogleSheetsClient = Depends(get_sheets_client),
) -> List[SheetDataDTO]:
    """Devuelve varias hojas; las que fallan se omiten."""
    spreadsheet_id = _require_spreadsheet_id(config)
    names = (
        parse_sheet_names(sheet_names, config.default_sheet)
        if sheet_names
        else list(config.sheet_names)
    )
    sheets = await asyncio.to_thread(client.get_all_sheets_data, spreadsheet_id, names)
    return [SheetDataDTO.model_validate(data) for data in sheets]
