"""
Endpoints para sincronizacion de datos externos.
Permite lanzar el sync Google Sheets -> base de datos bajo demanda.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from loguru import logger

from timetable_sync.application.dto.timetable_dto import SheetSyncReportDTO
from timetable_sync.api.v1.dependencies.service_deps import get_sync_service
from timetable_sync.infrastructure.external.google_sheets.sync_service import SheetToTimetableSync


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/sheet-to-db",
    response_model=SheetSyncReportDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar una hoja de Google Sheets con la base de datos"
)
async def sync_sheet_to_db(
    sheet_name: Optional[str] = Query(
        default=None,
        alias="sheetName",
        description="Nombre de la hoja. Si se omite se usa GOOGLE_DEFAULT_SHEET."
    ),
    service: SheetToTimetableSync = Depends(get_sync_service),
) -> SheetSyncReportDTO:
    """
    Ejecuta una corrida completa del sync para la hoja indicada.

    Reemplaza el horario de los grupos presentes en la hoja; los demas
    grupos no se modifican. Los errores se devuelven como AppException.
    """
    logger.info(f"Sync solicitado desde API (hoja: {sheet_name or 'por defecto'})")
    report = await service.run_once(sheet_name)
    return SheetSyncReportDTO(**report.to_dict())
