"""
Dependencias para inyeccion del pipeline de sincronizacion.

Los servicios se construyen en el startup y quedan en app.state; si no
existen (por ejemplo en tests sin lifespan) se construyen en el primer uso.
"""
from fastapi import Request

from timetable_sync.core.config import GoogleSheetsSyncConfig
from timetable_sync.infrastructure.external.google_sheets.sheets_client import GoogleSheetsClient
from timetable_sync.infrastructure.external.google_sheets.sync_service import (
    SheetToTimetableSync,
    build_from_settings,
)


def get_sync_service(request: Request) -> SheetToTimetableSync:
    """
    Dependencia para obtener el orquestador del sync.

    Returns:
        SheetToTimetableSync: Instancia compartida por la aplicacion
    """
    service = getattr(request.app.state, "sync_service", None)
    if service is None:
        service = build_from_settings()
        request.app.state.sync_service = service
    return service


def get_sync_config(request: Request) -> GoogleSheetsSyncConfig:
    return get_sync_service(request).config


def get_sheets_client(request: Request) -> GoogleSheetsClient:
    client = getattr(request.app.state, "sheets_client", None)
    if client is None:
        config = get_sync_config(request)
        client = GoogleSheetsClient(base_url=config.base_url, timeout_s=config.request_timeout_s)
        request.app.state.sheets_client = client
    return client
