"""
Router principal de la API v1.
Agrupa todos los endpoints de la version 1.
"""
from fastapi import APIRouter

from timetable_sync.api.v1.endpoints import google_sheets, sync, timetable


# Router principal de la API v1
api_router = APIRouter(prefix="/v1")

# Incluir routers de endpoints especificos
api_router.include_router(sync.router)
api_router.include_router(google_sheets.router)
api_router.include_router(timetable.router)
