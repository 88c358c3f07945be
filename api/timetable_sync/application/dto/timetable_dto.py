"""
DTOs del horario y de la sincronizacion.
Definen la estructura de datos que expone el API.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class TimetableEntryDTO(BaseModel):
    """Registro del horario almacenado."""
    id: int
    group: str
    date: datetime = Field(..., description="Medianoche UTC del dia de la clase")
    time: str
    subject: str
    course: Optional[str] = None
    lesson_type: Optional[str] = None
    teacher_name: Optional[str] = None
    lesson_format: Optional[str] = None
    location: Optional[str] = None

    class Config:
        from_attributes = True


class GroupScheduleDTO(BaseModel):
    """Horario completo de un grupo."""
    group: str
    total: int
    items: List[TimetableEntryDTO] = Field(default_factory=list)


class NextDayScheduleDTO(BaseModel):
    """Registros del dia mas proximo con clases."""
    date: datetime
    total: int
    items: List[TimetableEntryDTO] = Field(default_factory=list)
    text: str = Field(..., description="Mismo contenido formateado como en el bot")


class DbOperationsDTO(BaseModel):
    """Conteos del reemplazo en la base de datos."""
    new_count: int = 0
    deleted_count: int = 0
    groups_affected: List[str] = Field(default_factory=list)


class SheetSyncReportDTO(BaseModel):
    """Resultado de sincronizar una hoja."""
    sheet: str
    source_rows_fetched: int
    message: str
    success: bool = True
    error: Optional[str] = None
    db_operations: DbOperationsDTO = Field(default_factory=DbOperationsDTO)


class SheetDataDTO(BaseModel):
    """Contenido parseado de una hoja."""
    title: str
    headers: List[str] = Field(default_factory=list)
    rows: List[Dict[str, str]] = Field(default_factory=list)

    class Config:
        from_attributes = True
