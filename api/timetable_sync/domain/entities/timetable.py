"""
Entidades de dominio del horario.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class TimetableItem:
    """
    Candidato a registro del horario, extraido de una fila de la hoja.

    `date` conserva el texto de la hoja ya normalizado; solo los valores en
    forma canonica (medianoche UTC ISO 8601) llegan a la base de datos.
    """

    group: str
    date: str
    time: str
    subject: str
    course: Optional[str] = None
    lesson_type: Optional[str] = None
    teacher_name: Optional[str] = None
    lesson_format: Optional[str] = None
    location: Optional[str] = None

    def missing_required_fields(self) -> List[str]:
        """Campos obligatorios para persistir que vienen vacios."""
        required = {
            "group": self.group,
            "date": self.date,
            "time": self.time,
            "subject": self.subject,
        }
        return [name for name, value in required.items() if not (value or "").strip()]


@dataclass(frozen=True)
class StoredTimetableEntry:
    """Registro del horario tal como se lee de la base de datos."""

    id: int
    group: str
    date: datetime
    time: str
    subject: str
    course: Optional[str] = None
    lesson_type: Optional[str] = None
    teacher_name: Optional[str] = None
    lesson_format: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class SyncResult:
    """Resultado de reemplazar el horario de los grupos presentes en un lote."""

    new_count: int = 0
    deleted_count: int = 0
    groups_affected: List[str] = field(default_factory=list)
