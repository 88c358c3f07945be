"""
Servicios de aplicacion.

Contiene la logica reutilizable que no pertenece
a un caso de uso especifico.
"""
from timetable_sync.application.services.schedule_formatter import (
    NOT_FOUND_MESSAGE,
    ScheduleFormatter,
)

__all__ = [
    "NOT_FOUND_MESSAGE",
    "ScheduleFormatter",
]
