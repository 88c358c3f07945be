"""
Entidades del dominio.
"""
from timetable_sync.domain.entities.timetable import (
    StoredTimetableEntry,
    SyncResult,
    TimetableItem,
)

__all__ = [
    "StoredTimetableEntry",
    "SyncResult",
    "TimetableItem",
]
