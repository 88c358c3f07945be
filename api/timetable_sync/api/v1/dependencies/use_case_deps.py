"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from timetable_sync.application.use_cases.timetable_use_cases import TimetableUseCases
from timetable_sync.infrastructure.database.session import get_db


async def get_timetable_use_cases(
    db: AsyncSession = Depends(get_db)
) -> TimetableUseCases:
    """
    Dependencia para obtener los casos de uso del horario.

    Args:
        db: Sesión de base de datos

    Returns:
        TimetableUseCases: Instancia de casos de uso
    """
    return TimetableUseCases(db)
