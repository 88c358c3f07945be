"""
Implementación del repositorio del horario.
Maneja las operaciones de base de datos para la entidad TimetableModel.

El repositorio no hace commit: el caller decide los limites de la transaccion.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timetable_sync.domain.entities.timetable import StoredTimetableEntry
from timetable_sync.infrastructure.database.models import TimetableModel
from timetable_sync.shared.exceptions.sync import TimetableStoreError
from timetable_sync.shared.utils.date_utils import ensure_utc


def _to_entry(row: TimetableModel) -> StoredTimetableEntry:
    return StoredTimetableEntry(
        id=row.id,
        group=row.group,
        date=ensure_utc(row.date),
        time=row.time,
        subject=row.subject,
        course=row.course,
        lesson_type=row.lesson_type,
        teacher_name=row.teacher_name,
        lesson_format=row.lesson_format,
        location=row.location,
    )


class TimetableRepository:
    """Repositorio para gestionar el horario en la base de datos."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def delete_by_groups(self, groups: Iterable[str]) -> int:
        """
        Borra todos los registros de los grupos indicados.

        Returns:
            int: Cantidad de registros borrados
        """
        groups_list = list(groups)
        if not groups_list:
            return 0
        try:
            result = await self.db.execute(
                delete(TimetableModel).where(TimetableModel.group.in_(groups_list))
            )
        except SQLAlchemyError as e:
            raise TimetableStoreError(
                f"No se pudieron borrar los registros: {e}", stage="delete", groups=groups_list
            ) from e
        return result.rowcount or 0

    async def bulk_insert(self, rows: List[dict]) -> int:
        """
        Inserta los registros ya validados (date como datetime UTC).

        Returns:
            int: Cantidad de registros insertados
        """
        if not rows:
            return 0
        models = [TimetableModel(**row) for row in rows]
        try:
            self.db.add_all(models)
            await self.db.flush()
        except SQLAlchemyError as e:
            groups = sorted({row.get("group") for row in rows if row.get("group")})
            raise TimetableStoreError(
                f"No se pudieron insertar los registros: {e}", stage="insert", groups=groups
            ) from e
        return len(models)

    async def find_by_group(self, group: str) -> List[StoredTimetableEntry]:
        """
        Obtiene el horario de un grupo ordenado por fecha y hora.
        """
        result = await self.db.execute(
            select(TimetableModel)
            .where(TimetableModel.group == group)
            .order_by(TimetableModel.date.asc(), TimetableModel.time.asc())
        )
        return [_to_entry(row) for row in result.scalars().all()]

    async def find_earliest_upcoming(self, today: datetime) -> List[StoredTimetableEntry]:
        """
        Obtiene los registros del dia mas proximo con clases (fecha >= today).
        Ordenados por grupo y hora. Lista vacia si no hay ninguno.
        """
        next_date = await self.db.scalar(
            select(func.min(TimetableModel.date)).where(TimetableModel.date >= today)
        )
        if next_date is None:
            return []

        result = await self.db.execute(
            select(TimetableModel)
            .where(TimetableModel.date == next_date)
            .order_by(TimetableModel.group.asc(), TimetableModel.time.asc())
        )
        return [_to_entry(row) for row in result.scalars().all()]

    async def count_by_group(self, group: str) -> int:
        """Cantidad de registros de un grupo."""
        count: Optional[int] = await self.db.scalar(
            select(func.count(TimetableModel.id)).where(TimetableModel.group == group)
        )
        return count or 0

    async def list_groups(self) -> List[str]:
        """Grupos con al menos un registro, en orden alfabetico."""
        result = await self.db.execute(
            select(TimetableModel.group).distinct().order_by(TimetableModel.group.asc())
        )
        return list(result.scalars().all())
