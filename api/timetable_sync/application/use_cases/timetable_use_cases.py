"""
Casos de uso del horario: reemplazo por grupo y consultas.

Reemplazo (overwrite):
1. Sin candidatos => resultado en cero, sin tocar la base.
2. Se calculan los grupos presentes en el lote.
3. Se borran todos los registros de esos grupos (los demás no se tocan).
4. Se descartan candidatos con fecha no canónica o campos obligatorios vacíos.
5. Se insertan los sobrevivientes.

Por defecto el borrado y la inserción se confirman por separado: un fallo
entre ambos deja al grupo sin registros hasta la siguiente corrida.
Con atomic_replace=True ambos pasos van en una sola transacción.
"""
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timetable_sync.application.services.schedule_formatter import (
    NOT_FOUND_MESSAGE,
    ScheduleFormatter,
)
from timetable_sync.domain.entities.timetable import (
    StoredTimetableEntry,
    SyncResult,
    TimetableItem,
)
from timetable_sync.infrastructure.repositories.timetable_repository import TimetableRepository
from timetable_sync.shared.exceptions.domain import ScheduleNotFoundException, ValidationException
from timetable_sync.shared.exceptions.sync import TimetableStoreError
from timetable_sync.shared.utils.date_utils import parse_canonical_utc, utc_today


def affected_groups(items: Iterable[TimetableItem]) -> List[str]:
    """Grupos distintos del lote, en orden de aparición. Los vacíos no cuentan."""
    groups: List[str] = []
    seen = set()
    for item in items:
        group = (item.group or "").strip()
        if group and group not in seen:
            seen.add(group)
            groups.append(group)
    return groups


def build_insert_rows(items: Iterable[TimetableItem]) -> List[dict]:
    """
    Filtro previo a la inserción.

    Descarta en silencio los candidatos con campos obligatorios vacíos o con
    una fecha que no quedó en forma canónica.
    """
    rows = []
    for item in items:
        if item.missing_required_fields():
            continue
        parsed_date = parse_canonical_utc(item.date)
        if parsed_date is None:
            logger.debug(f"Se omite registro del grupo {item.group}: fecha invalida '{item.date}'")
            continue
        rows.append({
            "course": item.course,
            "group": item.group.strip(),
            "date": parsed_date,
            "time": item.time,
            "subject": item.subject,
            "lesson_type": item.lesson_type,
            "teacher_name": item.teacher_name,
            "lesson_format": item.lesson_format,
            "location": item.location,
        })
    return rows


class TimetableUseCases:
    """Casos de uso sobre el horario almacenado."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        atomic_replace: bool = False,
        formatter: Optional[ScheduleFormatter] = None,
    ):
        self.db = db
        self.repository = TimetableRepository(db)
        self.atomic_replace = atomic_replace
        self.formatter = formatter or ScheduleFormatter()

    async def _commit(self, stage: str, groups: List[str]) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise TimetableStoreError(
                f"No se pudo confirmar la transaccion ({stage}): {e}", stage=stage, groups=groups
            ) from e

    async def overwrite_schedules(self, items: List[TimetableItem]) -> SyncResult:
        """
        Reemplaza el horario de los grupos presentes en `items`.

        Raises:
            TimetableStoreError: fallo en el borrado, la inserción o el commit
        """
        if not items:
            logger.warning("No hay registros del horario para reemplazar")
            return SyncResult()

        groups = affected_groups(items)
        logger.info(f"Reemplazando horario de los grupos: {', '.join(groups)}")

        try:
            deleted_count = await self.repository.delete_by_groups(groups)
        except TimetableStoreError:
            await self.db.rollback()
            raise
        logger.info(f"Borrados {deleted_count} registros anteriores")

        if not self.atomic_replace:
            await self._commit("delete", groups)

        rows = build_insert_rows(items)
        if len(rows) < len(items):
            logger.info(f"Descartados {len(items) - len(rows)} registros invalidos antes de insertar")

        try:
            new_count = await self.repository.bulk_insert(rows)
        except TimetableStoreError:
            await self.db.rollback()
            raise
        await self._commit("insert", groups)

        if new_count:
            logger.info(f"Insertados {new_count} registros nuevos")
        else:
            logger.warning("No quedaron registros validos para insertar")

        return SyncResult(
            new_count=new_count,
            deleted_count=deleted_count,
            groups_affected=groups,
        )

    async def get_schedule_for_group(self, group: str) -> List[StoredTimetableEntry]:
        """Horario de un grupo ordenado por fecha y hora."""
        if not group or not group.strip():
            raise ValidationException("El grupo no puede estar vacio", field="group")
        return await self.repository.find_by_group(group.strip())

    async def list_groups(self) -> List[str]:
        return await self.repository.list_groups()

    async def get_next_day_schedule(
        self, today: Optional[datetime] = None
    ) -> Tuple[datetime, List[StoredTimetableEntry]]:
        """
        Registros del dia mas proximo con clases (desde hoy, medianoche UTC).

        Raises:
            ScheduleNotFoundException: no hay ningun registro desde hoy
        """
        since = today or utc_today()
        logger.debug(f"Buscando horario desde {since.isoformat()}")

        items = await self.repository.find_earliest_upcoming(since)
        if not items:
            logger.info(NOT_FOUND_MESSAGE)
            raise ScheduleNotFoundException(since=since.date())

        logger.info(f"Encontrados {len(items)} registros para {items[0].date.date().isoformat()}")
        return items[0].date, items

    async def get_next_day_schedule_formatted(self, today: Optional[datetime] = None) -> str:
        """
        Igual que get_next_day_schedule pero como texto para el bot.

        Raises:
            ScheduleNotFoundException: no hay ningun registro desde hoy
        """
        _, items = await self.get_next_day_schedule(today)
        return self.formatter.format_day(items)
