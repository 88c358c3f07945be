"""
Mapeo de filas de la hoja -> candidatos TimetableItem.

Los encabezados son las etiquetas en cirílico que usa la hoja del horario y
tienen que coincidir exactamente (después del trim que hace el parser).
La extracción de campos con nombre ocurre solo aquí; el resto del pipeline
trabaja con TimetableItem tipado.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from timetable_sync.domain.entities.timetable import TimetableItem
from timetable_sync.shared.utils.date_utils import normalize_sheet_date

from .types import FieldMapping, ParsedRow

DATE_HEADER = "Дата"

TIMETABLE_FIELD_MAPPINGS: List[FieldMapping] = [
    FieldMapping(sheet_header="Курс", item_field="course"),
    FieldMapping(sheet_header="Группа", item_field="group"),
    FieldMapping(sheet_header=DATE_HEADER, item_field="date", transform=normalize_sheet_date),
    FieldMapping(sheet_header="Время", item_field="time"),
    FieldMapping(sheet_header="Дисциплина", item_field="subject"),
    FieldMapping(sheet_header="Вид занятий", item_field="lesson_type"),
    FieldMapping(sheet_header="ФИО преподавателя", item_field="teacher_name"),
    FieldMapping(sheet_header="Формат проведения занятия", item_field="lesson_format"),
    FieldMapping(sheet_header="Аудитория/ссылка", item_field="location"),
]

# Campos de TimetableItem sin default: "" si falta el encabezado
_REQUIRED_ITEM_FIELDS = {"group", "date", "time", "subject"}


def map_row_to_item(
    row: ParsedRow, mappings: Optional[List[FieldMapping]] = None
) -> TimetableItem:
    """
    Construye un candidato a partir de una fila parseada.

    Los encabezados ausentes quedan como None ("" para los obligatorios);
    la transformación solo se aplica a valores no vacíos.
    """
    values = {}
    for m in mappings or TIMETABLE_FIELD_MAPPINGS:
        raw = row.get(m.sheet_header)
        if raw is None or not raw.strip():
            values[m.item_field] = "" if m.item_field in _REQUIRED_ITEM_FIELDS else raw
            continue
        values[m.item_field] = m.transform(raw) if m.transform else raw

    for name in _REQUIRED_ITEM_FIELDS:
        values.setdefault(name, "")
    return TimetableItem(**values)


def map_rows(rows: Iterable[ParsedRow]) -> List[TimetableItem]:
    """
    Mapea todas las filas y aplica el filtro de admisión:
    se descarta cualquier candidato sin ФИО преподавателя.
    """
    items = []
    for row in rows:
        item = map_row_to_item(row)
        if not item.teacher_name or not item.teacher_name.strip():
            continue
        items.append(item)
    return items
