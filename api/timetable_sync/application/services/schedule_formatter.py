"""
Formateo del horario como texto para el bot de Telegram.
"""
from __future__ import annotations

from typing import Dict, List, Sequence

from timetable_sync.domain.entities.timetable import StoredTimetableEntry
from timetable_sync.shared.utils.date_utils import format_ru_date

NOT_FOUND_MESSAGE = "Расписание на ближайшие дни не найдено."
SEPARATOR = "---------------------"


class ScheduleFormatter:
    """
    Convierte los registros de un dia en el mensaje del bot.

    Uso:
        text = ScheduleFormatter().format_day(items)
    """

    def __init__(self, empty_value: str = "-"):
        self.empty_value = empty_value

    def _value(self, value) -> str:
        return value if value else self.empty_value

    def format_item(self, item: StoredTimetableEntry) -> str:
        return "\n".join([
            f"🕙 {self._value(item.time)}",
            f"📖 {self._value(item.subject)}",
            f"🏷️ {self._value(item.lesson_type)}",
            f"👨‍🏫 {self._value(item.teacher_name)}",
            f"📚 {self._value(item.lesson_format)}",
            f"📌 {self._value(item.location)}",
            SEPARATOR,
        ])

    def format_day(self, items: Sequence[StoredTimetableEntry]) -> str:
        """
        Formatea los registros de un mismo dia, agrupados por grupo.

        Los registros deben venir ordenados por grupo y hora; el orden de
        aparicion de los grupos se respeta.
        """
        if not items:
            return NOT_FOUND_MESSAGE

        by_group: Dict[str, List[StoredTimetableEntry]] = {}
        for item in items:
            by_group.setdefault(item.group, []).append(item)

        blocks = [f"Расписание на {format_ru_date(items[0].date)}:"]
        for group, group_items in by_group.items():
            lines = [f"Группа: {group}"]
            lines.extend(self.format_item(item) for item in group_items)
            blocks.append("\n".join(lines))

        return "\n\n".join(blocks)
