"""
Parser del formato gviz de Google Sheets.

El endpoint público `gviz/tq?tqx=out:json` no devuelve JSON puro sino algo
como:

    /*O_o*/
    google.visualization.Query.setResponse({"version":"0.6", ..., "table": {...}});

El formato no está documentado como estable, así que cada paso es defensivo:
- se aísla el objeto JSON (primer '{' .. último '}')
- status 'error' se convierte en SheetsApiError con todos los mensajes
- sin 'table' => hoja vacía (no es error)
- las celdas se indexan por el id de columna ("A", "B", ...), no por la
  posición entre las columnas con etiqueta
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

from loguru import logger

from timetable_sync.shared.exceptions.sync import SheetsApiError, SheetsParseError

from .types import ColumnDef, ParsedRow, SheetData

UNKNOWN_API_ERROR = "Неизвестная ошибка API Google"
NO_ERROR_DETAILS = "Нет деталей об ошибке"


def unwrap_response(text: str) -> str:
    """
    Extrae el objeto JSON del envoltorio gviz.

    Si el texto ya es JSON puro se devuelve sin cambios.
    """
    start = text.find("{") if text else -1
    if start == -1:
        raise SheetsParseError(
            "La respuesta de Google Sheets no contiene un objeto JSON", payload=text or ""
        )
    end = text.rfind("}")
    return text[start:end + 1]


def decode_column_id(column_id: Optional[str]) -> int:
    """
    Convierte el id de columna ("A", "Z", "AA", ...) en índice base 0.

    Numeración biyectiva en base 26: A=1 .. Z=26, AA=27; se resta 1.
    Retorna -1 si el id no es una secuencia de letras latinas.
    """
    if not column_id:
        return -1

    index = 0
    for char in column_id.strip().upper():
        if not "A" <= char <= "Z":
            return -1
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def select_cell_value(cell: Any) -> str:
    """
    Elige el texto de una celda: formateado ('f'), luego crudo ('v'), luego "".
    """
    if not isinstance(cell, dict):
        return ""
    formatted = cell.get("f")
    if formatted is not None and formatted != "":
        return _stringify(formatted)
    raw = cell.get("v")
    if raw is not None and raw != "":
        return _stringify(raw)
    return ""


def _collect_api_errors(payload: dict) -> List[str]:
    messages = []
    for err in payload.get("errors") or []:
        if not isinstance(err, dict):
            messages.append(UNKNOWN_API_ERROR)
            continue
        messages.append(err.get("detailed_message") or err.get("message") or UNKNOWN_API_ERROR)
    return messages


def _retained_columns(raw_cols: Any) -> List[ColumnDef]:
    columns = []
    for col in raw_cols or []:
        if not isinstance(col, dict):
            continue
        label = col.get("label")
        if not isinstance(label, str) or not label.strip():
            continue
        columns.append(ColumnDef(label=label.strip(), column_id=str(col.get("id") or "")))
    return columns


def _map_row(raw_row: Any, columns: List[ColumnDef]) -> ParsedRow:
    cells = raw_row.get("c") if isinstance(raw_row, dict) else None
    if not isinstance(cells, list):
        cells = []

    row: ParsedRow = {}
    for column in columns:
        index = decode_column_id(column.column_id)
        if 0 <= index < len(cells):
            row[column.label] = select_cell_value(cells[index])
        else:
            row[column.label] = ""
    return row


def parse_table(unwrapped: str, *, title: str = "") -> SheetData:
    """
    Convierte el JSON ya desenvuelto en encabezados y filas.

    Raises:
        SheetsParseError: el texto no es JSON válido (solo se guarda un prefijo)
        SheetsApiError: Google reporta status 'error'
    """
    try:
        payload = json.loads(unwrapped)
    except ValueError as e:
        raise SheetsParseError(
            f"Ошибка разбора JSON от Google Sheets: {e}", payload=unwrapped
        ) from e

    if not isinstance(payload, dict):
        raise SheetsParseError(
            "La respuesta de Google Sheets no es un objeto JSON", payload=unwrapped
        )

    if payload.get("status") == "error":
        messages = _collect_api_errors(payload)
        raise SheetsApiError(", ".join(messages) or NO_ERROR_DETAILS, messages=messages)

    table = payload.get("table")
    if not table:
        logger.info(f"La hoja '{title}' no tiene tabla (sin datos)")
        return SheetData(title=title)
    if not isinstance(table, dict):
        raise SheetsParseError("El campo 'table' no es un objeto", payload=unwrapped)

    columns = _retained_columns(table.get("cols"))
    rows = [_map_row(raw_row, columns) for raw_row in table.get("rows") or []]

    # Etiquetas duplicadas: la última columna gana en cada fila
    return SheetData(
        title=title,
        headers=[column.label for column in columns],
        rows=rows,
    )


def parse_response(text: str, *, title: str = "") -> SheetData:
    """Desenvuelve y parsea una respuesta gviz completa."""
    return parse_table(unwrap_response(text), title=title)
