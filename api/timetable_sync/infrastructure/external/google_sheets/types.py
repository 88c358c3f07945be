"""
Tipos y utilidades puras para el pipeline Google Sheets -> base de datos.

Se mantienen libres de I/O para poder testearlos fácilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

# Fila parseada: etiqueta de columna -> texto de la celda
ParsedRow = Dict[str, str]


@dataclass(frozen=True)
class ColumnDef:
    """
    Columna tal como la reporta gviz.

    - label: encabezado visible (ya sin espacios a los lados)
    - column_id: identificador de la hoja ("A", "B", ..., "AA")
    """

    label: str
    column_id: str


@dataclass(frozen=True)
class SheetData:
    """Resultado del parseo de una hoja."""

    title: str
    headers: List[str] = field(default_factory=list)
    rows: List[ParsedRow] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows


Transform = Callable[[str], Any]


@dataclass(frozen=True)
class FieldMapping:
    """
    Define el mapeo de un encabezado de la hoja a un campo del horario.

    - sheet_header: encabezado exacto en la hoja (etiquetas en cirílico)
    - item_field: nombre del atributo en TimetableItem
    - transform: función opcional para transformar el valor antes de mapear
    """

    sheet_header: str
    item_field: str
    transform: Optional[Transform] = None
