"""
Servicio de sincronización Google Sheets -> base de datos.

Diseño (resumen):
- Descarga la hoja (requests, en un thread para no bloquear el event loop)
- Desenvuelve y parsea la respuesta gviz
- Mapea filas a TimetableItem y aplica el filtro de admisión
- Reemplaza el horario de los grupos presentes (TimetableUseCases)

Varias hojas se procesan de a una, en orden; el error de una hoja no
interrumpe las siguientes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from timetable_sync.application.use_cases.timetable_use_cases import TimetableUseCases
from timetable_sync.core.config import GoogleSheetsSyncConfig, settings
from timetable_sync.domain.entities.timetable import SyncResult
from timetable_sync.shared.exceptions.sync import SheetsSyncException, SyncConfigError

from .sheets_client import GoogleSheetsClient
from .table_mappings import map_rows


@dataclass(frozen=True)
class SheetSyncReport:
    """Resultado de una corrida para una hoja."""

    sheet: str
    source_rows_fetched: int
    message: str
    result: SyncResult = field(default_factory=SyncResult)
    error: Optional[str] = None
    error_details: Optional[dict[str, Any]] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheet": self.sheet,
            "source_rows_fetched": self.source_rows_fetched,
            "message": self.message,
            "success": self.success,
            "error": self.error,
            "db_operations": {
                "new_count": self.result.new_count,
                "deleted_count": self.result.deleted_count,
                "groups_affected": list(self.result.groups_affected),
            },
        }


class SheetToTimetableSync:
    """
    Orquestador del pipeline fetch -> parse -> map -> overwrite.
    """

    def __init__(
        self,
        *,
        config: GoogleSheetsSyncConfig,
        client: GoogleSheetsClient,
        session_factory: Callable[[], AsyncSession],
    ) -> None:
        self._config = config
        self._client = client
        self._session_factory = session_factory

    @property
    def config(self) -> GoogleSheetsSyncConfig:
        return self._config

    def _resolve_sheet(self, sheet_name: Optional[str]) -> str:
        if not self._config.spreadsheet_id:
            raise SyncConfigError("GOOGLE_SPREADSHEET_ID no esta configurado. No se puede sincronizar.")
        sheet = (sheet_name or "").strip() or self._config.default_sheet
        if not sheet:
            raise SyncConfigError("No se indico hoja y no hay GOOGLE_DEFAULT_SHEET configurada.")
        return sheet

    async def run_once(self, sheet_name: Optional[str] = None) -> SheetSyncReport:
        """
        Ejecuta una corrida completa para una hoja (por defecto la configurada).

        Raises:
            SyncConfigError: falta el spreadsheet id o la hoja
            SheetsSyncException: error de transporte, parseo, API o almacenamiento
        """
        sheet = self._resolve_sheet(sheet_name)
        logger.info(f"Iniciando sync de la hoja '{sheet}' (spreadsheet {self._config.spreadsheet_id})")

        data = await asyncio.to_thread(
            self._client.get_sheet_data, self._config.spreadsheet_id, sheet
        )

        if data.is_empty:
            logger.warning(f"La hoja '{sheet}' esta vacia. Nada que sincronizar.")
            return SheetSyncReport(
                sheet=sheet,
                source_rows_fetched=0,
                message=f"No se encontraron datos en la hoja '{sheet}'. Nada que sincronizar.",
            )

        logger.info(f"Leidas {len(data.rows)} filas de la hoja '{sheet}'")
        items = map_rows(data.rows)

        async with self._session_factory() as db:
            use_cases = TimetableUseCases(db, atomic_replace=self._config.atomic_replace)
            result = await use_cases.overwrite_schedules(items)

        logger.info(
            f"Sync completado para '{sheet}'. nuevos={result.new_count}, "
            f"borrados={result.deleted_count}, grupos={', '.join(result.groups_affected)}"
        )
        return SheetSyncReport(
            sheet=sheet,
            source_rows_fetched=len(data.rows),
            message=f"Hoja '{sheet}' sincronizada con la base de datos.",
            result=result,
        )

    async def run_many(self, sheet_names: Optional[Iterable[str]] = None) -> List[SheetSyncReport]:
        """
        Sincroniza varias hojas de forma secuencial.

        El error de una hoja queda en su reporte (error y error_details) y no
        corta las demás; quien llama decide cómo registrarlo.
        """
        names = list(sheet_names) if sheet_names is not None else list(self._config.sheet_names)
        if not names:
            names = [self._config.default_sheet]

        reports: List[SheetSyncReport] = []
        for name in names:
            try:
                reports.append(await self.run_once(name))
            except SheetsSyncException as e:
                reports.append(
                    SheetSyncReport(
                        sheet=name,
                        source_rows_fetched=0,
                        message=f"Error al sincronizar la hoja '{name}'",
                        error=e.message,
                        error_details=e.details,
                    )
                )
        return reports


def build_from_settings(
    *,
    config: Optional[GoogleSheetsSyncConfig] = None,
    session_factory: Optional[Callable[[], AsyncSession]] = None,
) -> SheetToTimetableSync:
    """
    Constructor "oficial" del pipeline a partir de la configuracion global.
    """
    config = config or GoogleSheetsSyncConfig.from_settings(settings)
    if session_factory is None:
        from timetable_sync.infrastructure.database.session import AsyncSessionLocal

        session_factory = AsyncSessionLocal

    client = GoogleSheetsClient(base_url=config.base_url, timeout_s=config.request_timeout_s)
    return SheetToTimetableSync(config=config, client=client, session_factory=session_factory)
