"""
Cliente mínimo del endpoint público gviz de Google Sheets (sin SDKs externos).

- requests con timeout acotado
- sin reintentos: la siguiente corrida programada es el único reintento
- solo hojas públicas (sin autenticación)
"""

from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import quote

import requests
from loguru import logger

from timetable_sync.shared.exceptions.sync import SheetsSyncException, SheetsTransportError

from .response_parser import parse_response
from .types import SheetData


def build_gviz_url(base_url: str, spreadsheet_id: str, sheet_name: str) -> str:
    """URL de la consulta gviz que devuelve la hoja como JSON envuelto."""
    return (
        f"{base_url.rstrip('/')}/{spreadsheet_id}/gviz/tq"
        f"?tqx=out:json&sheet={quote(sheet_name, safe='')}"
    )


class GoogleSheetsClient:
    """
    Cliente HTTP de Google Sheets.

    `fetch_sheet` devuelve el texto crudo; `get_sheet_data` lo parsea.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = "https://docs.google.com/spreadsheets/d",
        timeout_s: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._session = session or requests.Session()

    def fetch_sheet(self, spreadsheet_id: str, sheet_name: str) -> str:
        """
        Descarga la hoja en formato gviz.

        Raises:
            SheetsTransportError: error de red o status HTTP no 2xx
        """
        url = build_gviz_url(self._base_url, spreadsheet_id, sheet_name)
        try:
            resp = self._session.get(url, timeout=self._timeout_s)
        except requests.RequestException as e:
            raise SheetsTransportError(
                f"Ошибка при загрузке данных: {e}",
                url=url,
                reason=type(e).__name__,
            ) from e

        if not 200 <= resp.status_code < 300:
            raise SheetsTransportError(
                f"Ошибка при загрузке данных: {resp.status_code} {resp.reason or ''}".strip(),
                url=url,
                http_status=resp.status_code,
                reason=resp.reason,
            )

        return resp.text

    def get_sheet_data(self, spreadsheet_id: str, sheet_name: str) -> SheetData:
        """Descarga y parsea una hoja. El título es el nombre pedido."""
        text = self.fetch_sheet(spreadsheet_id, sheet_name)
        data = parse_response(text, title=sheet_name)
        logger.debug(f"Hoja '{sheet_name}': {len(data.headers)} columnas, {len(data.rows)} filas")
        return data

    def get_all_sheets_data(
        self, spreadsheet_id: str, sheet_names: Iterable[str]
    ) -> List[SheetData]:
        """
        Descarga varias hojas de forma secuencial.

        Una hoja que falla se registra en el log y se omite; el resto se devuelve.
        """
        results: List[SheetData] = []
        for sheet_name in sheet_names:
            try:
                results.append(self.get_sheet_data(spreadsheet_id, sheet_name))
            except SheetsSyncException as e:
                logger.error(f"Error al cargar la hoja '{sheet_name}': {e.message}")
        return results
