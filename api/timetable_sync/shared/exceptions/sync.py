"""
Excepciones del pipeline Google Sheets -> base de datos.

Todas heredan de SheetsSyncException para que el scheduler pueda
capturarlas en un unico punto sin perder el detalle estructurado.
"""
from typing import Any, Dict, Optional

from timetable_sync.shared.exceptions.base import AppException

# Longitud maxima del fragmento de payload que se incluye en los errores
PAYLOAD_SNIPPET_LENGTH = 200


class SheetsSyncException(AppException):
    """Excepción base para errores de sincronización."""

    def __init__(
        self,
        message: str,
        status_code: int = 502,
        error_code: str = "SHEETS_SYNC_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details,
        )


class SyncConfigError(SheetsSyncException):
    """Error de configuración del pipeline (spreadsheet id / hoja ausentes)."""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=500, error_code="SYNC_CONFIG_ERROR")


class SheetsTransportError(SheetsSyncException):
    """Fallo de red o respuesta HTTP no exitosa al descargar la hoja."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        http_status: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code="SHEETS_TRANSPORT_ERROR",
            details={"url": url, "status_code": http_status, "reason": reason},
        )
        self.url = url
        self.http_status = http_status
        self.reason = reason


class SheetsParseError(SheetsSyncException):
    """El payload no se pudo interpretar. Solo guarda un prefijo acotado."""

    def __init__(self, message: str, payload: str = ""):
        snippet = (payload or "")[:PAYLOAD_SNIPPET_LENGTH]
        super().__init__(
            message=message,
            error_code="SHEETS_PARSE_ERROR",
            details={"snippet": snippet},
        )
        self.snippet = snippet


class SheetsApiError(SheetsSyncException):
    """Google Sheets respondio con status 'error'."""

    def __init__(self, joined_messages: str, messages: Optional[list[str]] = None):
        super().__init__(
            message=f"Google Sheets API вернуло ошибку: {joined_messages}",
            error_code="SHEETS_API_ERROR",
            details={"messages": messages or []},
        )
        self.joined_messages = joined_messages


class TimetableStoreError(SheetsSyncException):
    """Fallo en el borrado o la insercion de registros del horario."""

    def __init__(self, message: str, *, stage: str, groups: Optional[list[str]] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="TIMETABLE_STORE_ERROR",
            details={"stage": stage, "groups": groups or []},
        )
        self.stage = stage
