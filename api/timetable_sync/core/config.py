"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

La instancia `settings` se construye una sola vez al importar el modulo y es
inmutable. Los componentes del pipeline de sincronizacion no la leen
directamente: reciben un `GoogleSheetsSyncConfig` construido a partir de ella.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    Configuracion de desarrollo vs produccion:
    - ENVIRONMENT: 'development' o 'production'
    - DATABASE_URL: SQLite (aiosqlite) por defecto, PostgreSQL (asyncpg) en produccion
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Timetable Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Base de datos
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./timetable.db")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # Google Sheets (tabla publica, endpoint gviz)
    GOOGLE_SPREADSHEET_ID: str = Field(default="")
    GOOGLE_DEFAULT_SHEET: str = Field(default="Лист1")
    # Lista separada por comas; vacia = solo la hoja por defecto
    GOOGLE_SHEET_NAMES: str = Field(default="")
    GOOGLE_SHEETS_BASE_URL: str = Field(default="https://docs.google.com/spreadsheets/d")
    GOOGLE_REQUEST_TIMEOUT_S: float = Field(default=30.0)

    # Sincronizacion periodica
    SYNC_ENABLED: bool = Field(default=True)
    SYNC_CRON: str = Field(default="0 * * * *")
    # 1 = no se permiten corridas solapadas del job
    SYNC_MAX_OVERLAPPING_RUNS: int = Field(default=2)
    SYNC_ATOMIC_REPLACE: bool = Field(default=False)

    # Telegram
    TELEGRAM_BOT_TOKEN: str = Field(default="")
    TELEGRAM_POLL_INTERVAL_S: int = Field(default=5)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env
        frozen = True


def parse_sheet_names(raw: str, default_sheet: str) -> List[str]:
    """
    Parsea la lista de hojas a sincronizar.
    Acepta nombres separados por coma; si no hay ninguno, usa la hoja por defecto.
    """
    names = [name.strip() for name in raw.split(",") if name.strip()]
    if names:
        return names
    return [default_sheet] if default_sheet else []


@dataclass(frozen=True)
class GoogleSheetsSyncConfig:
    """
    Configuracion inmutable del pipeline Google Sheets -> base de datos.

    Se construye una vez y se pasa por referencia al cliente, al servicio de
    sincronizacion y al scheduler.
    """

    spreadsheet_id: str
    default_sheet: str
    sheet_names: tuple[str, ...]
    base_url: str = "https://docs.google.com/spreadsheets/d"
    request_timeout_s: float = 30.0
    sync_cron: str = "0 * * * *"
    max_overlapping_runs: int = 2
    atomic_replace: bool = False

    @classmethod
    def from_settings(cls, source: Settings) -> "GoogleSheetsSyncConfig":
        return cls(
            spreadsheet_id=source.GOOGLE_SPREADSHEET_ID,
            default_sheet=source.GOOGLE_DEFAULT_SHEET,
            sheet_names=tuple(
                parse_sheet_names(source.GOOGLE_SHEET_NAMES, source.GOOGLE_DEFAULT_SHEET)
            ),
            base_url=source.GOOGLE_SHEETS_BASE_URL,
            request_timeout_s=source.GOOGLE_REQUEST_TIMEOUT_S,
            sync_cron=source.SYNC_CRON,
            max_overlapping_runs=max(1, source.SYNC_MAX_OVERLAPPING_RUNS),
            atomic_replace=source.SYNC_ATOMIC_REPLACE,
        )


# Instancia global de configuracion
settings = Settings()
