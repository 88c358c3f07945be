"""
Utilidades de fechas para el horario.

Las fechas de la hoja llegan como texto "DD.MM.YY" (a veces sin ceros a la
izquierda). Se normalizan a medianoche UTC en formato ISO 8601; cualquier
valor que no se pueda interpretar se deja tal cual y lo descarta el filtro
previo a la insercion.
"""
from datetime import date, datetime, timezone
from typing import Optional

from loguru import logger


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def utc_today() -> datetime:
    """Medianoche UTC del dia actual."""
    now = utc_now()
    return datetime(now.year, now.month, now.day, tzinfo=timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    SQLite devuelve datetimes naive aunque la columna sea timezone=True.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_canonical_utc(day: date) -> str:
    """Serializa una fecha de calendario como medianoche UTC ISO 8601."""
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc).isoformat()


def parse_canonical_utc(value: Optional[str]) -> Optional[datetime]:
    """
    Interpreta un valor producido por `to_canonical_utc`.

    Retorna None si el texto no esta en la forma canonica exacta
    (por ejemplo, una fecha que no se pudo normalizar).
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        return None
    if to_canonical_utc(parsed.date()) != value:
        return None
    return parsed


def normalize_sheet_date(value: str) -> str:
    """
    Convierte "DD.MM.YY" en medianoche UTC canonica.

    Nunca lanza: ante cualquier problema devuelve el texto original.

    Ejemplos:
        "07.11.24"   -> "2024-11-07T00:00:00+00:00"
        "7.2.24"     -> "2024-02-07T00:00:00+00:00"
        "30.02.24"   -> "30.02.24" (fecha inexistente)
        "2024-11-07" -> "2024-11-07" (separador distinto)
    """
    if not value or not value.strip():
        return value

    parts = value.split(".")
    if len(parts) < 3:
        return value

    day_str, month_str, year_str = (p.strip() for p in parts[:3])
    if not (day_str.isdecimal() and month_str.isdecimal() and year_str.isdecimal()):
        return value

    day, month, year = int(day_str), int(month_str), int(year_str)
    if not 0 <= year <= 99:
        return value
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return value

    try:
        parsed = date(2000 + year, month, day)
    except ValueError:
        logger.warning(f"Fecha inexistente en la hoja, se conserva el texto original: '{value}'")
        return value

    return to_canonical_utc(parsed)


def format_ru_date(dt: datetime) -> str:
    """Formatea una fecha como DD.MM.YYYY (UTC)."""
    dt = ensure_utc(dt)
    return f"{dt.day:02d}.{dt.month:02d}.{dt.year}"
