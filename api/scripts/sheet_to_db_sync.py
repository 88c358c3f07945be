"""
CLI: Google Sheets -> base de datos (one-way sync).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer) cuando el API no corre el scheduler
    (SYNC_ENABLED=false), o para forzar una corrida manual.

Variables de entorno requeridas:
  - GOOGLE_SPREADSHEET_ID
  - DATABASE_URL (por defecto SQLite local)

Ejecución:
  python scripts/sheet_to_db_sync.py
  python scripts/sheet_to_db_sync.py --sheet "Лист2"
  python scripts/sheet_to_db_sync.py --all
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
# La carpeta "api" contiene el paquete raíz `timetable_sync/`.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env antes de construir settings.
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_API_ROOT.parent / ".env", override=False)

from timetable_sync.infrastructure.database.session import close_db, init_db
from timetable_sync.infrastructure.external.google_sheets.sync_service import build_from_settings
from timetable_sync.shared.exceptions.base import AppException


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sincroniza el horario desde Google Sheets.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--sheet", help="Hoja a sincronizar (por defecto GOOGLE_DEFAULT_SHEET).")
    group.add_argument(
        "--all",
        action="store_true",
        help="Sincroniza todas las hojas de GOOGLE_SHEET_NAMES, una por una.",
    )
    return parser


async def run(args: argparse.Namespace) -> int:
    await init_db()
    service = build_from_settings()
    try:
        if args.all:
            reports = await service.run_many()
        else:
            reports = [await service.run_once(args.sheet)]
    except AppException as e:
        logger.error(f"Sync fallido [{e.error_code}]: {e.message} | details={e.details}")
        return 1
    finally:
        await close_db()

    for report in reports:
        if not report.success:
            logger.error(f"[{report.sheet}] {report.error} | details={report.error_details}")
            continue
        r = report.result
        logger.info(
            f"[{report.sheet}] {report.message} filas={report.source_rows_fetched} "
            f"nuevos={r.new_count} borrados={r.deleted_count}"
        )
    return 0 if all(report.success for report in reports) else 1


def main() -> int:
    args = build_parser().parse_args()
    logger.info("Iniciando Google Sheets -> base de datos sync...")
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
