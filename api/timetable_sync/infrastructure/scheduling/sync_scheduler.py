"""
Scheduler de jobs periodicos (APScheduler).

- timetable_sync: corre el pipeline Google Sheets -> base de datos segun SYNC_CRON
  para cada hoja de GOOGLE_SHEET_NAMES, una por una.
  Cualquier error queda en el log; la siguiente ejecucion programada es el
  unico reintento.
- telegram_polling: consulta los updates del bot cada TELEGRAM_POLL_INTERVAL_S
  (solo si hay token configurado).
"""
from datetime import timezone
from typing import List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from timetable_sync.application.use_cases.bot_use_cases import BotUseCases
from timetable_sync.infrastructure.external.google_sheets.sync_service import (
    SheetSyncReport,
    SheetToTimetableSync,
)
from timetable_sync.shared.exceptions.base import AppException

SYNC_JOB_ID = "timetable_sync"
TELEGRAM_JOB_ID = "telegram_polling"


class TimetableSyncScheduler:
    """
    Envuelve un AsyncIOScheduler con los jobs de la aplicacion.

    Por defecto se permiten hasta `max_overlapping_runs` ejecuciones
    simultaneas del sync (max_instances de APScheduler); con 1 una corrida
    lenta hace que se salte el disparo siguiente.
    """

    def __init__(
        self,
        sync_service: SheetToTimetableSync,
        *,
        bot: Optional[BotUseCases] = None,
        telegram_poll_interval_s: int = 5,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.sync_service = sync_service
        self.bot = bot
        self.telegram_poll_interval_s = telegram_poll_interval_s
        self.scheduler = scheduler or AsyncIOScheduler(timezone=timezone.utc)

    async def run_scheduled_sync(self) -> Optional[List[SheetSyncReport]]:
        """
        Una corrida programada sobre todas las hojas configuradas (o la hoja
        por defecto si la lista esta vacia). Nunca propaga excepciones al
        scheduler.
        """
        try:
            reports = await self.sync_service.run_many()
        except AppException as e:
            logger.opt(exception=e).error(
                f"Sync programado fallido [{e.error_code}]: {e.message} | details={e.details}"
            )
            return None
        except Exception as e:
            logger.opt(exception=e).error(f"Error inesperado en el sync programado: {e}")
            return None

        for report in reports:
            if not report.success:
                logger.error(
                    f"Sync programado fallido para la hoja '{report.sheet}': "
                    f"{report.error} | details={report.error_details}"
                )
        failed = sum(1 for report in reports if not report.success)
        logger.info(f"Sync programado terminado: {len(reports) - failed}/{len(reports)} hojas sincronizadas")
        return reports

    async def run_telegram_polling(self) -> None:
        if self.bot is None:
            return
        try:
            await self.bot.process_updates()
        except Exception as e:
            logger.error(f"Error procesando updates de Telegram: {e}")

    def register_jobs(self) -> None:
        config = self.sync_service.config
        self.scheduler.add_job(
            self.run_scheduled_sync,
            trigger=CronTrigger.from_crontab(config.sync_cron, timezone=timezone.utc),
            id=SYNC_JOB_ID,
            name="Sync Google Sheets -> base de datos",
            max_instances=config.max_overlapping_runs,
            coalesce=False,
            replace_existing=True,
        )
        logger.info(
            f"Job '{SYNC_JOB_ID}' programado (cron='{config.sync_cron}', "
            f"max_instances={config.max_overlapping_runs})"
        )

        if self.bot is not None:
            self.scheduler.add_job(
                self.run_telegram_polling,
                trigger=IntervalTrigger(seconds=self.telegram_poll_interval_s),
                id=TELEGRAM_JOB_ID,
                name="Polling del bot de Telegram",
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
            logger.info(f"Job '{TELEGRAM_JOB_ID}' programado cada {self.telegram_poll_interval_s}s")

    def start(self) -> None:
        self.register_jobs()
        self.scheduler.start()
        logger.info("Scheduler iniciado")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler detenido")
