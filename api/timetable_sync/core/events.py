"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from typing import Callable

from fastapi import FastAPI
from loguru import logger

from timetable_sync.application.use_cases.bot_use_cases import BotUseCases
from timetable_sync.core.config import GoogleSheetsSyncConfig, settings
from timetable_sync.infrastructure.database.session import AsyncSessionLocal, close_db, init_db
from timetable_sync.infrastructure.external.google_sheets.sync_service import build_from_settings
from timetable_sync.infrastructure.external.telegram.telegram_client import TelegramClient
from timetable_sync.infrastructure.scheduling.sync_scheduler import TimetableSyncScheduler


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            config = GoogleSheetsSyncConfig.from_settings(settings)
            _validate_config(config)

            # Inicializar base de datos (crea tablas si no existen)
            await init_db()
            logger.info("Base de datos inicializada")

            # Configurar logging adicional
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

            sync_service = build_from_settings(config=config, session_factory=AsyncSessionLocal)
            app.state.sync_service = sync_service

            bot = None
            if settings.TELEGRAM_BOT_TOKEN:
                bot = BotUseCases(TelegramClient(settings.TELEGRAM_BOT_TOKEN), AsyncSessionLocal)

            app.state.scheduler = None
            if settings.SYNC_ENABLED:
                scheduler = TimetableSyncScheduler(
                    sync_service,
                    bot=bot,
                    telegram_poll_interval_s=settings.TELEGRAM_POLL_INTERVAL_S,
                )
                scheduler.start()
                app.state.scheduler = scheduler
            else:
                logger.info("SYNC_ENABLED=false: el sync programado esta desactivado")

            logger.success("Aplicacion iniciada correctamente")

            _print_available_urls()

        except Exception as e:
            logger.opt(exception=e).error(f"Error durante startup: {e}")
            raise

    return startup


def _validate_config(config: GoogleSheetsSyncConfig) -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []

    if not config.spreadsheet_id:
        logger.error("CONFIG: GOOGLE_SPREADSHEET_ID no configurado - el sync no funcionara")

    if not settings.TELEGRAM_BOT_TOKEN:
        warnings.append("TELEGRAM_BOT_TOKEN no configurado - el bot no respondera comandos")

    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def _print_available_urls() -> None:
    """Imprime las URLs disponibles de la aplicacion."""
    access_host = "localhost" if settings.HOST == "0.0.0.0" else settings.HOST
    base_url = f"http://{access_host}:{settings.PORT}"

    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")
    logger.opt(colors=True).info("<bold><green>URLS DISPONIBLES:</green></bold>")
    logger.opt(colors=True).info(f"<cyan>  Swagger UI:  {base_url}/docs</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Health:      {base_url}/health</cyan>")
    logger.opt(colors=True).info(f"<cyan>  Sync:        POST {base_url}/api/v1/sync/sheet-to-db</cyan>")
    logger.opt(colors=True).info("<bold><green>" + "=" * 80 + "</green></bold>")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        scheduler = getattr(app.state, "scheduler", None)
        if scheduler is not None:
            scheduler.shutdown()

        # Cerrar conexiones de base de datos
        await close_db()
        logger.info("Conexiones de base de datos cerradas")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown
