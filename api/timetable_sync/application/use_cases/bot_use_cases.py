"""
Casos de uso del bot de Telegram: comandos /start, /help y /next.
"""
from typing import Callable, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from timetable_sync.application.services.schedule_formatter import NOT_FOUND_MESSAGE
from timetable_sync.application.use_cases.timetable_use_cases import TimetableUseCases
from timetable_sync.infrastructure.external.telegram.telegram_client import TelegramClient
from timetable_sync.shared.exceptions.domain import ScheduleNotFoundException

START_MESSAGE = "Добро пожаловать!"
HELP_MESSAGE = "Это команда /help. Здесь будет описание команд."
NEXT_ERROR_MESSAGE = "Произошла ошибка при получении расписания. Попробуйте позже."


def parse_command(text: Optional[str]) -> Optional[str]:
    """
    Extrae el comando de un mensaje ("/next@mi_bot arg" -> "/next").
    None si el mensaje no es un comando.
    """
    if not text or not text.startswith("/"):
        return None
    command = text.split()[0]
    return command.split("@", 1)[0].lower()


class BotUseCases:
    """
    Responde los comandos recibidos por long polling.

    Guarda el offset del ultimo update procesado para no responder dos veces.
    """

    def __init__(
        self,
        telegram: TelegramClient,
        session_factory: Callable[[], AsyncSession],
    ):
        self.telegram = telegram
        self.session_factory = session_factory
        self.offset: Optional[int] = None

    async def next_schedule_text(self) -> str:
        """Texto del horario mas proximo, o el mensaje de 'no encontrado'."""
        try:
            async with self.session_factory() as db:
                return await TimetableUseCases(db).get_next_day_schedule_formatted()
        except ScheduleNotFoundException:
            return NOT_FOUND_MESSAGE
        except Exception as e:
            logger.opt(exception=e).error(f"Error al obtener el horario para el bot: {e}")
            return NEXT_ERROR_MESSAGE

    async def handle_command(self, command: str) -> Optional[str]:
        if command == "/start":
            return START_MESSAGE
        if command == "/help":
            return HELP_MESSAGE
        if command == "/next":
            return await self.next_schedule_text()
        return None

    async def process_updates(self) -> dict:
        """
        Consulta los updates pendientes y responde los comandos conocidos.

        Returns:
            dict: {"processed": updates leidos, "replied": respuestas enviadas}
        """
        updates = await self.telegram.get_updates(offset=self.offset)
        replied = 0

        for update in updates:
            update_id = update.get("update_id")
            if isinstance(update_id, int):
                self.offset = max(self.offset or 0, update_id + 1)

            message = update.get("message") or {}
            chat_id = (message.get("chat") or {}).get("id")
            command = parse_command(message.get("text"))
            if not chat_id or not command:
                continue

            answer = await self.handle_command(command)
            if answer is None:
                continue

            logger.info(f"Comando {command} de chat {chat_id}")
            if await self.telegram.send_message(answer, chat_id):
                replied += 1

        return {"processed": len(updates), "replied": replied}
