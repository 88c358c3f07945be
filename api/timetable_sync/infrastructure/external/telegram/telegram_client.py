"""
Cliente para interactuar con la API de Telegram.
"""
from typing import Optional

import httpx
from loguru import logger


class TelegramClient:
    """
    Cliente simple de la Telegram Bot API (long polling + envío de mensajes).
    """

    def __init__(
        self,
        bot_token: str,
        *,
        base_url: str = "https://api.telegram.org",
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.bot_token = bot_token
        self.base_url = f"{base_url.rstrip('/')}/bot{self.bot_token}"
        self.timeout_s = timeout_s
        self._transport = transport

    def _client(self, timeout_s: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout_s, transport=self._transport)

    async def send_message(self, text: str, chat_id: int | str) -> bool:
        """
        Envía un mensaje de texto plano a un chat específico.

        Args:
            text: Contenido del mensaje.
            chat_id: ID del chat de destino.
        """
        if not self.bot_token or not chat_id:
            logger.warning("Telegram Bot Token o Chat ID no proporcionados. Saltando mensaje.")
            return False

        url = f"{self.base_url}/sendMessage"
        payload = {"chat_id": chat_id, "text": text}

        try:
            async with self._client(self.timeout_s) as client:
                response = await client.post(url, json=payload)
                response.raise_for_status()
                return True
        except httpx.HTTPError as e:
            logger.error(f"Error al enviar mensaje de Telegram: {e}")
            return False

    async def get_updates(self, offset: Optional[int] = None, poll_timeout_s: int = 0) -> list:
        """
        Obtiene los mensajes enviados al bot a partir de `offset`.

        Telegram descarta los updates con id menor al offset confirmado.
        """
        if not self.bot_token:
            return []

        url = f"{self.base_url}/getUpdates"
        params = {"timeout": poll_timeout_s}
        if offset is not None:
            params["offset"] = offset

        try:
            async with self._client(self.timeout_s + poll_timeout_s) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
                if data.get("ok"):
                    return data.get("result", [])
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error al obtener actualizaciones de Telegram: {e}")

        return []
