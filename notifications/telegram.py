"""Telegram bot notifications sent to every configured admin chat."""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"
DOWNLOAD_BUTTON_TEXT = "📥 Download Backup"

# Timeout for bot API requests
NOTIFY_TIMEOUT = 30.0


class NotificationError(Exception):
    """Raised when a message could not be delivered to every chat."""


class TelegramNotifier:
    """Send status messages to a fixed list of Telegram chats.

    Each chat gets its own sendMessage call; all calls run concurrently and
    the notification only counts as delivered when every one succeeds.
    """

    def __init__(self, bot_token: str, chat_ids: List[str],
                 api_base: str = TELEGRAM_API_BASE,
                 timeout: float = NOTIFY_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.chat_ids = list(chat_ids)
        self.timeout = timeout
        self.transport = transport
        self._url = f"{api_base.rstrip('/')}/bot{bot_token}/sendMessage"

    @classmethod
    def from_config(cls, config, **kwargs) -> 'TelegramNotifier':
        return cls(config.bot_token.get_secret_value(), config.admin_chat_ids, **kwargs)

    def build_payload(self, chat_id: str, message: str,
                      link: Optional[str] = None) -> Dict[str, Any]:
        """Build the sendMessage body for one chat."""
        payload: Dict[str, Any] = {
            'chat_id': int(chat_id) if chat_id.lstrip('-').isdigit() else chat_id,
            'text': message,
            'parse_mode': 'HTML',
        }
        if link:
            payload['reply_markup'] = {
                'inline_keyboard': [[
                    {'text': DOWNLOAD_BUTTON_TEXT, 'url': link}
                ]]
            }
        return payload

    async def _send_one(self, client: httpx.AsyncClient, chat_id: str,
                        message: str, link: Optional[str]) -> dict:
        response = await client.post(self._url, json=self.build_payload(chat_id, message, link))

        if not response.is_success:
            raise NotificationError(
                f"Telegram API error ({response.status_code}): {response.text}"
            )

        result = response.json()
        if not result.get('ok'):
            raise NotificationError(f"Telegram API returned error: {json.dumps(result)}")

        logger.debug(f"Message delivered to chat {chat_id}")
        return result

    async def notify_async(self, message: str, link: Optional[str] = None) -> List[dict]:
        """Deliver a message to every chat.

        Every send runs to completion; the first failure (in chat order) is
        raised afterwards.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            results = await asyncio.gather(*(
                self._send_one(client, chat_id, message, link)
                for chat_id in self.chat_ids
            ), return_exceptions=True)

        for result in results:
            if isinstance(result, Exception):
                raise result
        return results

    def notify(self, message: str, link: Optional[str] = None) -> List[dict]:
        """Synchronous wrapper around notify_async.

        Raises:
            NotificationError: If any chat did not accept the message.
                Chats that already received it are not rolled back.
        """
        try:
            results = asyncio.run(self.notify_async(message, link))
        except Exception as e:
            logger.error(f"Failed to send Telegram message: {e}")
            raise NotificationError(f"Telegram notification failed: {e}") from e

        logger.info("Telegram notifications sent successfully")
        return results
