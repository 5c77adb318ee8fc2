"""
app/services/telegram_service.py

Purpose: Telegram message sending

- Sends prompts via the Bot API sendMessage method
- Attaches reply markup built from the prompt's input affordance
- Failures are logged and reported in the result, never raised
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.logging import get_logger
from app.flow.prompts import Prompt
from utils.telegram_utils import build_reply_markup, create_send_message_payload

logger = get_logger(__name__)


class Transport(ABC):
    """Outbound channel for dialogue prompts."""

    @abstractmethod
    async def send_prompt(self, user_id: int, prompt: Prompt) -> Dict[str, Any]:
        """Send a prompt with its input affordance."""

    def is_configured(self) -> bool:
        return True


class TelegramService(Transport):
    """Service for sending messages via the Telegram Bot API"""

    def __init__(
        self,
        bot_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.bot_token = bot_token if bot_token is not None else settings.TELEGRAM_BOT_TOKEN
        self.base_url = (base_url or settings.TELEGRAM_API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.TELEGRAM_REQUEST_TIMEOUT
        self._client = client

    def _method_url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.bot_token}/{method}"

    async def send_prompt(self, user_id: int, prompt: Prompt) -> Dict[str, Any]:
        return await self.send_message(
            chat_id=user_id,
            text=prompt.text,
            reply_markup=build_reply_markup(prompt.affordance)
        )

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Sends a text message via sendMessage

        Args:
            chat_id: Recipient chat (the user's id in private chats)
            text: Message text
            reply_markup: Optional keyboard markup

        Returns:
            {
                "success": True/False,
                "message_id": 123,
                "error": "Optional error message"
            }
        """
        payload = create_send_message_payload(chat_id, text, reply_markup)

        try:
            logger.info(f"📤 Sending Telegram message to {chat_id}")
            response = await self._post("sendMessage", payload)

            body = response.json() if response.content else {}
            if response.status_code == 200 and body.get("ok"):
                message_id = body.get("result", {}).get("message_id")
                logger.info(f"✅ Message sent: id={message_id}")
                return {
                    "success": True,
                    "message_id": message_id
                }

            description = body.get("description") or response.text
            logger.error(f"❌ Telegram API error: {response.status_code} - {description}")
            return {
                "success": False,
                "error": f"Telegram API error: {response.status_code}"
            }

        except httpx.TimeoutException:
            logger.error("Telegram API timeout")
            return {
                "success": False,
                "error": "Telegram API timeout"
            }
        except Exception as e:
            logger.error(f"Error sending Telegram message: {e}", exc_info=True)
            return {
                "success": False,
                "error": str(e)
            }

    async def set_webhook(self, url: str, secret_token: Optional[str] = None) -> Dict[str, Any]:
        """
        Registers the webhook URL with Telegram.

        Only message updates are requested; the bot ignores everything else.
        """
        payload: Dict[str, Any] = {
            "url": url,
            "allowed_updates": ["message"],
            "drop_pending_updates": False
        }
        if secret_token:
            payload["secret_token"] = secret_token

        try:
            response = await self._post("setWebhook", payload)
            body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Error registering webhook: {e}")
            return {"success": False, "error": str(e)}

        if not body.get("ok"):
            logger.error(f"❌ setWebhook failed: {body.get('description')}")
            return {"success": False, "error": body.get("description")}

        logger.info(f"✅ Webhook registered: {url}")
        return {"success": True}

    async def _post(self, method: str, payload: Dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(self._method_url(method), json=payload, timeout=self.timeout)

        async with httpx.AsyncClient() as client:
            return await client.post(self._method_url(method), json=payload, timeout=self.timeout)

    def is_configured(self) -> bool:
        """Check if the bot token is set"""
        return bool(self.bot_token and self.bot_token != "your_bot_token")
