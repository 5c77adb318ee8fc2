"""
app/api/webhook.py

Purpose: Telegram webhook endpoint

- Receives Update objects pushed by Telegram
- Verifies the secret token header when one is configured
- Normalizes private-chat messages and passes them to the dialogue router
- Always acknowledges with {"ok": true} so Telegram does not redeliver
"""

import hmac
from typing import Optional

from fastapi import APIRouter, Header, Request

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.logging import LogContext, get_logger
from app.flow.router import DialogueRouter
from app.schemas.response import WebhookAck
from app.schemas.telegram import TelegramUpdate, parse_telegram_update

logger = get_logger(__name__)
router = APIRouter()


def verify_secret_token(token: Optional[str]) -> None:
    """
    Checks the X-Telegram-Bot-Api-Secret-Token header.

    Raises:
        AuthenticationError: A secret is configured and the header does not match
    """
    expected = settings.TELEGRAM_WEBHOOK_SECRET
    if not expected:
        return

    if token is None or not hmac.compare_digest(token, expected):
        logger.warning("🚫 Webhook call with invalid secret token")
        raise AuthenticationError("Invalid webhook secret token")


def get_dialogue_router(request: Request) -> DialogueRouter:
    return request.app.state.dialogue_router


@router.post("/telegram/webhook", response_model=WebhookAck)
async def telegram_webhook(
    update: TelegramUpdate,
    request: Request,
    x_telegram_bot_api_secret_token: Optional[str] = Header(None),
):
    """
    Telegram webhook.

    Non-message updates and messages outside private chats are acknowledged
    and ignored.
    """
    verify_secret_token(x_telegram_bot_api_secret_token)

    message = parse_telegram_update(update)
    if message is None:
        logger.debug(f"Ignoring update {update.update_id}")
        return WebhookAck()

    dialogue_router = get_dialogue_router(request)

    with LogContext(update_id=update.update_id):
        logger.info(f"📱 Telegram update from {message.user_id}")
        consumed = await dialogue_router.handle(message)

        if not consumed and message.is_restart_command:
            await dialogue_router.welcome_back(message)

    return WebhookAck()
