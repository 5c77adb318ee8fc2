"""
app/flow/router.py

Purpose: Entry point from the webhook into the dialogue

- Runs the transition engine on a normalized message
- Sends the resulting prompts through the transport
- Store failures and unexpected errors get one generic localized message
"""

from app.core.exceptions import StoreError
from app.core.logging import get_logger
from app.flow.engine import TransitionEngine
from app.flow.prompts import notice
from app.schemas.telegram import IncomingMessage
from app.services.telegram_service import Transport
from utils.i18n import detect_locale

logger = get_logger(__name__)


class DialogueRouter:
    """Routes inbound messages to the registration dialogue."""

    def __init__(self, engine: TransitionEngine, transport: Transport):
        self.engine = engine
        self.transport = transport

    async def handle(self, message: IncomingMessage) -> bool:
        """
        Handles one message.

        Args:
            message: Normalized inbound message

        Returns:
            True if the dialogue consumed the message, False if the user is
            registered and the message belongs to another feature
        """
        logger.info(f"📨 Message from {message.user_id}")

        try:
            outcome = await self.engine.process(message)

        except StoreError as e:
            logger.error(f"❌ Store failure, transition aborted: {e.message}", exc_info=True)
            await self._send_error(message)
            return True

        except Exception as e:
            logger.error(f"❌ Dialogue error: {e}", exc_info=True)
            await self._send_error(message)
            return True

        if not outcome.consumed:
            logger.debug(f"User {message.user_id} is registered, passing through")
            return False

        for prompt in outcome.prompts:
            await self.transport.send_prompt(message.chat_id, prompt)

        return True

    async def welcome_back(self, message: IncomingMessage) -> None:
        """Greets a registered user who sent /start."""
        try:
            record = await self.engine.records.get(message.user_id)
        except StoreError as e:
            logger.error(f"❌ Could not load user for greeting: {e.message}", exc_info=True)
            await self._send_error(message)
            return

        if record is None:
            return

        name = record.profile.first_name or record.full_name
        await self.transport.send_prompt(
            message.chat_id,
            notice(record.language, "start.welcome_back", name=name)
        )

    async def _send_error(self, message: IncomingMessage) -> None:
        locale = detect_locale(message.language_code)
        await self.transport.send_prompt(message.chat_id, notice(locale, "errors.general"))
