"""
app/schemas/telegram.py

Purpose: Telegram webhook payload schemas and parsers

- Validates the subset of the Telegram Update object the bot uses
- Normalizes private-chat messages into IncomingMessage
- Ignores everything else (group chats, callback queries, edits)
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from utils.constants import RESTART_COMMANDS


class TelegramUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None


class TelegramChat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    type: str


class TelegramContact(BaseModel):
    model_config = ConfigDict(extra="ignore")

    phone_number: str
    first_name: str = ""
    last_name: Optional[str] = None
    user_id: Optional[int] = None


class TelegramMessage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_id: int
    from_user: Optional[TelegramUser] = Field(default=None, alias="from")
    chat: TelegramChat
    date: int = 0
    text: Optional[str] = None
    contact: Optional[TelegramContact] = None


class TelegramUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    update_id: int
    message: Optional[TelegramMessage] = None


class ContactPayload(BaseModel):
    """
    Structured contact shared by the user.
    `user_id` is the Telegram id of the contact's owner, absent for address-book entries.
    """
    phone_number: str
    user_id: Optional[int] = None
    first_name: str = ""
    last_name: Optional[str] = None


class IncomingMessage(BaseModel):
    """
    Normalized inbound message for the dialogue router.
    """
    user_id: int = Field(..., description="Sender's Telegram user id")
    chat_id: int = Field(..., description="Private chat id")
    text: Optional[str] = None
    contact: Optional[ContactPayload] = None
    is_restart_command: bool = False
    language_code: Optional[str] = None
    message_id: Optional[int] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": 123456789,
                "chat_id": 123456789,
                "text": "Client",
                "language_code": "en",
                "message_id": 42
            }
        }
    )


def is_restart_command(text: Optional[str]) -> bool:
    """
    Checks for /start, also in its "/start@BotName" and "/start payload" forms.
    """
    if not text or not text.strip():
        return False
    command = text.split()[0].split("@")[0].lower()
    return command in RESTART_COMMANDS


def parse_telegram_update(update: TelegramUpdate) -> Optional[IncomingMessage]:
    """
    Converts a Telegram update into an IncomingMessage.

    Returns:
        IncomingMessage for private-chat messages from a user, otherwise None
    """
    message = update.message
    if message is None or message.from_user is None:
        return None

    if message.chat.type != "private" or message.from_user.is_bot:
        return None

    contact = None
    if message.contact is not None:
        contact = ContactPayload(
            phone_number=message.contact.phone_number,
            user_id=message.contact.user_id,
            first_name=message.contact.first_name,
            last_name=message.contact.last_name,
        )

    return IncomingMessage(
        user_id=message.from_user.id,
        chat_id=message.chat.id,
        text=message.text,
        contact=contact,
        is_restart_command=is_restart_command(message.text),
        language_code=message.from_user.language_code,
        message_id=message.message_id,
    )
