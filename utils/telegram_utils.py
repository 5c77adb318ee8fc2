"""
utils/telegram_utils.py

Purpose: Telegram Bot API payload builders

- Reply keyboards (one button per row)
- Contact-request button
- Keyboard removal
- sendMessage payloads
"""

from typing import Any, Dict, List, Optional

from app.flow.prompts import AffordanceKind, InputAffordance


def create_reply_keyboard(labels: List[str], one_time: bool = True) -> Dict[str, Any]:
    """
    Creates a reply keyboard with one button per row.

    Args:
        labels: Button labels; the pressed label is sent back as message text
        one_time: Hide the keyboard after a button is pressed

    Returns:
        ReplyKeyboardMarkup dict
    """
    return {
        "keyboard": [[{"text": label}] for label in labels],
        "resize_keyboard": True,
        "one_time_keyboard": one_time
    }


def create_contact_keyboard(button_text: str) -> Dict[str, Any]:
    """Keyboard with a single button that shares the user's own contact."""
    return {
        "keyboard": [[{"text": button_text, "request_contact": True}]],
        "resize_keyboard": True,
        "one_time_keyboard": True
    }


def create_remove_keyboard() -> Dict[str, Any]:
    return {"remove_keyboard": True}


def build_reply_markup(affordance: InputAffordance) -> Optional[Dict[str, Any]]:
    """
    Maps an input affordance to Telegram reply_markup.

    Returns:
        Markup dict, or None when the current keyboard should stay as it is
    """
    if affordance.kind == AffordanceKind.FIXED_CHOICES:
        return create_reply_keyboard(affordance.choices)

    if affordance.kind == AffordanceKind.REQUEST_CONTACT:
        return create_contact_keyboard(affordance.button_text or "")

    if affordance.kind == AffordanceKind.REMOVE:
        return create_remove_keyboard()

    return None


def create_send_message_payload(
    chat_id: int,
    text: str,
    reply_markup: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "chat_id": chat_id,
        "text": text
    }
    if reply_markup is not None:
        payload["reply_markup"] = reply_markup
    return payload
