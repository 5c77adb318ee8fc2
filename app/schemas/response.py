from pydantic import BaseModel
from typing import Optional, Any


class ErrorResponse(BaseModel):
    """
    Body of every error response.
    `details` is omitted from 5xx responses in production.
    """
    error: str
    code: str
    details: Optional[Any] = None


class WebhookAck(BaseModel):
    """
    Reply to Telegram. Anything but a 2xx makes Telegram redeliver the update,
    so ignored and failed updates are acknowledged too.
    """
    ok: bool = True
