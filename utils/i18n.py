"""
utils/i18n.py

Purpose: Message lookup and locale detection

- t(locale, key, **kwargs) with fallback to the default language
- Locale from Telegram's language_code
- Label -> value lookups for role, vehicle category and skip buttons
"""

from typing import Dict, Optional

from app.core.config import settings
from app.models.user import Role, VehicleCategory
from utils.constants import MESSAGES, SUPPORTED_LANGUAGES


def detect_locale(language_code: Optional[str]) -> str:
    """
    Maps a Telegram language_code (e.g. "en-US") to a supported locale.
    """
    if language_code:
        base = language_code.split("-")[0].lower()
        if base in SUPPORTED_LANGUAGES:
            return base
    return settings.DEFAULT_LANGUAGE


def t(locale: str, key: str, **kwargs) -> str:
    """
    Returns the message for `key` in `locale`, falling back to the default
    language and finally to the key itself.
    """
    catalogue = MESSAGES.get(locale) or MESSAGES[settings.DEFAULT_LANGUAGE]
    text = catalogue.get(key) or MESSAGES[settings.DEFAULT_LANGUAGE].get(key, key)
    if kwargs:
        return text.format(**kwargs)
    return text


def role_labels(locale: str) -> Dict[str, Role]:
    return {
        t(locale, "registration.role_client"): Role.CLIENT,
        t(locale, "registration.role_driver"): Role.DRIVER,
    }


def category_labels(locale: str) -> Dict[str, VehicleCategory]:
    return {
        t(locale, f"registration.vehicle_categories.{category.value}"): category
        for category in VehicleCategory
    }


def skip_label(locale: str) -> str:
    return t(locale, "orders.skip")
