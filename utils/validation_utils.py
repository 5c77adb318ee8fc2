"""
utils/validation_utils.py

Purpose: Input validation primitives

- Free-text length checks
- Strict integer parsing
- Birth year and price range checks
- Phone normalization and input sanitization
- clean_text: sanitized free text that still passes the length check
"""

import re
from typing import Optional
from datetime import datetime

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

# Well inside the signed 64-bit range BSON can store
MAX_PRICE = 1_000_000_000_000


def is_valid_text(text: Optional[str], min_length: int = 2) -> bool:
    """
    Checks that text is present and, trimmed, at least `min_length` characters long.

    Args:
        text: Raw message text
        min_length: Minimum trimmed length

    Returns:
        True if the text is acceptable
    """
    if not text:
        return False
    return len(text.strip()) >= min_length


def parse_integer(text: Optional[str]) -> Optional[int]:
    """
    Parses the whole string as an integer. Trailing garbage ("1990abc") is rejected.

    Args:
        text: Raw message text

    Returns:
        The integer, or None if the string is not an integer
    """
    if not text:
        return None

    text = text.strip()
    if not INTEGER_PATTERN.match(text):
        return None
    return int(text)


def is_valid_birth_year(year: int, min_year: int, min_age: int, today: Optional[datetime] = None) -> bool:
    """
    Validates a year of birth is between `min_year` and the latest year that
    still makes the user at least `min_age` years old.
    """
    current_year = (today or datetime.utcnow()).year
    return min_year <= year <= current_year - min_age


def is_valid_price(price: int) -> bool:
    return 0 <= price <= MAX_PRICE


def normalize_phone_number(phone: str) -> str:
    """
    Normalizes a phone number to "+<digits>". Telegram contacts may omit the plus sign.

    Args:
        phone: Phone number as shared

    Returns:
        Normalized phone number
    """
    digits = re.sub(r"[^\d]", "", phone or "")
    return f"+{digits}" if digits else ""


def sanitize_input(text: str, max_length: int = 1000) -> str:
    """
    Sanitizes user input before it is stored.
    Replies go out as plain text, so no characters are removed.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text[:max_length]

    # Normalize whitespace
    text = " ".join(text.split())

    return text.strip()


def clean_text(text: Optional[str], max_length: int = 1000) -> Optional[str]:
    """Sanitized text, or None if what is left is too short to keep."""
    cleaned = sanitize_input(text, max_length=max_length)
    return cleaned if is_valid_text(cleaned) else None
