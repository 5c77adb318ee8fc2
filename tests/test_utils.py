from datetime import datetime

import pytest

from app.models.user import Role, VehicleCategory
from utils.i18n import category_labels, detect_locale, role_labels, t
from utils.validation_utils import (
    MAX_PRICE,
    clean_text,
    is_valid_birth_year,
    is_valid_price,
    normalize_phone_number,
    sanitize_input,
)


@pytest.mark.parametrize("code,expected", [
    ("en", "en"),
    ("en-US", "en"),
    ("uz", "uz"),
    ("de", "ru"),
    (None, "ru"),
])
def test_detect_locale(code, expected):
    assert detect_locale(code) == expected


def test_unknown_locale_falls_back_to_default():
    assert t("fr", "start.choose_role") == t("ru", "start.choose_role")


def test_every_locale_has_role_and_category_labels():
    for locale in ("ru", "uz", "en"):
        assert set(role_labels(locale).values()) == {Role.CLIENT, Role.DRIVER}
        assert set(category_labels(locale).values()) == set(VehicleCategory)


@pytest.mark.parametrize("year,expected", [
    (1899, False),
    (1900, True),
    (2010, True),
    (2011, False),
])
def test_birth_year_bounds(year, expected):
    assert is_valid_birth_year(year, 1900, 16, today=datetime(2026, 5, 1)) is expected


@pytest.mark.parametrize("raw,expected", [
    ("998901234567", "+998901234567"),
    ("+1 (555) 010-9999", "+15550109999"),
    ("", ""),
])
def test_normalize_phone_number(raw, expected):
    assert normalize_phone_number(raw) == expected


def test_sanitize_input_keeps_brackets():
    assert sanitize_input("  Volvo   <FH>  ") == "Volvo <FH>"
    assert sanitize_input("[]") == "[]"


@pytest.mark.parametrize("raw,expected", [
    ("  Tashkent  ", "Tashkent"),
    ("<>", "<>"),
    ("  x ", None),
    (None, None),
])
def test_clean_text(raw, expected):
    assert clean_text(raw) == expected


@pytest.mark.parametrize("price,expected", [
    (0, True),
    (MAX_PRICE, True),
    (-1, False),
    (MAX_PRICE + 1, False),
    (10 ** 20, False),
])
def test_is_valid_price(price, expected):
    assert is_valid_price(price) == expected
