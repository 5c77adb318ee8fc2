import pytest

from app.flow.states import BasicInfoStep, DialogueState, InputKind, OfferStep, OrderStep, expected_input_kind
from app.flow.validator import ValidationContext, validate, validate_input
from app.schemas.telegram import ContactPayload
from utils.i18n import category_labels, role_labels, skip_label


@pytest.fixture
def context():
    return ValidationContext(
        sender_id=42,
        role_labels=tuple(role_labels("en")),
        category_labels=tuple(category_labels("en")),
        skip_label=skip_label("en"),
    )


@pytest.mark.parametrize("text,expected", [
    ("", False),
    ("   ", False),
    ("A", False),
    (" A ", False),
    ("Al", True),
    (None, False),
])
def test_text_boundary(context, text, expected):
    assert validate_input(InputKind.TEXT, text, context) is expected


@pytest.mark.parametrize("text,expected", [
    ("1990", True),
    (" 1990 ", True),
    ("-5", True),
    ("19a0", False),
    ("1990 year", False),
    ("", False),
])
def test_number(context, text, expected):
    assert validate_input(InputKind.NUMBER, text, context) is expected


def test_contact_must_belong_to_sender(context):
    context.contact = ContactPayload(phone_number="+100000", user_id=99)
    assert not validate(DialogueState.BASIC_INFO, BasicInfoStep.PHONE, None, context)

    context.contact = ContactPayload(phone_number="+100000", user_id=42)
    assert validate(DialogueState.BASIC_INFO, BasicInfoStep.PHONE, None, context)


def test_contact_without_owner_is_rejected(context):
    context.contact = ContactPayload(phone_number="+100000")
    assert not validate_input(InputKind.CONTACT, None, context)


def test_typed_phone_is_not_a_contact(context):
    assert not validate(DialogueState.BASIC_INFO, BasicInfoStep.PHONE, "+100000", context)


def test_role_choice(context):
    assert validate(DialogueState.ROLE_SELECTION, None, "Client", context)
    assert validate(DialogueState.ROLE_SELECTION, None, "Driver", context)
    assert not validate(DialogueState.ROLE_SELECTION, None, "client", context)
    assert not validate(DialogueState.ROLE_SELECTION, None, "Admin", context)


def test_category_choice(context):
    assert validate(DialogueState.FIRST_OFFER, OfferStep.VEHICLE_CATEGORY, "Special vehicle", context)
    assert not validate(DialogueState.FIRST_OFFER, OfferStep.VEHICLE_CATEGORY, "Truck", context)


def test_skip_steps(context):
    assert validate(DialogueState.FIRST_ORDER, OrderStep.TO_LOCATION, "Skip", context)
    assert validate(DialogueState.FIRST_ORDER, OrderStep.PRICE, "Skip", context)
    assert validate(DialogueState.FIRST_ORDER, OrderStep.PRICE, "500", context)
    assert not validate(DialogueState.FIRST_ORDER, OrderStep.PRICE, "cheap", context)
    assert not validate(DialogueState.FIRST_ORDER, OrderStep.DESCRIPTION, "", context)


def test_unknown_position_fails_open(context):
    assert expected_input_kind(DialogueState.COMPLETED, None) == InputKind.UNKNOWN
    assert validate(DialogueState.COMPLETED, None, None, context)
    assert validate(DialogueState.BASIC_INFO, OrderStep.PRICE, "x", context)
