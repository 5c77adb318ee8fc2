import pytest

from app.flow.states import (
    BasicInfoStep,
    DialogueState,
    OfferStep,
    OrderStep,
    first_step,
    is_valid_transition,
    next_step,
    parse_step,
)
from app.models.session import SessionState


def test_transitions():
    assert is_valid_transition(DialogueState.ROLE_SELECTION, DialogueState.BASIC_INFO)
    assert is_valid_transition(DialogueState.BASIC_INFO, DialogueState.FIRST_OFFER)
    assert is_valid_transition(DialogueState.FIRST_ORDER, DialogueState.COMPLETED)
    assert is_valid_transition(DialogueState.BASIC_INFO, DialogueState.BASIC_INFO)

    assert not is_valid_transition(DialogueState.ROLE_SELECTION, DialogueState.COMPLETED)
    assert not is_valid_transition(DialogueState.FIRST_ORDER, DialogueState.FIRST_OFFER)
    assert not is_valid_transition(DialogueState.COMPLETED, DialogueState.ROLE_SELECTION)


def test_step_order():
    assert first_step(DialogueState.FIRST_ORDER) == OrderStep.FROM_LOCATION
    assert next_step(DialogueState.BASIC_INFO, BasicInfoStep.BIRTH_YEAR) == BasicInfoStep.PHONE
    assert next_step(DialogueState.FIRST_OFFER, OfferStep.CURRENT_LOCATION) is None
    assert first_step(DialogueState.ROLE_SELECTION) is None


@pytest.mark.parametrize("state,raw,expected", [
    (DialogueState.BASIC_INFO, "phone", BasicInfoStep.PHONE),
    (DialogueState.BASIC_INFO, "price", None),
    (DialogueState.FIRST_ORDER, "price", OrderStep.PRICE),
    (DialogueState.FIRST_OFFER, "bogus", None),
    (DialogueState.COMPLETED, "phone", None),
    (DialogueState.FIRST_ORDER, None, None),
])
def test_parse_step(state, raw, expected):
    assert parse_step(state, raw) == expected


def test_session_drops_step_of_another_state():
    session = SessionState.from_document({
        "user_id": 1,
        "current_state": "first_offer",
        "current_step": "birth_year",
        "data": {"vehicle_model": "Volvo"},
    })

    assert session.current_step is None
    assert session.data == {"vehicle_model": "Volvo"}


def test_session_document_round_trip_keeps_step_type():
    session = SessionState.from_document({
        "user_id": 1,
        "current_state": "first_order",
        "current_step": "description",
    })

    assert session.current_step is OrderStep.DESCRIPTION
    assert session.to_document()["current_step"] == "description"
