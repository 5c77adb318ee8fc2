"""
app/flow/states.py

Purpose: Defines the registration dialogue vocabulary

- Dialogue states (role_selection, basic_info, first_order, first_offer, completed)
- Per-state step enums and their fixed order
- Valid state transitions
- Expected input kind for every (state, step) pair
- Step parsing for persisted sessions
"""

from enum import Enum
from typing import Dict, List, Optional, Union
from dataclasses import dataclass


class DialogueState(str, Enum):
    """
    Coarse phases of the registration dialogue.
    """

    ROLE_SELECTION = "role_selection"
    BASIC_INFO = "basic_info"
    FIRST_ORDER = "first_order"
    FIRST_OFFER = "first_offer"
    COMPLETED = "completed"


class BasicInfoStep(str, Enum):
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    BIRTH_YEAR = "birth_year"
    PHONE = "phone"


class OrderStep(str, Enum):
    FROM_LOCATION = "from_location"
    TO_LOCATION = "to_location"
    DESCRIPTION = "description"
    PRICE = "price"


class OfferStep(str, Enum):
    VEHICLE_MODEL = "vehicle_model"
    VEHICLE_CATEGORY = "vehicle_category"
    CURRENT_LOCATION = "current_location"


Step = Union[BasicInfoStep, OrderStep, OfferStep]


class InputKind(str, Enum):
    """
    Shape of the input a step expects.
    """

    TEXT = "text"
    NUMBER = "number"
    CONTACT = "contact"
    ROLE_CHOICE = "role_choice"
    CATEGORY_CHOICE = "category_choice"
    TEXT_OR_SKIP = "text_or_skip"
    NUMBER_OR_SKIP = "number_or_skip"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DialoguePosition:
    """
    Where a user is in the dialogue: a state plus an optional step.
    """
    state: DialogueState
    step: Optional[Step] = None

    def __str__(self) -> str:
        if self.step is None:
            return self.state.value
        return f"{self.state.value}/{self.step.value}"


# Ordered steps for each state that has them
STATE_STEPS: Dict[DialogueState, List[Step]] = {
    DialogueState.BASIC_INFO: list(BasicInfoStep),
    DialogueState.FIRST_ORDER: list(OrderStep),
    DialogueState.FIRST_OFFER: list(OfferStep),
}

STEP_TYPES = {
    DialogueState.BASIC_INFO: BasicInfoStep,
    DialogueState.FIRST_ORDER: OrderStep,
    DialogueState.FIRST_OFFER: OfferStep,
}


# Valid state transitions - a state may also stay where it is
STATE_TRANSITIONS: Dict[DialogueState, List[DialogueState]] = {
    DialogueState.ROLE_SELECTION: [
        DialogueState.BASIC_INFO,
    ],
    DialogueState.BASIC_INFO: [
        DialogueState.FIRST_ORDER,
        DialogueState.FIRST_OFFER,
    ],
    DialogueState.FIRST_ORDER: [
        DialogueState.COMPLETED,
    ],
    DialogueState.FIRST_OFFER: [
        DialogueState.COMPLETED,
    ],
    DialogueState.COMPLETED: [],
}


INPUT_KINDS: Dict[DialogueState, Dict[Optional[Step], InputKind]] = {
    DialogueState.ROLE_SELECTION: {
        None: InputKind.ROLE_CHOICE,
    },
    DialogueState.BASIC_INFO: {
        BasicInfoStep.FIRST_NAME: InputKind.TEXT,
        BasicInfoStep.LAST_NAME: InputKind.TEXT,
        BasicInfoStep.BIRTH_YEAR: InputKind.NUMBER,
        BasicInfoStep.PHONE: InputKind.CONTACT,
    },
    DialogueState.FIRST_ORDER: {
        OrderStep.FROM_LOCATION: InputKind.TEXT,
        OrderStep.TO_LOCATION: InputKind.TEXT_OR_SKIP,
        OrderStep.DESCRIPTION: InputKind.TEXT_OR_SKIP,
        OrderStep.PRICE: InputKind.NUMBER_OR_SKIP,
    },
    DialogueState.FIRST_OFFER: {
        OfferStep.VEHICLE_MODEL: InputKind.TEXT,
        OfferStep.VEHICLE_CATEGORY: InputKind.CATEGORY_CHOICE,
        OfferStep.CURRENT_LOCATION: InputKind.TEXT,
    },
}


def is_valid_transition(from_state: DialogueState, to_state: DialogueState) -> bool:
    """
    Checks if a state transition is valid. Staying in the same state always is.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed, False otherwise
    """
    if from_state == to_state:
        return True
    return to_state in STATE_TRANSITIONS.get(from_state, [])


def expected_input_kind(state: DialogueState, step: Optional[Step]) -> InputKind:
    """
    Returns the input kind for a (state, step) pair, UNKNOWN if the pair is not recognized.
    """
    return INPUT_KINDS.get(state, {}).get(step, InputKind.UNKNOWN)


def parse_step(state: DialogueState, raw: Optional[str]) -> Optional[Step]:
    """
    Parses a persisted step identifier against the step list of a state.

    Args:
        state: State the step belongs to
        raw: Step value as stored, or None

    Returns:
        The step enum member, or None if the value is absent or not a step of this state
    """
    if raw is None:
        return None

    step_type = STEP_TYPES.get(state)
    if step_type is None:
        return None

    if isinstance(raw, step_type):
        return raw

    try:
        return step_type(raw)
    except ValueError:
        return None


def next_step(state: DialogueState, step: Optional[Step]) -> Optional[Step]:
    """
    Returns the step that follows `step` in the fixed order of `state`,
    or None when `step` is the last one (or the state has no steps).
    """
    steps = STATE_STEPS.get(state, [])
    if step not in steps:
        return None

    index = steps.index(step)
    if index + 1 < len(steps):
        return steps[index + 1]
    return None


def first_step(state: DialogueState) -> Optional[Step]:
    """
    Returns the first step of a state, or None if the state has no steps.
    """
    steps = STATE_STEPS.get(state, [])
    return steps[0] if steps else None
