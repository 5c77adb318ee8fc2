"""
app/flow/deriver.py

Purpose: Canonical dialogue position from durable data

- derive(record, hint) computes where a user should be right now
- Basic-info steps come from the record checklist; a session hint can never skip a field
- Order/offer steps only exist in the session, so a valid hint is trusted
- Pure: no I/O, no clock
"""

from typing import Optional

from app.flow.states import (
    BasicInfoStep,
    DialoguePosition,
    DialogueState,
    OfferStep,
    OrderStep,
    STATE_STEPS,
    Step,
    first_step,
)
from app.models.user import UserRecord


BASIC_INFO_CHECKLIST = (
    (BasicInfoStep.FIRST_NAME, "first_name"),
    (BasicInfoStep.LAST_NAME, "last_name"),
    (BasicInfoStep.BIRTH_YEAR, "birth_year"),
    (BasicInfoStep.PHONE, "phone_number"),
)


def derive(record: Optional[UserRecord], hint: Optional[Step] = None) -> DialoguePosition:
    """
    Computes the dialogue position a user should be in.

    Args:
        record: The user's durable record, or None for an unknown identity
        hint: Step stored in the user's session, if any

    Returns:
        DialoguePosition (first matching rule wins):
        role_selection -> basic_info -> first_order / first_offer -> completed
    """
    if record is None or not record.has_role:
        return DialoguePosition(DialogueState.ROLE_SELECTION)

    if missing_basic_info_step(record) is not None:
        return DialoguePosition(DialogueState.BASIC_INFO, derive_basic_info_step(record, hint))

    if not record.registration_completed:
        state = DialogueState.FIRST_OFFER if record.is_driver else DialogueState.FIRST_ORDER
        return DialoguePosition(state, derive_remaining_step(state, hint))

    return DialoguePosition(DialogueState.COMPLETED)


def missing_basic_info_step(record: UserRecord) -> Optional[BasicInfoStep]:
    """First checklist step whose field is absent on the record."""
    for step, field in BASIC_INFO_CHECKLIST:
        if getattr(record.profile, field) in (None, ""):
            return step
    return None


def derive_basic_info_step(record: UserRecord, hint: Optional[Step] = None) -> BasicInfoStep:
    required = missing_basic_info_step(record) or BasicInfoStep.FIRST_NAME

    if not isinstance(hint, BasicInfoStep):
        return required

    steps = STATE_STEPS[DialogueState.BASIC_INFO]
    if steps.index(hint) > steps.index(required):
        # A stale hint must not skip a required field
        return required

    field = dict(BASIC_INFO_CHECKLIST)[hint]
    if getattr(record.profile, field) in (None, ""):
        return hint

    return required


def derive_remaining_step(state: DialogueState, hint: Optional[Step] = None) -> Step:
    """
    Step within first_order / first_offer. No durable partial progress exists
    for these, so losing the session restarts the sub-flow at its first step.
    """
    step_type = OfferStep if state == DialogueState.FIRST_OFFER else OrderStep
    if isinstance(hint, step_type):
        return hint
    return first_step(state)
