"""
app/flow/validator.py

Purpose: Step input validation

- Decides whether a message has the shape the current step expects
- One rule per InputKind; unrecognized (state, step) pairs always pass
"""

from dataclasses import dataclass, field
from typing import Collection, Optional

from app.flow.states import DialogueState, InputKind, Step, expected_input_kind
from app.schemas.telegram import ContactPayload
from utils.validation_utils import is_valid_text, parse_integer


@dataclass
class ValidationContext:
    """
    Everything besides the raw text that a rule may look at.
    Labels are in the user's language.
    """
    sender_id: int
    contact: Optional[ContactPayload] = None
    role_labels: Collection[str] = field(default_factory=tuple)
    category_labels: Collection[str] = field(default_factory=tuple)
    skip_label: Optional[str] = None


def is_own_contact(context: ValidationContext) -> bool:
    """A contact card is accepted only if it belongs to the sender."""
    return context.contact is not None and context.contact.user_id == context.sender_id


def validate_input(kind: InputKind, text: Optional[str], context: ValidationContext) -> bool:
    if kind == InputKind.TEXT:
        return is_valid_text(text)

    if kind == InputKind.NUMBER:
        return parse_integer(text) is not None

    if kind == InputKind.CONTACT:
        return is_own_contact(context)

    if kind == InputKind.ROLE_CHOICE:
        return text is not None and text in context.role_labels

    if kind == InputKind.CATEGORY_CHOICE:
        return text is not None and text in context.category_labels

    if kind == InputKind.TEXT_OR_SKIP:
        return bool(text) and (is_valid_text(text) or text == context.skip_label)

    if kind == InputKind.NUMBER_OR_SKIP:
        return bool(text) and (parse_integer(text) is not None or text == context.skip_label)

    # InputKind.UNKNOWN: never block a user on a position we do not recognize
    return True


def validate(state: DialogueState, step: Optional[Step], text: Optional[str], context: ValidationContext) -> bool:
    """
    Checks a message against the input kind expected at (state, step).

    Args:
        state: Current dialogue state
        step: Current step, None for role_selection
        text: Raw message text, None for non-text messages
        context: Sender, contact payload and the labels of the user's language

    Returns:
        True if the input is acceptable for this step
    """
    return validate_input(expected_input_kind(state, step), text, context)
