"""
app/flow/prompts.py

Purpose: What to say at each dialogue position

- Prompt text per (state, step), localized
- Input affordance: fixed choices, contact request, keyboard removal or nothing
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from app.flow.states import (
    BasicInfoStep,
    DialoguePosition,
    DialogueState,
    OfferStep,
    OrderStep,
)
from app.core.logging import get_logger
from utils.i18n import category_labels, role_labels, skip_label, t

logger = get_logger(__name__)


class AffordanceKind(str, Enum):
    NONE = "none"
    FIXED_CHOICES = "fixed_choices"
    REQUEST_CONTACT = "request_contact"
    REMOVE = "remove"


@dataclass(frozen=True)
class InputAffordance:
    kind: AffordanceKind = AffordanceKind.NONE
    choices: List[str] = field(default_factory=list)
    # Label of the contact-request button
    button_text: Optional[str] = None

    @classmethod
    def fixed_choices(cls, choices: List[str]) -> "InputAffordance":
        return cls(AffordanceKind.FIXED_CHOICES, list(choices))

    @classmethod
    def request_contact(cls, button_text: str) -> "InputAffordance":
        return cls(AffordanceKind.REQUEST_CONTACT, button_text=button_text)

    @classmethod
    def remove(cls) -> "InputAffordance":
        return cls(AffordanceKind.REMOVE)


@dataclass(frozen=True)
class Prompt:
    text: str
    affordance: InputAffordance = field(default_factory=InputAffordance)


def notice(locale: str, key: str, **kwargs) -> Prompt:
    """Plain informational message that leaves the current keyboard alone."""
    return Prompt(t(locale, key, **kwargs))


def build_prompt(position: DialoguePosition, locale: str) -> Optional[Prompt]:
    """
    Returns the prompt asking for the input of `position`, or None for completed.
    """
    state, step = position.state, position.step

    if state == DialogueState.ROLE_SELECTION:
        return Prompt(
            t(locale, "start.choose_role"),
            InputAffordance.fixed_choices(list(role_labels(locale)))
        )

    if state == DialogueState.BASIC_INFO:
        if step == BasicInfoStep.LAST_NAME:
            return Prompt(t(locale, "registration.enter_last_name"))
        if step == BasicInfoStep.BIRTH_YEAR:
            return Prompt(t(locale, "registration.enter_birth_year"))
        if step == BasicInfoStep.PHONE:
            return Prompt(
                t(locale, "registration.share_contact"),
                InputAffordance.request_contact(t(locale, "registration.contact_button"))
            )
        if step != BasicInfoStep.FIRST_NAME:
            logger.warning(f"Unknown basic_info step: {step}")
        return Prompt(t(locale, "registration.enter_first_name"), InputAffordance.remove())

    if state == DialogueState.FIRST_ORDER:
        skip = InputAffordance.fixed_choices([skip_label(locale)])
        if step == OrderStep.TO_LOCATION:
            return Prompt(t(locale, "orders.enter_to"), skip)
        if step == OrderStep.DESCRIPTION:
            return Prompt(t(locale, "orders.enter_description"), skip)
        if step == OrderStep.PRICE:
            return Prompt(t(locale, "orders.enter_price"), skip)
        if step != OrderStep.FROM_LOCATION:
            logger.warning(f"Unknown first_order step: {step}")
        return Prompt(t(locale, "orders.enter_from"), InputAffordance.remove())

    if state == DialogueState.FIRST_OFFER:
        if step == OfferStep.VEHICLE_CATEGORY:
            return Prompt(
                t(locale, "registration.choose_vehicle_category"),
                InputAffordance.fixed_choices(list(category_labels(locale)))
            )
        if step == OfferStep.CURRENT_LOCATION:
            return Prompt(t(locale, "registration.enter_current_location"), InputAffordance.remove())
        if step != OfferStep.VEHICLE_MODEL:
            logger.warning(f"Unknown first_offer step: {step}")
        return Prompt(t(locale, "registration.enter_vehicle_model"), InputAffordance.remove())

    return None
