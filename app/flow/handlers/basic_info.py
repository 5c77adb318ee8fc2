"""
app/flow/handlers/basic_info.py

Handles: basic_info (first_name -> last_name -> birth_year -> phone)

- Each field is written straight to the record, so progress survives a lost session
- Birth year must make the user at least MIN_USER_AGE years old
- Phone comes from the user's own shared contact
"""

from app.core.config import settings
from app.core.logging import get_logger
from app.flow.handlers.common import StepContext, StepResult, reject
from app.flow.states import BasicInfoStep
from utils.validation_utils import (
    clean_text,
    is_valid_birth_year,
    normalize_phone_number,
    parse_integer,
)

logger = get_logger(__name__)


def handle_basic_info(context: StepContext) -> StepResult:
    step = context.position.step
    updates = {}

    if step in (BasicInfoStep.FIRST_NAME, BasicInfoStep.LAST_NAME):
        name = clean_text(context.text, max_length=100)
        if name is None:
            return reject(context, "errors.invalid_input")
        updates[step.value] = name

    elif step == BasicInfoStep.BIRTH_YEAR:
        year = parse_integer(context.text)
        if year is None or not is_valid_birth_year(year, settings.MIN_BIRTH_YEAR, settings.MIN_USER_AGE):
            return reject(context, "registration.invalid_year")
        updates["birth_year"] = year

    elif step == BasicInfoStep.PHONE:
        updates["phone_number"] = normalize_phone_number(context.contact.phone_number)

    else:
        logger.warning(f"Unknown basic_info step: {step}")
        return StepResult(data=dict(context.data))

    profile = context.record.profile.model_copy(update=updates)
    record = context.record.model_copy(update={"profile": profile})

    logger.info(f"Collected {step.value}")

    return StepResult(record=record, data=dict(context.data))
