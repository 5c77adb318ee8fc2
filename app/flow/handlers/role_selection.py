"""
app/flow/handlers/role_selection.py

Handles: role_selection

- Maps the chosen button label to client / driver
- Writes the role to the record
"""

from app.flow.handlers.common import StepContext, StepResult, reject
from app.flow.prompts import notice
from app.core.logging import get_logger
from utils.i18n import role_labels

logger = get_logger(__name__)


def handle_role_selection(context: StepContext) -> StepResult:
    role = role_labels(context.locale).get(context.text)
    if role is None:
        return reject(context, "errors.invalid_input")

    profile = context.record.profile.model_copy(update={"role": role})
    record = context.record.model_copy(update={"profile": profile})

    logger.info(f"Role selected: {role.value}")

    return StepResult(
        record=record,
        data={},
        notices=[notice(context.locale, "registration.role_selected", role=context.text)],
    )
