"""
app/flow/handlers/common.py

Shared types for step handlers.

Handlers are pure: they read the already-validated input, extract the field
the step collects and return what should change. The transition engine does
all store I/O and decides where the user goes next.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.flow.prompts import Prompt
from app.flow.states import DialoguePosition
from app.models.user import UserRecord
from app.schemas.telegram import ContactPayload


@dataclass
class StepContext:
    record: UserRecord
    position: DialoguePosition
    text: Optional[str]
    contact: Optional[ContactPayload]
    data: Dict[str, Any]
    locale: str


@dataclass
class StepResult:
    # Updated record, None when the step does not touch the record
    record: Optional[UserRecord] = None
    # Session accumulator after the step
    data: Dict[str, Any] = field(default_factory=dict)
    # Messages to send before the next prompt
    notices: List[Prompt] = field(default_factory=list)
    # Message key explaining why the input was refused; the step is re-prompted
    rejection: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None


def reject(context: StepContext, key: str) -> StepResult:
    return StepResult(data=dict(context.data), rejection=key)
