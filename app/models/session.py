"""
app/models/session.py

Purpose: Ephemeral dialogue session model

- Current dialogue state and step
- Accumulator for in-progress order / offer fields
- Step identifiers are checked against the state's step list on load
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, validator

from app.flow.states import DialogueState, DialoguePosition, Step, parse_step


class SessionState(BaseModel):
    user_id: int
    current_state: DialogueState
    current_step: Optional[Step] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @validator("current_step", pre=True)
    def validate_step(cls, v, values):
        """Drop step values that do not belong to the session's state."""
        state = values.get("current_state")
        if state is None:
            return None
        return parse_step(state, v)

    @property
    def position(self) -> DialoguePosition:
        return DialoguePosition(self.current_state, self.current_step)

    @classmethod
    def at(cls, user_id: int, position: DialoguePosition, data: Optional[Dict[str, Any]] = None) -> "SessionState":
        return cls(
            user_id=user_id,
            current_state=position.state,
            current_step=position.step,
            data=dict(data or {}),
        )

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "SessionState":
        return cls(
            user_id=document["user_id"],
            current_state=document["current_state"],
            current_step=document.get("current_step"),
            data=document.get("data") or {},
        )
