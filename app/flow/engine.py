"""
app/flow/engine.py

Purpose: Safe-state transitions for the registration dialogue

- Loads the record and reconciles the session against the derived position
- Handles /start restarts
- Validates input, dispatches to the state's step handler and advances
- Persists order -> record -> session; a failed write aborts every later one
- Returns the prompts to send; never talks to the transport itself
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from app.core.exceptions import DialogueError
from app.core.logging import LogContext, get_logger
from app.flow.deriver import derive
from app.flow.handlers.basic_info import handle_basic_info
from app.flow.handlers.common import StepContext, StepResult
from app.flow.handlers.first_offer import REQUIRED_OFFER_FIELDS, apply_driver_info, handle_first_offer
from app.flow.handlers.first_order import REQUIRED_ORDER_FIELDS, build_first_order, handle_first_order
from app.flow.handlers.role_selection import handle_role_selection
from app.flow.prompts import InputAffordance, Prompt, build_prompt, notice
from app.flow.states import (
    DialoguePosition,
    DialogueState,
    InputKind,
    expected_input_kind,
    first_step,
    is_valid_transition,
    next_step,
)
from app.flow.validator import ValidationContext, is_own_contact, validate
from app.models.order import Order
from app.models.session import SessionState
from app.models.user import UserRecord
from app.schemas.telegram import IncomingMessage
from app.services.order_service import OrderStore
from app.services.session_service import SessionStore
from app.services.user_service import RecordStore
from utils.i18n import category_labels, detect_locale, role_labels, skip_label, t

logger = get_logger(__name__)


StepHandler = Callable[[StepContext], StepResult]

STEP_HANDLERS: Dict[DialogueState, StepHandler] = {
    DialogueState.ROLE_SELECTION: handle_role_selection,
    DialogueState.BASIC_INFO: handle_basic_info,
    DialogueState.FIRST_ORDER: handle_first_order,
    DialogueState.FIRST_OFFER: handle_first_offer,
}

# States the dialogue only ever leaves through a derivation, never a handler
TERMINAL_STATES = (DialogueState.COMPLETED,)


@dataclass
class DialogueOutcome:
    """
    Result of processing one message.

    consumed: False when the dialogue has nothing to say (registered users)
    position: Canonical position after the message
    prompts: Messages to send, in order
    """
    consumed: bool
    position: DialoguePosition
    prompts: List[Prompt] = field(default_factory=list)


def check_handlers(handlers: Dict[DialogueState, StepHandler]) -> None:
    missing = [
        state.value for state in DialogueState
        if state not in TERMINAL_STATES and state not in handlers
    ]
    if missing:
        raise DialogueError(
            f"No step handler for state(s): {', '.join(missing)}",
            details={"missing": missing}
        )


def rejection_key(kind: InputKind, message: IncomingMessage, context: ValidationContext) -> str:
    """Message key explaining a validation failure."""
    if kind == InputKind.CONTACT:
        if message.contact is None:
            return "registration.share_contact_please"
        if not is_own_contact(context):
            return "registration.share_your_own_contact"
    return "errors.invalid_input"


class TransitionEngine:
    """
    Drives one user through the registration dialogue, one message at a time.

    The record is the source of truth; the session only caches the current
    step and in-progress order / offer values. Only this class writes to the
    record, session and order stores.
    """

    def __init__(
        self,
        records: RecordStore,
        sessions: SessionStore,
        orders: OrderStore,
        handlers: Optional[Dict[DialogueState, StepHandler]] = None
    ):
        self.records = records
        self.sessions = sessions
        self.orders = orders
        self.handlers = dict(STEP_HANDLERS if handlers is None else handlers)
        check_handlers(self.handlers)

    async def process(self, message: IncomingMessage) -> DialogueOutcome:
        """
        Processes one inbound message.

        Args:
            message: Normalized inbound message

        Returns:
            DialogueOutcome with the prompts to send

        Raises:
            StoreError: A store read or write failed; nothing after it was written
            DialogueError: A transition broke the allowed transition table
        """
        with LogContext(user_id=message.user_id):
            record = await self._load_record(message)
            locale = record.language

            position, session, created = await self._reconcile(record, message.is_restart_command)

            if position.state == DialogueState.COMPLETED:
                return DialogueOutcome(consumed=False, position=position)

            if message.is_restart_command:
                logger.info(f"🔄 Restart at {position}")
                prompts = [notice(locale, "start.welcome")]
                prompts.extend(self._prompt_for(position, locale))
                return DialogueOutcome(consumed=True, position=position, prompts=prompts)

            with LogContext(state=position.state.value, step=self._step_value(position)):
                return await self._handle_input(message, record, session, position, locale, created)

    async def _load_record(self, message: IncomingMessage) -> UserRecord:
        record = await self.records.get(message.user_id)
        if record is not None:
            return record

        logger.info("👤 New user, creating record")
        return await self.records.create(
            message.user_id,
            {"language": detect_locale(message.language_code)}
        )

    async def _reconcile(
        self,
        record: UserRecord,
        restart: bool
    ) -> Tuple[DialoguePosition, Optional[SessionState], bool]:
        """
        Derives the canonical position and brings the session in line with it.

        Returns:
            (position, session, created); session is None once the user is
            completed, created is True when no session existed before
        """
        user_id = record.user_id
        session = await self.sessions.get(user_id)

        hint = None if restart or session is None else session.current_step
        position = derive(record, hint)

        if position.state == DialogueState.COMPLETED:
            if session is not None:
                logger.info("🧹 Removing leftover session of a registered user")
                await self.sessions.delete(user_id)
            return position, None, False

        if session is None or restart or session.current_state != position.state:
            created = session is None
            if session is not None and not restart:
                logger.warning(f"⚠️ Session at {session.position} disagrees with record, resetting to {position}")
            # A restart within the same state keeps what the sub-flow collected
            kept = None
            if restart and session is not None and session.current_state == position.state:
                kept = session.data
            session = SessionState.at(user_id, position, kept)
            await self.sessions.set(user_id, session)
            return position, session, created

        if session.current_step != position.step:
            logger.warning(f"⚠️ Session step {session.current_step} corrected to {position.step}")
            await self.sessions.update_field(user_id, "current_step", position.step)
            session = session.model_copy(update={"current_step": position.step})

        return position, session, False

    async def _handle_input(
        self,
        message: IncomingMessage,
        record: UserRecord,
        session: SessionState,
        position: DialoguePosition,
        locale: str,
        created: bool = False
    ) -> DialogueOutcome:
        kind = expected_input_kind(position.state, position.step)
        context = ValidationContext(
            sender_id=message.user_id,
            contact=message.contact,
            role_labels=tuple(role_labels(locale)),
            category_labels=tuple(category_labels(locale)),
            skip_label=skip_label(locale),
        )

        if not validate(position.state, position.step, message.text, context):
            if created and position.state == DialogueState.ROLE_SELECTION:
                # First contact: greet instead of reporting an error
                return self._reprompt(position, locale, "start.welcome")
            logger.info(f"❌ Invalid {kind.value} input")
            return self._reprompt(position, locale, rejection_key(kind, message, context))

        handler = self.handlers[position.state]
        result = handler(StepContext(
            record=record,
            position=position,
            text=message.text.strip() if message.text else None,
            contact=message.contact,
            data=dict(session.data),
            locale=locale,
        ))

        if not result.accepted:
            logger.info(f"❌ Input refused: {result.rejection}")
            return self._reprompt(position, locale, result.rejection)

        return await self._advance(record, position, result, locale)

    async def _advance(
        self,
        record: UserRecord,
        position: DialoguePosition,
        result: StepResult,
        locale: str
    ) -> DialogueOutcome:
        state = position.state
        updated = result.record
        data = result.data
        order: Optional[Order] = None
        prompts: List[Prompt] = list(result.notices)

        if state in (DialogueState.ROLE_SELECTION, DialogueState.BASIC_INFO):
            # Re-derive so fields already on the record are never asked again
            new_position = derive(updated or record)
            self._check_transition(state, new_position.state, derived=True)
            data = data if new_position.state == state else {}

        elif next_step(state, position.step) is not None:
            new_position = DialoguePosition(state, next_step(state, position.step))

        else:
            required = REQUIRED_ORDER_FIELDS if state == DialogueState.FIRST_ORDER else REQUIRED_OFFER_FIELDS
            missing = [name for name in required if data.get(name) in (None, "")]
            if missing:
                return await self._restart_subflow(record, state, locale, missing)

            base = updated or record
            if state == DialogueState.FIRST_ORDER:
                order = build_first_order(base, data)
            else:
                base = apply_driver_info(base, data)

            updated = self._complete_registration(base)
            new_position = DialoguePosition(DialogueState.COMPLETED)
            self._check_transition(state, new_position.state)

        # Persist: order -> record -> session
        if order is not None:
            order = await self.orders.create(order)
            logger.info(f"📦 First order stored: {order.order_id}")

        if updated is not None:
            updated = await self.records.save(updated)

        if new_position.state == DialogueState.COMPLETED:
            await self.sessions.delete(record.user_id)
        else:
            await self.sessions.set(record.user_id, SessionState.at(record.user_id, new_position, data))

        logger.info(f"➡️ {position} -> {new_position}")

        prompts.extend(self._transition_messages(state, new_position, order, locale))
        prompts.extend(self._prompt_for(new_position, locale))

        return DialogueOutcome(consumed=True, position=new_position, prompts=prompts)

    async def _restart_subflow(
        self,
        record: UserRecord,
        state: DialogueState,
        locale: str,
        missing: List[str]
    ) -> DialogueOutcome:
        """Session data was lost mid sub-flow; start the sub-flow over."""
        logger.warning(f"⚠️ Session data missing {missing}, restarting {state.value}")
        position = DialoguePosition(state, first_step(state))
        await self.sessions.set(record.user_id, SessionState.at(record.user_id, position))
        return DialogueOutcome(consumed=True, position=position, prompts=self._prompt_for(position, locale))

    def _complete_registration(self, record: UserRecord) -> UserRecord:
        if not record.can_complete_registration():
            raise DialogueError(
                "Record is missing fields required to complete registration",
                details={"user_id": record.user_id, "missing_driver_fields": record.missing_driver_fields()}
            )
        logger.info("✅ Registration completed")
        return record.model_copy(update={"registration_completed": True})

    def _check_transition(self, from_state: DialogueState, to_state: DialogueState, derived: bool = False) -> None:
        if is_valid_transition(from_state, to_state):
            return

        # A derived position reflects the record and always wins
        if derived:
            logger.warning(f"⚠️ Record moves dialogue from {from_state.value} to {to_state.value}")
            return

        raise DialogueError(
            f"Invalid transition {from_state.value} -> {to_state.value}",
            details={"from": from_state.value, "to": to_state.value}
        )

    def _transition_messages(
        self,
        from_state: DialogueState,
        position: DialoguePosition,
        order: Optional[Order],
        locale: str
    ) -> List[Prompt]:
        to_state = position.state
        if to_state == from_state:
            return []

        messages: List[Prompt] = []

        if from_state == DialogueState.BASIC_INFO:
            messages.append(notice(locale, "registration.basic_info_completed"))
            if to_state == DialogueState.FIRST_ORDER:
                messages.append(notice(locale, "registration.create_first_order"))
            elif to_state == DialogueState.FIRST_OFFER:
                messages.append(notice(locale, "registration.create_first_offer"))

        if to_state == DialogueState.COMPLETED:
            if order is not None:
                messages.append(notice(locale, "orders.created", summary=order.summary))
            messages.append(Prompt(t(locale, "registration.completed"), InputAffordance.remove()))

        return messages

    def _prompt_for(self, position: DialoguePosition, locale: str) -> List[Prompt]:
        prompt = build_prompt(position, locale)
        return [prompt] if prompt is not None else []

    def _reprompt(self, position: DialoguePosition, locale: str, key: str) -> DialogueOutcome:
        prompts = [notice(locale, key)]
        prompts.extend(self._prompt_for(position, locale))
        return DialogueOutcome(consumed=True, position=position, prompts=prompts)

    @staticmethod
    def _step_value(position: DialoguePosition) -> Optional[str]:
        return position.step.value if position.step is not None else None
