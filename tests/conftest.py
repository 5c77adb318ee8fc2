import pytest

from app.flow.engine import TransitionEngine
from app.flow.router import DialogueRouter
from app.schemas.telegram import ContactPayload, IncomingMessage, is_restart_command
from app.services.order_service import InMemoryOrderStore
from app.services.session_service import InMemorySessionStore
from app.services.telegram_service import Transport
from app.services.user_service import InMemoryRecordStore


class FakeTransport(Transport):
    """Records every prompt instead of calling Telegram."""

    def __init__(self):
        self.sent = []

    async def send_prompt(self, user_id, prompt):
        self.sent.append((user_id, prompt))
        return {"success": True}

    @property
    def texts(self):
        return [prompt.text for _, prompt in self.sent]


@pytest.fixture
def records():
    return InMemoryRecordStore()


@pytest.fixture
def sessions():
    return InMemorySessionStore(ttl_seconds=3600)


@pytest.fixture
def orders():
    return InMemoryOrderStore()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def engine(records, sessions, orders):
    return TransitionEngine(records, sessions, orders)


@pytest.fixture
def dialogue_router(engine, transport):
    return DialogueRouter(engine, transport)


@pytest.fixture
def make_message():
    """Builds an English-speaking private-chat message from user 1001."""
    def _make(text=None, contact=None, user_id=1001):
        return IncomingMessage(
            user_id=user_id,
            chat_id=user_id,
            text=text,
            contact=contact,
            is_restart_command=is_restart_command(text),
            language_code="en",
        )
    return _make


@pytest.fixture
def own_contact():
    def _make(phone="+100000", user_id=1001):
        return ContactPayload(phone_number=phone, user_id=user_id, first_name="Alice")
    return _make


@pytest.fixture
def send(engine, make_message):
    """Processes a text message through the engine and returns the outcome."""
    async def _send(text=None, contact=None, user_id=1001):
        return await engine.process(make_message(text, contact, user_id))
    return _send
