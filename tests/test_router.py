import pytest

from app.core.exceptions import StoreError
from app.models.user import Role, UserProfile, UserRecord
from utils.i18n import t

USER_ID = 1001


async def failing(*args, **kwargs):
    raise StoreError("store unavailable")


async def exploding(*args, **kwargs):
    raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_prompts_are_sent_to_chat(dialogue_router, transport, make_message):
    consumed = await dialogue_router.handle(make_message("/start"))

    assert consumed
    assert transport.texts == [t("en", "start.welcome"), t("en", "start.choose_role")]
    assert all(chat_id == USER_ID for chat_id, _ in transport.sent)


@pytest.mark.asyncio
async def test_store_failure_sends_generic_error(dialogue_router, transport, records, sessions, make_message, monkeypatch):
    await dialogue_router.handle(make_message("/start"))
    transport.sent.clear()
    monkeypatch.setattr(records, "save", failing)

    consumed = await dialogue_router.handle(make_message("Client"))

    assert consumed
    assert transport.texts == [t("en", "errors.general")]
    assert (await sessions.get(USER_ID)).current_state.value == "role_selection"


@pytest.mark.asyncio
async def test_unexpected_error_sends_generic_error(dialogue_router, transport, engine, make_message, monkeypatch):
    monkeypatch.setattr(engine, "process", exploding)

    consumed = await dialogue_router.handle(make_message("hello"))

    assert consumed
    assert transport.texts == [t("en", "errors.general")]


@pytest.mark.asyncio
async def test_registered_user_is_not_consumed(dialogue_router, transport, records, make_message):
    profile = UserProfile(role=Role.CLIENT, first_name="Alice", last_name="Smith", birth_year=1990, phone_number="+1")
    await records.save(UserRecord(user_id=USER_ID, profile=profile, language="en", registration_completed=True))

    consumed = await dialogue_router.handle(make_message("hello"))

    assert not consumed
    assert transport.sent == []


@pytest.mark.asyncio
async def test_welcome_back_uses_first_name(dialogue_router, transport, records, make_message):
    profile = UserProfile(role=Role.CLIENT, first_name="Alice", last_name="Smith", birth_year=1990, phone_number="+1")
    await records.save(UserRecord(user_id=USER_ID, profile=profile, language="en", registration_completed=True))

    await dialogue_router.welcome_back(make_message("/start"))

    assert transport.texts == [t("en", "start.welcome_back", name="Alice")]
