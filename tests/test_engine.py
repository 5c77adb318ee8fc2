import pytest

from app.core.exceptions import DialogueError, StoreError
from app.flow.engine import TransitionEngine
from app.flow.handlers.role_selection import handle_role_selection
from app.flow.prompts import AffordanceKind
from app.flow.states import (
    BasicInfoStep,
    DialoguePosition,
    DialogueState,
    OfferStep,
    OrderStep,
)
from app.models.session import SessionState
from app.models.user import Role, UserProfile, UserRecord, VehicleCategory
from utils.i18n import t

USER_ID = 1001


def registered_profile(role):
    return UserProfile(
        role=role,
        first_name="Alice",
        last_name="Smith",
        birth_year=1990,
        phone_number="+100000",
    )


async def seed(records, role=Role.CLIENT, completed=False, **fields):
    record = UserRecord(
        user_id=USER_ID,
        profile=registered_profile(role),
        language="en",
        registration_completed=completed,
        **fields
    )
    return await records.save(record)


def position(state, step=None):
    return DialoguePosition(state, step)


async def failing(*args, **kwargs):
    raise StoreError("store unavailable")


@pytest.mark.asyncio
async def test_client_registration_flow(send, records, sessions, orders, own_contact):
    outcome = await send("hello")
    assert outcome.consumed
    assert outcome.position == position(DialogueState.ROLE_SELECTION)
    assert outcome.prompts[-1].affordance.kind == AffordanceKind.FIXED_CHOICES
    assert outcome.prompts[-1].affordance.choices == ["Client", "Driver"]

    outcome = await send("Client")
    assert outcome.position == position(DialogueState.BASIC_INFO, BasicInfoStep.FIRST_NAME)
    assert (await records.get(USER_ID)).profile.role == Role.CLIENT

    expected = [
        ("Alice", BasicInfoStep.LAST_NAME),
        ("Smith", BasicInfoStep.BIRTH_YEAR),
        ("1990", BasicInfoStep.PHONE),
    ]
    for text, step in expected:
        outcome = await send(text)
        assert outcome.position == position(DialogueState.BASIC_INFO, step)

    assert outcome.prompts[-1].affordance.kind == AffordanceKind.REQUEST_CONTACT

    outcome = await send(contact=own_contact())
    assert outcome.position == position(DialogueState.FIRST_ORDER, OrderStep.FROM_LOCATION)

    record = await records.get(USER_ID)
    assert record.profile.first_name == "Alice"
    assert record.profile.last_name == "Smith"
    assert record.profile.birth_year == 1990
    assert record.profile.phone_number == "+100000"

    outcome = await send("CityA")
    assert outcome.position == position(DialogueState.FIRST_ORDER, OrderStep.TO_LOCATION)
    assert outcome.prompts[-1].affordance.choices == ["Skip"]

    for _ in range(3):
        outcome = await send("Skip")

    assert outcome.position == position(DialogueState.COMPLETED)
    assert len(orders.orders) == 1

    cargo = orders.orders[0].cargo
    assert cargo.from_location == "CityA"
    assert cargo.to_location == ""
    assert cargo.description == ""
    assert cargo.price == 0
    assert orders.orders[0].contact_info.phone_number == "+100000"

    assert (await records.get(USER_ID)).registration_completed
    assert await sessions.get(USER_ID) is None


@pytest.mark.asyncio
async def test_every_basic_info_prompt_is_asked_once(send, own_contact):
    prompts = []
    for text in ("/start", "Driver", "Alice", "Smith", "1990"):
        prompts.extend(p.text for p in (await send(text)).prompts)
    prompts.extend(p.text for p in (await send(contact=own_contact())).prompts)

    for key in (
        "registration.enter_first_name",
        "registration.enter_last_name",
        "registration.enter_birth_year",
        "registration.share_contact",
        "registration.enter_vehicle_model",
    ):
        assert prompts.count(t("en", key)) == 1


@pytest.mark.asyncio
async def test_stale_driver_session_recovers_to_first_offer(send, records):
    await seed(records, role=Role.DRIVER)

    outcome = await send("/start")

    assert outcome.consumed
    assert outcome.position == position(DialogueState.FIRST_OFFER, OfferStep.VEHICLE_MODEL)


@pytest.mark.asyncio
async def test_invalid_input_after_expiry_reprompts_derived_step(send, records, sessions):
    await seed(records, role=Role.DRIVER)
    await sessions.set(USER_ID, SessionState.at(USER_ID, position(DialogueState.FIRST_OFFER, OfferStep.CURRENT_LOCATION)))
    sessions.expire(USER_ID)

    outcome = await send("x")

    assert outcome.position == position(DialogueState.FIRST_OFFER, OfferStep.VEHICLE_MODEL)
    assert outcome.prompts[0].text == t("en", "errors.invalid_input")
    assert (await sessions.get(USER_ID)).position == outcome.position


@pytest.mark.asyncio
async def test_driver_registration_completes(send, records, sessions):
    await seed(records, role=Role.DRIVER)

    await send("Volvo FH")
    outcome = await send("Heavy (over 5 t)")
    assert outcome.position == position(DialogueState.FIRST_OFFER, OfferStep.CURRENT_LOCATION)

    outcome = await send("Tashkent")
    assert outcome.position == position(DialogueState.COMPLETED)
    assert outcome.prompts[-1].text == t("en", "registration.completed")
    assert outcome.prompts[-1].affordance.kind == AffordanceKind.REMOVE

    record = await records.get(USER_ID)
    assert record.registration_completed
    assert record.driver_info.vehicle_model == "Volvo FH"
    assert record.driver_info.vehicle_category == VehicleCategory.HEAVY
    assert record.driver_info.current_location == "Tashkent"
    assert await sessions.get(USER_ID) is None


@pytest.mark.asyncio
async def test_registered_user_passes_through(send, records, sessions):
    await seed(records, completed=True)
    await sessions.set(USER_ID, SessionState.at(USER_ID, position(DialogueState.FIRST_ORDER, OrderStep.PRICE)))

    outcome = await send("hello")

    assert not outcome.consumed
    assert outcome.prompts == []
    assert await sessions.get(USER_ID) is None


@pytest.mark.asyncio
async def test_session_in_wrong_state_is_reset(send, sessions):
    stale = SessionState.at(
        USER_ID,
        position(DialogueState.FIRST_ORDER, OrderStep.PRICE),
        {"from_location": "CityA"}
    )
    await sessions.set(USER_ID, stale)

    outcome = await send("x")

    assert outcome.position == position(DialogueState.ROLE_SELECTION)
    session = await sessions.get(USER_ID)
    assert session.current_state == DialogueState.ROLE_SELECTION
    assert session.data == {}


@pytest.mark.asyncio
async def test_session_step_ahead_of_record_is_corrected(send, records, sessions):
    record = UserRecord(user_id=USER_ID, profile=UserProfile(role=Role.CLIENT, first_name="Alice"), language="en")
    await records.save(record)
    await sessions.set(USER_ID, SessionState.at(USER_ID, position(DialogueState.BASIC_INFO, BasicInfoStep.PHONE)))

    outcome = await send("x")

    assert outcome.position == position(DialogueState.BASIC_INFO, BasicInfoStep.LAST_NAME)
    assert (await sessions.get(USER_ID)).current_step == BasicInfoStep.LAST_NAME


@pytest.mark.asyncio
async def test_restart_keeps_collected_order_data(send, records, sessions):
    await seed(records)
    await sessions.set(
        USER_ID,
        SessionState.at(USER_ID, position(DialogueState.FIRST_ORDER, OrderStep.PRICE), {"from_location": "CityA"})
    )

    outcome = await send("/start")

    assert outcome.position == position(DialogueState.FIRST_ORDER, OrderStep.FROM_LOCATION)
    assert outcome.prompts[0].text == t("en", "start.welcome")
    assert (await sessions.get(USER_ID)).data == {"from_location": "CityA"}


@pytest.mark.asyncio
async def test_restart_after_state_change_resets_data(send, records, sessions):
    await seed(records)
    await sessions.set(
        USER_ID,
        SessionState.at(USER_ID, position(DialogueState.FIRST_OFFER, OfferStep.CURRENT_LOCATION), {"vehicle_model": "Volvo"})
    )

    outcome = await send("/start")

    assert outcome.position == position(DialogueState.FIRST_ORDER, OrderStep.FROM_LOCATION)
    assert (await sessions.get(USER_ID)).data == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("year", ["1850", "2024", "3000"])
async def test_birth_year_out_of_range_reprompts(send, records, year):
    record = UserRecord(
        user_id=USER_ID,
        profile=UserProfile(role=Role.CLIENT, first_name="Alice", last_name="Smith"),
        language="en",
    )
    await records.save(record)

    outcome = await send(year)

    assert outcome.position == position(DialogueState.BASIC_INFO, BasicInfoStep.BIRTH_YEAR)
    assert outcome.prompts[0].text == t("en", "registration.invalid_year")
    assert (await records.get(USER_ID)).profile.birth_year is None


@pytest.mark.asyncio
async def test_contact_notices(send, records, own_contact):
    record = UserRecord(
        user_id=USER_ID,
        profile=UserProfile(role=Role.CLIENT, first_name="Alice", last_name="Smith", birth_year=1990),
        language="en",
    )
    await records.save(record)

    outcome = await send("+100000")
    assert outcome.prompts[0].text == t("en", "registration.share_contact_please")

    outcome = await send(contact=own_contact(user_id=2002))
    assert outcome.prompts[0].text == t("en", "registration.share_your_own_contact")
    assert outcome.position == position(DialogueState.BASIC_INFO, BasicInfoStep.PHONE)
    assert (await records.get(USER_ID)).profile.phone_number is None


@pytest.mark.asyncio
@pytest.mark.parametrize("price", ["-5", "100000000000000000000"])
async def test_out_of_range_price_reprompts(send, records, sessions, orders, price):
    await seed(records)
    await sessions.set(
        USER_ID,
        SessionState.at(USER_ID, position(DialogueState.FIRST_ORDER, OrderStep.PRICE), {"from_location": "CityA"})
    )

    outcome = await send(price)

    assert outcome.position == position(DialogueState.FIRST_ORDER, OrderStep.PRICE)
    assert outcome.prompts[0].text == t("en", "orders.invalid_price")
    assert orders.orders == []
    assert (await sessions.get(USER_ID)).data == {"from_location": "CityA"}


@pytest.mark.asyncio
async def test_lost_order_data_restarts_subflow(send, records, sessions, orders):
    await seed(records)
    await sessions.set(USER_ID, SessionState.at(USER_ID, position(DialogueState.FIRST_ORDER, OrderStep.PRICE)))

    outcome = await send("Skip")

    assert outcome.position == position(DialogueState.FIRST_ORDER, OrderStep.FROM_LOCATION)
    assert orders.orders == []
    assert not (await records.get(USER_ID)).registration_completed


@pytest.mark.asyncio
async def test_record_write_failure_keeps_session_step(send, records, sessions, monkeypatch):
    record = UserRecord(user_id=USER_ID, profile=UserProfile(role=Role.CLIENT, first_name="Alice"), language="en")
    await records.save(record)
    await sessions.set(USER_ID, SessionState.at(USER_ID, position(DialogueState.BASIC_INFO, BasicInfoStep.LAST_NAME)))

    monkeypatch.setattr(records, "save", failing)

    with pytest.raises(StoreError):
        await send("Smith")

    assert (await sessions.get(USER_ID)).current_step == BasicInfoStep.LAST_NAME
    assert (await records.get(USER_ID)).profile.last_name is None


@pytest.mark.asyncio
async def test_order_write_failure_leaves_registration_open(send, records, sessions, orders, monkeypatch):
    await seed(records)
    await sessions.set(
        USER_ID,
        SessionState.at(USER_ID, position(DialogueState.FIRST_ORDER, OrderStep.PRICE), {"from_location": "CityA"})
    )
    monkeypatch.setattr(orders, "create", failing)

    with pytest.raises(StoreError):
        await send("100")

    assert not (await records.get(USER_ID)).registration_completed
    session = await sessions.get(USER_ID)
    assert session.current_step == OrderStep.PRICE
    assert session.data == {"from_location": "CityA"}


@pytest.mark.asyncio
async def test_redelivered_price_creates_one_order(send, records, sessions, orders, monkeypatch):
    await seed(records)
    await sessions.set(
        USER_ID,
        SessionState.at(USER_ID, position(DialogueState.FIRST_ORDER, OrderStep.PRICE), {"from_location": "CityA"})
    )

    save = records.save
    monkeypatch.setattr(records, "save", failing)
    with pytest.raises(StoreError):
        await send("100")
    assert len(orders.orders) == 1

    monkeypatch.setattr(records, "save", save)
    outcome = await send("100")

    assert outcome.position == position(DialogueState.COMPLETED)
    assert len(orders.orders) == 1
    assert (await records.get(USER_ID)).registration_completed


def test_missing_handler_fails_construction(records, sessions, orders):
    with pytest.raises(DialogueError):
        TransitionEngine(
            records,
            sessions,
            orders,
            handlers={DialogueState.ROLE_SELECTION: handle_role_selection}
        )


@pytest.mark.asyncio
async def test_bracket_only_name_is_stored_verbatim(send, records):
    await send("Client")

    outcome = await send("[]")

    assert outcome.position == position(DialogueState.BASIC_INFO, BasicInfoStep.LAST_NAME)
    assert (await records.get(USER_ID)).profile.first_name == "[]"


@pytest.mark.asyncio
async def test_bracket_only_location_completes_order(send, records, orders):
    await seed(records)

    await send("<>")
    for _ in range(3):
        outcome = await send("Skip")

    assert outcome.position == position(DialogueState.COMPLETED)
    assert len(orders.orders) == 1
    assert orders.orders[0].cargo.from_location == "<>"


@pytest.mark.asyncio
async def test_bracket_only_vehicle_model_completes_offer(send, records):
    await seed(records, role=Role.DRIVER)

    await send("<>")
    await send("Heavy (over 5 t)")
    outcome = await send("Tashkent")

    assert outcome.position == position(DialogueState.COMPLETED)
    assert (await records.get(USER_ID)).driver_info.vehicle_model == "<>"
