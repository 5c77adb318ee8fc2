"""
app/flow/handlers/first_order.py

Handles: first_order (from_location -> to_location -> description -> price)

- Values accumulate in the session until the price step
- Destination, description and price can be skipped
- Builds the order once every step is done
"""

from typing import Any, Dict

from app.flow.handlers.common import StepContext, StepResult, reject
from app.flow.states import OrderStep
from app.models.order import Cargo, ContactInfo, Order
from app.models.user import UserRecord
from app.services.order_service import first_order_key
from utils.i18n import skip_label
from utils.validation_utils import clean_text, is_valid_price, parse_integer

REQUIRED_ORDER_FIELDS = ("from_location",)


def handle_first_order(context: StepContext) -> StepResult:
    step = context.position.step
    data = dict(context.data)
    skipped = context.text == skip_label(context.locale)

    if step == OrderStep.FROM_LOCATION:
        location = clean_text(context.text, max_length=200)
        if location is None:
            return reject(context, "errors.invalid_input")
        data["from_location"] = location

    elif step in (OrderStep.TO_LOCATION, OrderStep.DESCRIPTION):
        value = "" if skipped else clean_text(context.text)
        if value is None:
            return reject(context, "errors.invalid_input")
        data[step.value] = value

    elif step == OrderStep.PRICE:
        if skipped:
            data["price"] = 0
        else:
            price = parse_integer(context.text)
            if price is None or not is_valid_price(price):
                return reject(context, "orders.invalid_price")
            data["price"] = price

    return StepResult(data=data)


def build_first_order(record: UserRecord, data: Dict[str, Any]) -> Order:
    """
    Creates the registration order from accumulated session data.
    Skipped fields become empty strings / zero.
    """
    return Order(
        client_id=record.user_id,
        cargo=Cargo(
            from_location=data["from_location"],
            to_location=data.get("to_location") or "",
            description=data.get("description") or "",
            price=data.get("price") or 0,
        ),
        contact_info=ContactInfo(
            phone_number=record.profile.phone_number,
            contact_name=record.full_name or None,
        ),
        idempotency_key=first_order_key(record.user_id),
    )
