"""
app/flow/handlers/first_offer.py

Handles: first_offer (vehicle_model -> vehicle_category -> current_location)

- Values accumulate in the session
- Written to the record's driver_info once the last step is done
"""

from typing import Any, Dict

from app.flow.handlers.common import StepContext, StepResult, reject
from app.flow.states import OfferStep
from app.models.user import DriverInfo, UserRecord, VehicleCategory
from utils.i18n import category_labels
from utils.validation_utils import clean_text

REQUIRED_OFFER_FIELDS = ("vehicle_model", "vehicle_category", "current_location")


def handle_first_offer(context: StepContext) -> StepResult:
    step = context.position.step
    data = dict(context.data)

    if step == OfferStep.VEHICLE_MODEL:
        model = clean_text(context.text, max_length=100)
        if model is None:
            return reject(context, "errors.invalid_input")
        data["vehicle_model"] = model

    elif step == OfferStep.VEHICLE_CATEGORY:
        category = category_labels(context.locale).get(context.text)
        if category is None:
            return reject(context, "errors.invalid_input")
        data["vehicle_category"] = category.value

    elif step == OfferStep.CURRENT_LOCATION:
        location = clean_text(context.text, max_length=200)
        if location is None:
            return reject(context, "errors.invalid_input")
        data["current_location"] = location

    return StepResult(data=data)


def apply_driver_info(record: UserRecord, data: Dict[str, Any]) -> UserRecord:
    driver_info = DriverInfo(
        vehicle_model=data["vehicle_model"],
        vehicle_category=VehicleCategory(data["vehicle_category"]),
        current_location=data["current_location"],
    )
    return record.model_copy(update={"driver_info": driver_info})
