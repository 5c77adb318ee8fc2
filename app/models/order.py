"""
app/models/order.py

Purpose: Shipment order document model

- Cargo route, description and price
- Client contact details
- Idempotency key guarding against duplicate creation
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class Cargo(BaseModel):
    from_location: str
    to_location: str = ""
    description: str = ""
    price: int = Field(default=0, ge=0)


class ContactInfo(BaseModel):
    phone_number: Optional[str] = None
    contact_name: Optional[str] = None


class Order(BaseModel):
    order_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    client_id: int
    cargo: Cargo
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    status: str = "active"
    idempotency_key: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def summary(self) -> str:
        route = self.cargo.from_location
        if self.cargo.to_location:
            route = f"{route} → {self.cargo.to_location}"
        if self.cargo.price:
            route = f"{route} ({self.cargo.price})"
        return route

    def to_document(self) -> Dict[str, Any]:
        document = self.model_dump(mode="json")
        document["created_at"] = self.created_at
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Order":
        document = {key: value for key, value in document.items() if key != "_id"}
        return cls.model_validate(document)
