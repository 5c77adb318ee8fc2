"""
app/models/user.py

Purpose: User document model

- Telegram user id
- Role and basic profile (name, birth year, phone)
- Driver vehicle details
- Registration flag and language
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    UNSET = "unset"
    CLIENT = "client"
    DRIVER = "driver"


class VehicleCategory(str, Enum):
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    SPECIAL = "special"


class UserProfile(BaseModel):
    role: Role = Role.UNSET
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_year: Optional[int] = None
    phone_number: Optional[str] = None


class DriverInfo(BaseModel):
    vehicle_model: Optional[str] = None
    vehicle_category: Optional[VehicleCategory] = None
    current_location: Optional[str] = None


class UserRecord(BaseModel):
    """
    Durable per-user record; the ground truth for what the dialogue has collected.

    Invariant: registration_completed implies role, first/last name and phone
    are present, plus every driver_info field for drivers. Stored documents
    that break it still load; `can_complete_registration` is checked before the
    flag is ever set.
    """
    user_id: int
    profile: UserProfile = Field(default_factory=UserProfile)
    driver_info: DriverInfo = Field(default_factory=DriverInfo)
    language: str = "ru"
    registration_completed: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_driver(self) -> bool:
        return self.profile.role == Role.DRIVER

    @property
    def has_role(self) -> bool:
        return self.profile.role != Role.UNSET

    @property
    def full_name(self) -> str:
        return f"{self.profile.first_name or ''} {self.profile.last_name or ''}".strip()

    def missing_driver_fields(self) -> List[str]:
        info = self.driver_info
        return [
            name for name, value in (
                ("vehicle_model", info.vehicle_model),
                ("vehicle_category", info.vehicle_category),
                ("current_location", info.current_location),
            )
            if not value
        ]

    def can_complete_registration(self) -> bool:
        profile = self.profile
        if not (self.has_role and profile.first_name and profile.last_name and profile.phone_number):
            return False
        if self.is_driver and self.missing_driver_fields():
            return False
        return True

    def to_document(self) -> Dict[str, Any]:
        """Mongo document form; enums stored as plain strings."""
        document = self.model_dump(mode="json")
        document["created_at"] = self.created_at
        document["updated_at"] = self.updated_at
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "UserRecord":
        document = {key: value for key, value in document.items() if key != "_id"}
        return cls.model_validate(document)
