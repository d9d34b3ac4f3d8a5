"""Vehicle session model: one registration parked on the grid."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .errors import UnknownVehicleCategory


class VehicleCategory(str, Enum):
    CAR = "car"
    MOTORCYCLE = "motorcycle"
    SCOOTER = "scooter"
    VAN = "van"
    BUS = "bus"

    @classmethod
    def parse(cls, raw: "str | VehicleCategory") -> "VehicleCategory":
        if isinstance(raw, cls):
            return raw
        value = (raw or "").strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            raise UnknownVehicleCategory(raw) from exc


class SessionState(str, Enum):
    ACTIVE = "Active"
    BILLED = "Billed"


@dataclass
class VehicleInfo:
    """What the driver hands over at the gate."""

    registration_number: str
    owner_name: str
    phone_number: str
    vehicle_category: VehicleCategory


@dataclass
class VehicleSession:
    registration_number: str
    owner_name: str
    phone_number: str
    vehicle_category: VehicleCategory
    entry_time: datetime
    state: SessionState = SessionState.ACTIVE
    billed_at: Optional[datetime] = None

    def mark_billed(self, when: datetime) -> None:
        self.state = SessionState.BILLED
        self.billed_at = when
