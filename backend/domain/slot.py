"""Parking slot domain model (fixed A-E x 1..10 grid)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class SlotStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"


ZONES = ("A", "B", "C", "D", "E")
SLOTS_PER_ZONE = 10


@dataclass
class Slot:
    zone: str
    slot: str
    status: SlotStatus = SlotStatus.AVAILABLE
    occupant_registration: Optional[str] = None

    @property
    def key(self) -> tuple:
        return (self.zone, self.slot)

    @property
    def is_available(self) -> bool:
        return self.status == SlotStatus.AVAILABLE

    def mark_occupied(self, registration: str) -> None:
        """Available -> Occupied. Callers must check availability first."""
        if self.status != SlotStatus.AVAILABLE:
            raise RuntimeError(f"Slot {self.slot} is not available")
        self.status = SlotStatus.OCCUPIED
        self.occupant_registration = registration

    def mark_available(self) -> None:
        self.status = SlotStatus.AVAILABLE
        self.occupant_registration = None


def normalize_zone(zone: str) -> str:
    return (zone or "").strip().upper()


def normalize_label(label: str) -> str:
    return (label or "").strip().upper()


def build_grid() -> List[Slot]:
    """All slots of the lot, zone by zone, every one Available."""
    return [
        Slot(zone=zone, slot=f"{zone}{number}")
        for zone in ZONES
        for number in range(1, SLOTS_PER_ZONE + 1)
    ]
