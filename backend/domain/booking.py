"""Read-only joined view of a parked vehicle and its slot."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .slot import SlotStatus
from .vehicle import SessionState, VehicleCategory


@dataclass(frozen=True)
class BookingView:
    registration_number: str
    owner_name: str
    phone_number: str
    vehicle_category: VehicleCategory
    zone: str
    slot: str
    status: SlotStatus
    session_state: SessionState
    entry_time: datetime
    exit_time: Optional[datetime] = None
