"""History records produced when a vehicle exits."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .vehicle import VehicleCategory


class BillStatus(str, Enum):
    UNPAID = "Unpaid"
    PAID = "Paid"


@dataclass
class BillingRecord:
    """Snapshot of one stay taken at exit time; only ``status``/``paid_at`` change afterwards."""

    record_id: str
    registration_number: str
    owner_name: str
    phone_number: str
    vehicle_category: VehicleCategory
    entry_time: datetime
    exit_time: datetime
    duration_minutes: int
    amount: float
    zone: str
    slot: str
    status: BillStatus = BillStatus.UNPAID
    paid_at: Optional[datetime] = None

    def mark_paid(self, when: datetime) -> None:
        self.status = BillStatus.PAID
        self.paid_at = when
