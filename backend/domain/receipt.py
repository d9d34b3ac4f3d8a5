"""Receipt mirroring a billing record for the driver."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .billing_record import BillStatus
from .vehicle import VehicleCategory


@dataclass
class Receipt:
    receipt_id: str
    registration_number: str
    owner_name: str
    phone_number: str
    vehicle_category: VehicleCategory
    duration_minutes: int
    amount: float
    receipt_date: datetime
    status: BillStatus = BillStatus.UNPAID
    billing_record_id: Optional[str] = None
