"""Billing engine: duration, fee and the record pair written at exit."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple
from uuid import uuid4

from domain.billing_record import BillingRecord, BillStatus
from domain.errors import InvalidInterval
from domain.rate_table import hourly_rate
from domain.receipt import Receipt
from domain.slot import Slot
from domain.vehicle import VehicleCategory, VehicleSession


@dataclass(frozen=True)
class FeeQuote:
    duration_minutes: int
    amount: float


def format_amount(amount: float) -> float:
    """Round for display only; stored amounts stay unrounded."""
    return round(amount, 2)


class BillingEngine:
    """Pure fee computation. Nothing here touches the repository."""

    def rate(self, category: "str | VehicleCategory") -> float:
        return hourly_rate(category)

    def compute_fee(
        self,
        entry_time: datetime,
        exit_time: datetime,
        category: "str | VehicleCategory",
    ) -> FeeQuote:
        seconds = (exit_time - entry_time).total_seconds()
        if seconds < 0:
            raise InvalidInterval(entry_time, exit_time)
        duration_minutes = int(seconds // 60)
        amount = (duration_minutes / 60.0) * self.rate(category)
        return FeeQuote(duration_minutes=duration_minutes, amount=amount)

    def build_records(
        self, session: VehicleSession, slot: Slot, exit_time: datetime
    ) -> Tuple[BillingRecord, Receipt]:
        quote = self.compute_fee(session.entry_time, exit_time, session.vehicle_category)
        record = BillingRecord(
            record_id=str(uuid4()),
            registration_number=session.registration_number,
            owner_name=session.owner_name,
            phone_number=session.phone_number,
            vehicle_category=session.vehicle_category,
            entry_time=session.entry_time,
            exit_time=exit_time,
            duration_minutes=quote.duration_minutes,
            amount=quote.amount,
            zone=slot.zone,
            slot=slot.slot,
            status=BillStatus.UNPAID,
        )
        receipt = Receipt(
            receipt_id=str(uuid4()),
            registration_number=session.registration_number,
            owner_name=session.owner_name,
            phone_number=session.phone_number,
            vehicle_category=session.vehicle_category,
            duration_minutes=quote.duration_minutes,
            amount=quote.amount,
            receipt_date=exit_time,
            status=BillStatus.UNPAID,
            billing_record_id=record.record_id,
        )
        return record, receipt
