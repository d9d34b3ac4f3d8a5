"""In-memory data store intended for tests and the prototype stage."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from copy import copy
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from domain.billing_record import BillingRecord, BillStatus
from domain.receipt import Receipt
from domain.slot import Slot, SlotStatus
from domain.vehicle import VehicleSession
from .repository import ParkingRepository


class InMemoryParkingRepository(ParkingRepository):
    """Keeps copies of every record so callers only change state through ``save_*``."""

    def __init__(self):
        self._lock = threading.RLock()
        self._in_transaction = False
        self._slots: Dict[Tuple[str, str], Slot] = {}
        self._sessions: Dict[str, VehicleSession] = {}
        self._records: Dict[str, BillingRecord] = {}
        self._receipts: Dict[str, Receipt] = {}

    # Unit of work ---------------------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            if self._in_transaction:
                yield
                return
            snapshot = self._snapshot()
            self._in_transaction = True
            try:
                yield
            except BaseException:
                self._slots, self._sessions, self._records, self._receipts = snapshot
                raise
            finally:
                self._in_transaction = False

    def _snapshot(self):
        return tuple(
            {key: copy(value) for key, value in table.items()}
            for table in (self._slots, self._sessions, self._records, self._receipts)
        )

    # Slots ----------------------------------------------------------------
    def count_slots(self) -> int:
        return len(self._slots)

    def add_slots(self, slots: Iterable[Slot]) -> None:
        with self._lock:
            for slot in slots:
                self._slots[slot.key] = copy(slot)

    def get_slot(self, zone: str, slot: str) -> Optional[Slot]:
        found = self._slots.get((zone, slot))
        return copy(found) if found else None

    def find_slot_by_occupant(self, registration: str) -> Optional[Slot]:
        for slot in self._slots.values():
            if slot.occupant_registration == registration:
                return copy(slot)
        return None

    def list_slots(self) -> List[Slot]:
        return [copy(slot) for slot in self._slots.values()]

    def occupy_slot(self, zone: str, slot: str, registration: str) -> bool:
        with self._lock:
            stored = self._slots.get((zone, slot))
            if not stored or stored.status != SlotStatus.AVAILABLE:
                return False
            stored.mark_occupied(registration)
            return True

    def save_slot(self, slot: Slot) -> None:
        with self._lock:
            self._slots[slot.key] = copy(slot)

    # Sessions -------------------------------------------------------------
    def get_session(self, registration: str) -> Optional[VehicleSession]:
        found = self._sessions.get(registration)
        return copy(found) if found else None

    def add_session(self, session: VehicleSession) -> None:
        self._sessions[session.registration_number] = copy(session)

    def save_session(self, session: VehicleSession) -> None:
        self._sessions[session.registration_number] = copy(session)

    def remove_session(self, registration: str) -> None:
        self._sessions.pop(registration, None)

    def list_sessions(self) -> List[VehicleSession]:
        return [copy(session) for session in self._sessions.values()]

    # Billing history ------------------------------------------------------
    def add_billing_record(self, record: BillingRecord) -> None:
        self._records[record.record_id] = copy(record)

    def update_billing_record(self, record: BillingRecord) -> None:
        self._records[record.record_id] = copy(record)

    def list_billing_records(self) -> List[BillingRecord]:
        records = sorted(self._records.values(), key=lambda rec: rec.exit_time)
        return [copy(rec) for rec in records]

    def list_billing_records_for(
        self, registration: str, status: Optional[BillStatus] = None
    ) -> List[BillingRecord]:
        return [
            rec
            for rec in self.list_billing_records()
            if rec.registration_number == registration and (status is None or rec.status == status)
        ]

    # Receipts -------------------------------------------------------------
    def add_receipt(self, receipt: Receipt) -> None:
        self._receipts[receipt.receipt_id] = copy(receipt)

    def update_receipt(self, receipt: Receipt) -> None:
        self._receipts[receipt.receipt_id] = copy(receipt)

    def list_receipts_for(self, registration: str) -> List[Receipt]:
        receipts = [r for r in self._receipts.values() if r.registration_number == registration]
        receipts.sort(key=lambda r: r.receipt_date)
        return [copy(r) for r in receipts]

    def get_receipt_for_record(self, record_id: str) -> Optional[Receipt]:
        for receipt in self._receipts.values():
            if receipt.billing_record_id == record_id:
                return copy(receipt)
        return None
