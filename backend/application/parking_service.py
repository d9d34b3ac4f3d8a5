"""Parking lifecycle coordinator: register -> exit/bill -> pay/release.

This is the only entry point the HTTP layer talks to. Every mutating call
and every multi-table read runs under one re-entrant lock, so a register
cannot race another register onto the same slot and a pay cannot settle
the same bill twice. The store's own compare-and-set on ``occupy_slot``
covers writers in other processes sharing the SQLite file. Each multi-row
write runs inside ``repo.transaction()`` so a failing store call leaves
nothing half-written.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from application.billing_service import BillingEngine, format_amount
from application.session_ledger import SessionLedger
from application.slot_registry import SlotRegistry
from domain.billing_record import BillingRecord, BillStatus
from domain.booking import BookingView
from domain.errors import (
    ConsistencyError,
    DuplicateRegistration,
    MultipleUnpaidBills,
    NoUnpaidBill,
    ParkingError,
    ReceiptNotFound,
    SlotNotFound,
)
from domain.receipt import Receipt
from domain.slot import Slot, SlotStatus, ZONES
from domain.vehicle import VehicleCategory, VehicleInfo, VehicleSession

if TYPE_CHECKING:
    from infrastructure.receipt_renderer import ReceiptRenderer
    from infrastructure.repository import ParkingRepository

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ParkingService:
    def __init__(
        self,
        repository: "ParkingRepository",
        billing_engine: Optional[BillingEngine] = None,
        receipt_renderer: Optional["ReceiptRenderer"] = None,
        clock: Clock = _utcnow,
    ):
        self.repo = repository
        self.slots = SlotRegistry(repository)
        self.sessions = SessionLedger(repository)
        self.billing = billing_engine or BillingEngine()
        self.receipt_renderer = receipt_renderer
        self.clock = clock
        self._lock = threading.RLock()

    def acquire_lock(self) -> None:
        self._lock.acquire()

    def release_lock(self) -> None:
        self._lock.release()

    # Lifecycle ------------------------------------------------------------
    def initialize_parking(self) -> str:
        with self._lock:
            try:
                self.slots.initialize()
            except ParkingError as exc:
                logger.warning("Initialize rejected: %s", exc.message)
                raise
        return "Parking lot initialized successfully."

    def register_vehicle(
        self,
        registration_number: str,
        owner_name: str,
        phone_number: str,
        vehicle_category: "str | VehicleCategory",
        zone: str,
        slot: str,
    ) -> str:
        with self._lock:
            try:
                vehicle = VehicleInfo(
                    registration_number=registration_number,
                    owner_name=owner_name,
                    phone_number=phone_number,
                    vehicle_category=VehicleCategory.parse(vehicle_category),
                )
                if self.sessions.find(registration_number):
                    # checked before the slot so a taken slot never masks a duplicate
                    raise DuplicateRegistration(registration_number)
                target = self.slots.find_available(zone, slot)
                with self.repo.transaction():
                    self.sessions.open(vehicle, self.clock())
                    self.slots.occupy(target, registration_number)
            except ParkingError as exc:
                self._log_failure("register", registration_number, exc)
                raise
        logger.info(
            "Registered %s (%s) at zone %s slot %s",
            registration_number,
            vehicle.vehicle_category.value,
            target.zone,
            target.slot,
        )
        return f"Vehicle registered and assigned to Zone: {zone} and slot {slot}"

    def generate_bill(self, registration_number: str) -> str:
        with self._lock:
            try:
                session = self.sessions.get_active(registration_number)
                slot = self.slots.find_by_occupant(registration_number)
                if not slot or slot.status != SlotStatus.OCCUPIED:
                    raise SlotNotFound(registration_number)
                exit_time = self.clock()
                record, receipt = self.billing.build_records(session, slot, exit_time)
                with self.repo.transaction():
                    self.repo.add_billing_record(record)
                    self.repo.add_receipt(receipt)
                    self.sessions.mark_billed(session, exit_time)
            except ParkingError as exc:
                self._log_failure("bill", registration_number, exc)
                raise
        logger.info(
            "Billed %s: %d min, Rs %.2f",
            registration_number,
            record.duration_minutes,
            record.amount,
        )
        return (
            f"Bill generated for {record.vehicle_category.value}: Rs {format_amount(record.amount)}. "
            "Please pay to release your vehicle."
        )

    def pay_bill(self, registration_number: str) -> str:
        with self._lock:
            try:
                record = self._single_unpaid_record(registration_number)
                slot = self.slots.find_by_occupant(registration_number)
                if not slot or slot.status != SlotStatus.OCCUPIED:
                    raise SlotNotFound(registration_number)
                record.mark_paid(self.clock())
                with self.repo.transaction():
                    self.repo.update_billing_record(record)
                    receipt = self.repo.get_receipt_for_record(record.record_id)
                    if receipt:
                        receipt.status = BillStatus.PAID
                        self.repo.update_receipt(receipt)
                    else:
                        logger.warning("No receipt linked to billing record %s", record.record_id)
                    self.slots.release(registration_number)
                    self.sessions.close(registration_number)
            except ParkingError as exc:
                self._log_failure("pay", registration_number, exc)
                raise
        logger.info("Settled %s, released slot %s", registration_number, slot.slot)
        return "Payment received. Vehicle released and parking slot is available."

    # Queries ----------------------------------------------------------------
    def list_history(self) -> List[BillingRecord]:
        with self._lock:
            return self.repo.list_billing_records()

    def list_available_slots(self) -> List[Slot]:
        """Every slot on the grid, whatever its status."""
        with self._lock:
            return self.slots.list_all()

    def list_free_slots(self) -> List[Slot]:
        with self._lock:
            return [slot for slot in self.slots.list_all() if slot.is_available]

    def list_occupied_vehicles(self) -> List[VehicleSession]:
        return [session for session, _ in self._occupied_pairs()]

    def list_bookings(self) -> List[BookingView]:
        return [
            BookingView(
                registration_number=session.registration_number,
                owner_name=session.owner_name,
                phone_number=session.phone_number,
                vehicle_category=session.vehicle_category,
                zone=slot.zone,
                slot=slot.slot,
                status=slot.status,
                session_state=session.state,
                entry_time=session.entry_time,
            )
            for session, slot in self._occupied_pairs()
        ]

    def get_receipt(self, registration_number: str) -> Receipt:
        with self._lock:
            receipts = self.repo.list_receipts_for(registration_number)
        if not receipts:
            raise ReceiptNotFound(registration_number)
        return receipts[-1]

    def render_receipt(self, registration_number: str) -> str:
        if self.receipt_renderer is None:
            raise RuntimeError("No receipt renderer configured")
        return self.receipt_renderer.render(self.get_receipt(registration_number))

    def occupancy_summary(self) -> Dict[str, Dict[str, int]]:
        with self._lock:
            slots = self.slots.list_all()
        summary = {zone: {"total": 0, "occupied": 0, "available": 0} for zone in ZONES}
        for slot in slots:
            counts = summary.setdefault(slot.zone, {"total": 0, "occupied": 0, "available": 0})
            counts["total"] += 1
            if slot.status == SlotStatus.OCCUPIED:
                counts["occupied"] += 1
            else:
                counts["available"] += 1
        return summary

    # Helpers ----------------------------------------------------------------
    def _single_unpaid_record(self, registration_number: str) -> BillingRecord:
        unpaid = self.repo.list_billing_records_for(registration_number, BillStatus.UNPAID)
        if not unpaid:
            raise NoUnpaidBill(registration_number)
        if len(unpaid) > 1:
            raise MultipleUnpaidBills(registration_number, len(unpaid))
        return unpaid[0]

    def _occupied_pairs(self) -> List[tuple]:
        with self._lock:
            pairs = []
            for slot in self.slots.list_occupied():
                session = self.sessions.find(slot.occupant_registration)
                if session:
                    pairs.append((session, slot))
            return pairs

    def _log_failure(self, action: str, registration_number: str, exc: ParkingError) -> None:
        if isinstance(exc, ConsistencyError):
            logger.error("%s %s: inconsistent state: %s", action, registration_number, exc.message)
        else:
            logger.warning("%s %s rejected: %s", action, registration_number, exc.message)
