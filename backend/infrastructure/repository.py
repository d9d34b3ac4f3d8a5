"""Abstract repository interface for parking persistence."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ContextManager, Iterable, List, Optional

from domain.billing_record import BillingRecord, BillStatus
from domain.receipt import Receipt
from domain.slot import Slot
from domain.vehicle import VehicleSession


class ParkingRepository(ABC):
    """Unified gateway so memory store / SQLite share the same API."""

    # Unit of work --------------------------------------------------------
    @abstractmethod
    def transaction(self) -> ContextManager[None]:
        """All writes inside commit together or not at all. Nested calls join the outer one."""
        raise NotImplementedError

    # Slots ---------------------------------------------------------------
    @abstractmethod
    def count_slots(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def add_slots(self, slots: Iterable[Slot]) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_slot(self, zone: str, slot: str) -> Optional[Slot]:
        raise NotImplementedError

    @abstractmethod
    def find_slot_by_occupant(self, registration: str) -> Optional[Slot]:
        raise NotImplementedError

    @abstractmethod
    def list_slots(self) -> List[Slot]:
        raise NotImplementedError

    @abstractmethod
    def occupy_slot(self, zone: str, slot: str, registration: str) -> bool:
        """Compare-and-set Available -> Occupied. Returns False if the slot was not Available."""
        raise NotImplementedError

    @abstractmethod
    def save_slot(self, slot: Slot) -> None:
        raise NotImplementedError

    # Sessions ------------------------------------------------------------
    @abstractmethod
    def get_session(self, registration: str) -> Optional[VehicleSession]:
        raise NotImplementedError

    @abstractmethod
    def add_session(self, session: VehicleSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def save_session(self, session: VehicleSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_session(self, registration: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_sessions(self) -> List[VehicleSession]:
        raise NotImplementedError

    # Billing history -----------------------------------------------------
    @abstractmethod
    def add_billing_record(self, record: BillingRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    def update_billing_record(self, record: BillingRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_billing_records(self) -> List[BillingRecord]:
        """All records ordered by exit time."""
        raise NotImplementedError

    @abstractmethod
    def list_billing_records_for(
        self, registration: str, status: Optional[BillStatus] = None
    ) -> List[BillingRecord]:
        raise NotImplementedError

    # Receipts ------------------------------------------------------------
    @abstractmethod
    def add_receipt(self, receipt: Receipt) -> None:
        raise NotImplementedError

    @abstractmethod
    def update_receipt(self, receipt: Receipt) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_receipts_for(self, registration: str) -> List[Receipt]:
        """Receipts for one registration, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def get_receipt_for_record(self, record_id: str) -> Optional[Receipt]:
        raise NotImplementedError
