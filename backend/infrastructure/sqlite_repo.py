"""SQLite-backed repository implementation."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from domain.billing_record import BillingRecord, BillStatus
from domain.receipt import Receipt
from domain.slot import Slot, SlotStatus
from domain.vehicle import SessionState, VehicleCategory, VehicleSession
from .database import DEFAULT_DB_PATH, SessionLocal, get_engine, init_db
from .models import BillingRecordModel, ReceiptModel, SlotModel, VehicleSessionModel
from .repository import ParkingRepository


class SQLiteParkingRepository(ParkingRepository):
    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.engine = get_engine(self.db_path)
        init_db(self.engine)
        self._local = threading.local()

    # Unit of work ---------------------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._active_db() is not None:
            yield
            return
        with SessionLocal(self.engine) as db, db.begin():
            self._local.db = db
            try:
                yield
            finally:
                self._local.db = None

    def _active_db(self) -> Optional[Session]:
        return getattr(self._local, "db", None)

    @contextmanager
    def _read(self) -> Iterator[Session]:
        active = self._active_db()
        if active is not None:
            yield active
            return
        with SessionLocal(self.engine) as db:
            yield db

    @contextmanager
    def _write(self) -> Iterator[Session]:
        """Joins the open unit of work, or commits on its own."""
        active = self._active_db()
        if active is not None:
            yield active
            return
        with SessionLocal(self.engine) as db, db.begin():
            yield db

    # Slots ----------------------------------------------------------------
    def count_slots(self) -> int:
        with self._read() as db:
            return len(db.exec(select(SlotModel.slot)).all())

    def add_slots(self, slots: Iterable[Slot]) -> None:
        with self._write() as db:
            for slot in slots:
                db.add(
                    SlotModel(
                        slot=slot.slot,
                        zone=slot.zone,
                        status=slot.status.value,
                        occupant_registration=slot.occupant_registration,
                    )
                )

    def get_slot(self, zone: str, slot: str) -> Optional[Slot]:
        with self._read() as db:
            model = db.get(SlotModel, slot)
            if not model or model.zone != zone:
                return None
            return self._slot_from_model(model)

    def find_slot_by_occupant(self, registration: str) -> Optional[Slot]:
        with self._read() as db:
            statement = select(SlotModel).where(SlotModel.occupant_registration == registration)
            model = db.exec(statement).first()
            if not model:
                return None
            return self._slot_from_model(model)

    def list_slots(self) -> List[Slot]:
        with self._read() as db:
            models = db.exec(select(SlotModel)).all()
            slots = [self._slot_from_model(model) for model in models]
        slots.sort(key=lambda s: (s.zone, int(s.slot[len(s.zone):])))
        return slots

    def occupy_slot(self, zone: str, slot: str, registration: str) -> bool:
        statement = (
            update(SlotModel)
            .where(SlotModel.slot == slot)
            .where(SlotModel.zone == zone)
            .where(SlotModel.status == SlotStatus.AVAILABLE.value)
            .values(status=SlotStatus.OCCUPIED.value, occupant_registration=registration)
        )
        with self._write() as db:
            db.flush()
            result = db.connection().execute(statement)
            # the Core update bypasses the identity map
            db.expire_all()
            return result.rowcount == 1

    def save_slot(self, slot: Slot) -> None:
        with self._write() as db:
            model = db.get(SlotModel, slot.slot)
            if not model:
                model = SlotModel(slot=slot.slot, zone=slot.zone)
            model.status = slot.status.value
            model.occupant_registration = slot.occupant_registration
            db.add(model)

    # Sessions -------------------------------------------------------------
    def get_session(self, registration: str) -> Optional[VehicleSession]:
        with self._read() as db:
            model = db.get(VehicleSessionModel, registration)
            if not model:
                return None
            return self._vehicle_session_from_model(model)

    def add_session(self, session: VehicleSession) -> None:
        with self._write() as db:
            db.add(
                VehicleSessionModel(
                    registration_number=session.registration_number,
                    owner_name=session.owner_name,
                    phone_number=session.phone_number,
                    vehicle_category=session.vehicle_category.value,
                    entry_time=session.entry_time,
                    state=session.state.value,
                    billed_at=session.billed_at,
                )
            )

    def save_session(self, session: VehicleSession) -> None:
        with self._write() as db:
            model = db.get(VehicleSessionModel, session.registration_number)
            if not model:
                model = VehicleSessionModel(
                    registration_number=session.registration_number,
                    owner_name=session.owner_name,
                    phone_number=session.phone_number,
                    vehicle_category=session.vehicle_category.value,
                    entry_time=session.entry_time,
                )
            model.owner_name = session.owner_name
            model.phone_number = session.phone_number
            model.vehicle_category = session.vehicle_category.value
            model.entry_time = session.entry_time
            model.state = session.state.value
            model.billed_at = session.billed_at
            db.add(model)

    def remove_session(self, registration: str) -> None:
        with self._write() as db:
            model = db.get(VehicleSessionModel, registration)
            if model:
                db.delete(model)

    def list_sessions(self) -> List[VehicleSession]:
        with self._read() as db:
            models = db.exec(select(VehicleSessionModel)).all()
            return [self._vehicle_session_from_model(model) for model in models]

    # Billing history ------------------------------------------------------
    def add_billing_record(self, record: BillingRecord) -> None:
        with self._write() as db:
            db.add(self._record_model_from_record(record))

    def update_billing_record(self, record: BillingRecord) -> None:
        with self._write() as db:
            model = db.get(BillingRecordModel, record.record_id)
            if not model:
                db.add(self._record_model_from_record(record))
                return
            model.status = record.status.value
            model.paid_at = record.paid_at
            db.add(model)

    def list_billing_records(self) -> List[BillingRecord]:
        with self._read() as db:
            statement = select(BillingRecordModel).order_by(BillingRecordModel.exit_time.asc())
            models = db.exec(statement).all()
            return [self._record_from_model(model) for model in models]

    def list_billing_records_for(
        self, registration: str, status: Optional[BillStatus] = None
    ) -> List[BillingRecord]:
        with self._read() as db:
            statement = (
                select(BillingRecordModel)
                .where(BillingRecordModel.registration_number == registration)
                .order_by(BillingRecordModel.exit_time.asc())
            )
            if status is not None:
                statement = statement.where(BillingRecordModel.status == status.value)
            models = db.exec(statement).all()
            return [self._record_from_model(model) for model in models]

    # Receipts -------------------------------------------------------------
    def add_receipt(self, receipt: Receipt) -> None:
        with self._write() as db:
            db.add(self._receipt_model_from_receipt(receipt))

    def update_receipt(self, receipt: Receipt) -> None:
        with self._write() as db:
            model = db.get(ReceiptModel, receipt.receipt_id)
            if not model:
                db.add(self._receipt_model_from_receipt(receipt))
                return
            model.status = receipt.status.value
            model.receipt_date = receipt.receipt_date
            db.add(model)

    def list_receipts_for(self, registration: str) -> List[Receipt]:
        with self._read() as db:
            statement = (
                select(ReceiptModel)
                .where(ReceiptModel.registration_number == registration)
                .order_by(ReceiptModel.receipt_date.asc())
            )
            models = db.exec(statement).all()
            return [self._receipt_from_model(model) for model in models]

    def get_receipt_for_record(self, record_id: str) -> Optional[Receipt]:
        with self._read() as db:
            statement = select(ReceiptModel).where(ReceiptModel.billing_record_id == record_id)
            model = db.exec(statement).first()
            if not model:
                return None
            return self._receipt_from_model(model)

    # Helpers --------------------------------------------------------------
    def _slot_from_model(self, model: SlotModel) -> Slot:
        return Slot(
            zone=model.zone,
            slot=model.slot,
            status=SlotStatus(model.status),
            occupant_registration=model.occupant_registration,
        )

    def _vehicle_session_from_model(self, model: VehicleSessionModel) -> VehicleSession:
        return VehicleSession(
            registration_number=model.registration_number,
            owner_name=model.owner_name,
            phone_number=model.phone_number,
            vehicle_category=VehicleCategory(model.vehicle_category),
            entry_time=model.entry_time,
            state=SessionState(model.state),
            billed_at=model.billed_at,
        )

    def _record_model_from_record(self, record: BillingRecord) -> BillingRecordModel:
        return BillingRecordModel(
            record_id=record.record_id,
            registration_number=record.registration_number,
            owner_name=record.owner_name,
            phone_number=record.phone_number,
            vehicle_category=record.vehicle_category.value,
            entry_time=record.entry_time,
            exit_time=record.exit_time,
            duration_minutes=record.duration_minutes,
            amount=record.amount,
            zone=record.zone,
            slot=record.slot,
            status=record.status.value,
            paid_at=record.paid_at,
        )

    def _record_from_model(self, model: BillingRecordModel) -> BillingRecord:
        return BillingRecord(
            record_id=model.record_id,
            registration_number=model.registration_number,
            owner_name=model.owner_name,
            phone_number=model.phone_number,
            vehicle_category=VehicleCategory(model.vehicle_category),
            entry_time=model.entry_time,
            exit_time=model.exit_time,
            duration_minutes=model.duration_minutes,
            amount=model.amount,
            zone=model.zone,
            slot=model.slot,
            status=BillStatus(model.status),
            paid_at=model.paid_at,
        )

    def _receipt_model_from_receipt(self, receipt: Receipt) -> ReceiptModel:
        return ReceiptModel(
            receipt_id=receipt.receipt_id,
            registration_number=receipt.registration_number,
            owner_name=receipt.owner_name,
            phone_number=receipt.phone_number,
            vehicle_category=receipt.vehicle_category.value,
            duration_minutes=receipt.duration_minutes,
            amount=receipt.amount,
            receipt_date=receipt.receipt_date,
            status=receipt.status.value,
            billing_record_id=receipt.billing_record_id,
        )

    def _receipt_from_model(self, model: ReceiptModel) -> Receipt:
        return Receipt(
            receipt_id=model.receipt_id,
            registration_number=model.registration_number,
            owner_name=model.owner_name,
            phone_number=model.phone_number,
            vehicle_category=VehicleCategory(model.vehicle_category),
            duration_minutes=model.duration_minutes,
            amount=model.amount,
            receipt_date=model.receipt_date,
            status=BillStatus(model.status),
            billing_record_id=model.billing_record_id,
        )
