"""SQLModel ORM tables mirroring the domain entities."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field


class UTCDateTime(TypeDecorator):
    """Stores UTC wall time in SQLite and hands back aware datetimes."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class SlotModel(SQLModel, table=True):
    slot: str = Field(primary_key=True)  # "A1".."E10"
    zone: str = Field(index=True)
    status: str = Field(default="Available")
    occupant_registration: Optional[str] = Field(default=None, index=True)


class VehicleSessionModel(SQLModel, table=True):
    registration_number: str = Field(primary_key=True)
    owner_name: str
    phone_number: str
    vehicle_category: str
    entry_time: datetime = Field(sa_type=UTCDateTime)
    state: str = Field(default="Active")
    billed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)


class BillingRecordModel(SQLModel, table=True):
    record_id: str = Field(primary_key=True)
    registration_number: str = Field(index=True)
    owner_name: str
    phone_number: str
    vehicle_category: str
    entry_time: datetime = Field(sa_type=UTCDateTime)
    exit_time: datetime = Field(sa_type=UTCDateTime, index=True)
    duration_minutes: int = 0
    amount: float = 0.0  # unrounded
    zone: str
    slot: str
    status: str = Field(default="Unpaid", index=True)
    paid_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)


class ReceiptModel(SQLModel, table=True):
    receipt_id: str = Field(primary_key=True)
    registration_number: str = Field(index=True)
    owner_name: str
    phone_number: str
    vehicle_category: str
    duration_minutes: int = 0
    amount: float = 0.0
    receipt_date: datetime = Field(sa_type=UTCDateTime)
    status: str = Field(default="Unpaid")
    billing_record_id: Optional[str] = Field(default=None, index=True)
