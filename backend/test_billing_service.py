from datetime import datetime, timedelta, timezone

import pytest

from application.billing_service import BillingEngine, format_amount
from domain.billing_record import BillStatus
from domain.errors import InvalidInterval, UnknownVehicleCategory
from domain.slot import Slot
from domain.vehicle import VehicleCategory, VehicleSession

ENTRY = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    return BillingEngine()


def test_motorcycle_ninety_minutes(engine):
    quote = engine.compute_fee(ENTRY, ENTRY + timedelta(minutes=90), "motorcycle")
    assert quote.duration_minutes == 90
    assert quote.amount == pytest.approx(15.0)


def test_partial_minutes_are_floored(engine):
    quote = engine.compute_fee(ENTRY, ENTRY + timedelta(minutes=90, seconds=59), VehicleCategory.CAR)
    assert quote.duration_minutes == 90
    assert quote.amount == pytest.approx(45.0)


def test_amount_is_not_rounded(engine):
    quote = engine.compute_fee(ENTRY, ENTRY + timedelta(minutes=1), "scooter")
    assert quote.amount == pytest.approx(10.0 / 60.0)
    assert quote.amount != 0.17
    assert format_amount(quote.amount) == 0.17


def test_zero_duration_is_free(engine):
    quote = engine.compute_fee(ENTRY, ENTRY + timedelta(seconds=30), "bus")
    assert quote.duration_minutes == 0
    assert quote.amount == 0.0


def test_negative_interval_rejected(engine):
    with pytest.raises(InvalidInterval):
        engine.compute_fee(ENTRY, ENTRY - timedelta(minutes=1), "car")


def test_unknown_category_rejected(engine):
    with pytest.raises(UnknownVehicleCategory):
        engine.rate("tractor")


def test_build_records_share_computed_values(engine):
    session = VehicleSession(
        registration_number="KA01AB1234",
        owner_name="Asha",
        phone_number="9800000000",
        vehicle_category=VehicleCategory.VAN,
        entry_time=ENTRY,
    )
    slot = Slot(zone="C", slot="C4")
    exit_time = ENTRY + timedelta(minutes=75)

    record, receipt = engine.build_records(session, slot, exit_time)

    assert record.status == BillStatus.UNPAID
    assert receipt.status == BillStatus.UNPAID
    assert record.duration_minutes == receipt.duration_minutes == 75
    assert record.amount == receipt.amount == pytest.approx(62.5)
    assert (record.zone, record.slot) == ("C", "C4")
    assert record.exit_time == exit_time == receipt.receipt_date
    assert receipt.billing_record_id == record.record_id
    assert record.record_id != receipt.receipt_id
