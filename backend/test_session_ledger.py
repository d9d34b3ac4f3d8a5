from datetime import datetime, timezone

import pytest

from application.session_ledger import SessionLedger
from domain.errors import DuplicateRegistration, SessionNotFound
from domain.vehicle import SessionState, VehicleCategory, VehicleInfo

NOW = datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def ledger(repository):
    return SessionLedger(repository)


def _vehicle(registration="KA01AB1234"):
    return VehicleInfo(
        registration_number=registration,
        owner_name="Asha",
        phone_number="9800000000",
        vehicle_category=VehicleCategory.CAR,
    )


def test_open_records_entry_time(ledger):
    session = ledger.open(_vehicle(), NOW)
    stored = ledger.get("KA01AB1234")
    assert stored.entry_time == NOW == session.entry_time
    assert stored.state == SessionState.ACTIVE
    assert stored.vehicle_category == VehicleCategory.CAR


def test_open_twice_is_duplicate(ledger):
    ledger.open(_vehicle(), NOW)
    with pytest.raises(DuplicateRegistration):
        ledger.open(_vehicle(), NOW)


def test_get_missing_session(ledger):
    with pytest.raises(SessionNotFound):
        ledger.get("UNKNOWN")
    assert ledger.find("UNKNOWN") is None


def test_billed_session_is_no_longer_active(ledger):
    session = ledger.open(_vehicle(), NOW)
    ledger.mark_billed(session, NOW)
    assert ledger.get("KA01AB1234").state == SessionState.BILLED
    with pytest.raises(SessionNotFound):
        ledger.get_active("KA01AB1234")


def test_close_removes_session(ledger):
    ledger.open(_vehicle(), NOW)
    ledger.close("KA01AB1234")
    assert ledger.find("KA01AB1234") is None
    assert ledger.list_sessions() == []
