"""A store call that blows up mid-operation must not leave half-written state."""
import pytest

from domain.billing_record import BillStatus
from domain.slot import SlotStatus
from domain.vehicle import SessionState

REG = "KA01AB1234"


class StoreDown(RuntimeError):
    pass


def _fail_once(monkeypatch, repository, name):
    original = getattr(repository, name)
    calls = {"n": 0}

    def failing(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            raise StoreDown("database is locked")
        return original(*args, **kwargs)

    monkeypatch.setattr(repository, name, failing)


def _register(service):
    return service.register_vehicle(REG, "Asha", "9800000000", "car", "A", "A1")


def test_register_rolls_back_when_occupy_fails(ready_service, repository, monkeypatch):
    _fail_once(monkeypatch, repository, "occupy_slot")

    with pytest.raises(StoreDown):
        _register(ready_service)

    assert ready_service.sessions.find(REG) is None
    assert repository.get_slot("A", "A1").status == SlotStatus.AVAILABLE
    _register(ready_service)
    assert repository.find_slot_by_occupant(REG).slot == "A1"


def test_bill_rolls_back_when_receipt_write_fails(ready_service, repository, clock, monkeypatch):
    _register(ready_service)
    clock.advance(minutes=45)
    _fail_once(monkeypatch, repository, "add_receipt")

    with pytest.raises(StoreDown):
        ready_service.generate_bill(REG)

    assert repository.list_billing_records_for(REG) == []
    assert ready_service.sessions.get(REG).state == SessionState.ACTIVE

    ready_service.generate_bill(REG)
    assert len(repository.list_billing_records_for(REG, BillStatus.UNPAID)) == 1
    ready_service.pay_bill(REG)
    assert repository.get_slot("A", "A1").status == SlotStatus.AVAILABLE


def test_pay_rolls_back_when_session_close_fails(ready_service, repository, clock, monkeypatch):
    _register(ready_service)
    clock.advance(minutes=30)
    ready_service.generate_bill(REG)
    _fail_once(monkeypatch, repository, "remove_session")

    with pytest.raises(StoreDown):
        ready_service.pay_bill(REG)

    [record] = repository.list_billing_records_for(REG)
    assert record.status == BillStatus.UNPAID
    assert ready_service.get_receipt(REG).status == BillStatus.UNPAID
    slot = repository.get_slot("A", "A1")
    assert (slot.status, slot.occupant_registration) == (SlotStatus.OCCUPIED, REG)

    ready_service.pay_bill(REG)
    assert repository.list_billing_records_for(REG)[0].status == BillStatus.PAID
    assert ready_service.sessions.find(REG) is None
