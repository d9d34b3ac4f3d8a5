"""Racing registrations onto one slot: exactly one wins, nobody else is half-registered."""
import threading

import pytest

from application.parking_service import ParkingService
from domain.errors import NoUnpaidBill, SlotUnavailable
from domain.slot import SlotStatus
from infrastructure.sqlite_repo import SQLiteParkingRepository


def _race(targets):
    barrier = threading.Barrier(len(targets))
    outcomes = []
    lock = threading.Lock()

    def run(fn):
        barrier.wait()
        try:
            fn()
            result = "ok"
        except (SlotUnavailable, NoUnpaidBill) as exc:
            result = type(exc).__name__
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=run, args=(fn,)) for fn in targets]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return outcomes


def test_concurrent_registrations_on_one_slot(ready_service):
    registrations = [f"KA01AB{n:04d}" for n in range(8)]
    outcomes = _race(
        [
            (lambda reg=reg: ready_service.register_vehicle(reg, "Owner", "98000", "car", "A", "A1"))
            for reg in registrations
        ]
    )

    assert outcomes.count("ok") == 1
    assert outcomes.count("SlotUnavailable") == 7
    occupied = ready_service.list_occupied_vehicles()
    assert len(occupied) == 1
    winner = occupied[0].registration_number
    losers = [reg for reg in registrations if reg != winner]
    assert all(ready_service.sessions.find(reg) is None for reg in losers)


def test_concurrent_payments_settle_once(ready_service, clock):
    ready_service.register_vehicle("KA01AB1234", "Owner", "98000", "car", "A", "A1")
    clock.advance(minutes=20)
    ready_service.generate_bill("KA01AB1234")

    outcomes = _race([lambda: ready_service.pay_bill("KA01AB1234") for _ in range(5)])

    assert outcomes.count("ok") == 1
    assert outcomes.count("NoUnpaidBill") == 4


def test_two_processes_sharing_sqlite_cannot_both_claim(tmp_path, clock):
    db_path = tmp_path / "shared.db"
    first = ParkingService(SQLiteParkingRepository(db_path), clock=clock)
    second = ParkingService(SQLiteParkingRepository(db_path), clock=clock)
    first.initialize_parking()

    slot = second.slots.find_available("C", "C3")
    first.register_vehicle("FIRST", "Owner", "98000", "van", "C", "C3")

    with pytest.raises(SlotUnavailable):
        second.slots.occupy(slot, "SECOND")
    [c3] = [s for s in second.list_available_slots() if s.slot == "C3"]
    assert c3.status == SlotStatus.OCCUPIED
    assert c3.occupant_registration == "FIRST"


def test_held_lock_blocks_registration(ready_service):
    """A collaborator holding the service lock keeps gate requests waiting."""
    done = threading.Event()

    def register():
        ready_service.register_vehicle("KA01AB1234", "Owner", "98000", "car", "A", "A1")
        done.set()

    ready_service.acquire_lock()
    worker = threading.Thread(target=register)
    try:
        worker.start()
        assert not done.wait(0.2)
        assert ready_service.sessions.find("KA01AB1234") is None
    finally:
        ready_service.release_lock()
    worker.join(timeout=5)
    assert done.is_set()
    assert ready_service.sessions.find("KA01AB1234") is not None
