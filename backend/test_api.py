"""HTTP surface over an in-memory store."""

import importlib

import pytest
from fastapi.testclient import TestClient

from app.main import app
from infrastructure.memory_store import InMemoryParkingRepository
from interfaces import deps

REG = "KA01AB1234"


@pytest.fixture
def client(clock):
    service = deps.use_repository(InMemoryParkingRepository())
    service.clock = clock
    with TestClient(app) as test_client:
        yield test_client


def _register(client, **overrides):
    payload = {
        "registrationNumber": REG,
        "ownerName": "Asha",
        "phoneNumber": "9800000000",
        "vehicleType": "motorcycle",
        "zone": "A",
        "slot": "A1",
    }
    payload.update(overrides)
    return client.post("/api/register", json=payload)


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["initialized"] is False


def test_initialize_twice(client):
    first = client.post("/api/initialize-parking")
    assert first.status_code == 200
    assert first.json() == {"message": "Parking lot initialized successfully."}
    second = client.post("/api/initialize-parking")
    assert second.status_code == 400
    assert second.json()["detail"] == "Parking lot is already initialized."
    assert len(client.get("/api/available-parking").json()) == 50


def test_lifecycle_over_http(client, clock):
    client.post("/api/initialize-parking")
    assert _register(client).status_code == 200

    slots = {s["slot"]: s for s in client.get("/api/available-parking").json()}
    assert slots["A1"]["bookedSlotStatus"] == "Occupied"
    assert slots["A1"]["vehicleRegistrationNumber"] == REG
    assert len(client.get("/api/available-parking", params={"onlyFree": True}).json()) == 49

    clock.advance(minutes=90)
    bill = client.post("/api/exit", params={"registrationNumber": REG})
    assert bill.status_code == 200
    assert bill.json()["message"] == (
        "Bill generated for motorcycle: Rs 15.0. Please pay to release your vehicle."
    )

    receipt = client.get("/api/receipt", params={"registrationNumber": REG}).json()
    assert receipt["totalDuration"] == 90
    assert receipt["status"] == "Unpaid"

    [booking] = client.get("/api/bookings").json()
    assert booking["slot"] == "A1"
    assert booking["sessionState"] == "Billed"

    paid = client.post("/api/pay", params={"registrationNumber": REG})
    assert paid.status_code == 200

    [record] = client.get("/api/history").json()
    assert record["status"] == "Paid"
    assert record["amount"] == pytest.approx(15.0)
    assert record["parkingSlot"] == "A1"
    assert client.get("/api/available-vehicles").json() == []
    assert client.get("/api/receipt", params={"registrationNumber": REG}).json()["status"] == "Paid"


def test_register_errors(client):
    client.post("/api/initialize-parking")
    _register(client)

    duplicate = _register(client, slot="A2")
    assert duplicate.status_code == 400
    taken = _register(client, registrationNumber="MH12XY0001")
    assert taken.status_code == 400
    assert taken.json()["detail"] == "Parking slot does not exist or is already occupied."
    unknown = _register(client, registrationNumber="MH12XY0002", vehicleType="tank", slot="A3")
    assert unknown.status_code == 400


def test_not_found_errors(client):
    client.post("/api/initialize-parking")
    assert client.post("/api/exit", params={"registrationNumber": "NOBODY"}).status_code == 404
    assert client.post("/api/pay", params={"registrationNumber": "NOBODY"}).status_code == 404
    assert client.get("/api/receipt", params={"registrationNumber": "NOBODY"}).status_code == 404
    assert client.get("/api/download-receipt", params={"registrationNumber": "NOBODY"}).status_code == 404


def test_consistency_error_maps_to_500(client):
    client.post("/api/initialize-parking")
    _register(client)
    slot = deps.repository.find_slot_by_occupant(REG)
    slot.mark_available()
    deps.repository.save_slot(slot)

    response = client.post("/api/exit", params={"registrationNumber": REG})
    assert response.status_code == 500


def test_download_receipt_is_html(client, clock):
    client.post("/api/initialize-parking")
    _register(client, vehicleType="car")
    clock.advance(minutes=30)
    client.post("/api/exit", params={"registrationNumber": REG})

    response = client.get("/api/download-receipt", params={"registrationNumber": REG})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert f"receipt_{REG}.html" in response.headers["content-disposition"]
    assert "Rs 15.00" in response.text


def test_occupancy(client):
    client.post("/api/initialize-parking")
    _register(client, zone="E", slot="E10")
    body = client.get("/api/occupancy").json()
    assert body["total"] == 50
    assert body["occupied"] == 1
    assert body["zones"]["E"] == {"total": 10, "occupied": 1, "available": 9}


def test_register_and_pay_push_slot_state(client, clock, monkeypatch):
    parking_router = importlib.import_module("interfaces.parking_router")

    pushed = []

    async def record(slot):
        pushed.append((slot.slot, slot.status.value, slot.occupant_registration))

    monkeypatch.setattr(parking_router, "push_slot_state", record)
    client.post("/api/initialize-parking")
    _register(client)
    clock.advance(minutes=15)
    client.post("/api/exit", params={"registrationNumber": REG})
    client.post("/api/pay", params={"registrationNumber": REG})

    assert pushed == [("A1", "Occupied", REG), ("A1", "Available", None)]
