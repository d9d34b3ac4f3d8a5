"""Routers for the gate workflows: initialize, register, exit, pay and the lot views."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Query
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from domain.errors import ParkingError
from domain.slot import Slot
from infrastructure.socketio_manager import push_lot_state, push_parking_event, push_slot_state
from interfaces import deps
from interfaces.http_errors import to_http_exception
from interfaces.serializers import (
    serialize_booking,
    serialize_record,
    serialize_session,
    serialize_slot,
)

router = APIRouter(prefix="/api", tags=["parking"])


class VehicleRegistrationRequest(BaseModel):
    registrationNumber: str = Field(..., min_length=1, max_length=32)
    ownerName: str = Field(..., min_length=1)
    phoneNumber: str = Field(..., min_length=1)
    vehicleType: str = Field(..., description="car, motorcycle, scooter, van or bus")
    zone: str = Field(..., min_length=1, max_length=1)
    slot: str = Field(..., min_length=2, max_length=3, description="e.g. A1 .. E10")


@router.post("/initialize-parking")
async def initialize_parking() -> Dict[str, str]:
    try:
        message = await run_in_threadpool(deps.parking_service.initialize_parking)
    except ParkingError as exc:
        raise to_http_exception(exc) from exc
    await push_lot_state()
    return {"message": message}


def _register_and_locate(payload: VehicleRegistrationRequest) -> Tuple[str, Optional[Slot]]:
    service = deps.parking_service
    message = service.register_vehicle(
        payload.registrationNumber,
        payload.ownerName,
        payload.phoneNumber,
        payload.vehicleType,
        payload.zone,
        payload.slot,
    )
    return message, service.slots.find_by_occupant(payload.registrationNumber)


def _pay_and_release(registration: str) -> Tuple[str, Optional[Slot]]:
    service = deps.parking_service
    held = service.slots.find_by_occupant(registration)
    message = service.pay_bill(registration)
    released = service.repo.get_slot(held.zone, held.slot) if held else None
    return message, released


@router.post("/register")
async def register_vehicle(payload: VehicleRegistrationRequest) -> Dict[str, str]:
    try:
        message, slot = await run_in_threadpool(_register_and_locate, payload)
    except ParkingError as exc:
        raise to_http_exception(exc) from exc
    if slot:
        await push_slot_state(slot)
    await push_parking_event("registered", payload.registrationNumber, message)
    return {"message": message}


@router.post("/exit")
async def generate_bill(registrationNumber: str = Query(..., min_length=1)) -> Dict[str, str]:
    try:
        message = await run_in_threadpool(deps.parking_service.generate_bill, registrationNumber)
    except ParkingError as exc:
        raise to_http_exception(exc) from exc
    await push_parking_event("billed", registrationNumber, message)
    return {"message": message}


@router.post("/pay")
async def pay_bill(registrationNumber: str = Query(..., min_length=1)) -> Dict[str, str]:
    try:
        message, released = await run_in_threadpool(_pay_and_release, registrationNumber)
    except ParkingError as exc:
        raise to_http_exception(exc) from exc
    if released:
        await push_slot_state(released)
    await push_parking_event("paid", registrationNumber, message)
    return {"message": message}


@router.get("/history")
def get_vehicle_history() -> List[Dict[str, Any]]:
    return [serialize_record(rec) for rec in deps.parking_service.list_history()]


@router.get("/available-parking")
def get_available_parking(
    onlyFree: bool = Query(False, description="Only return slots that are Available"),
) -> List[Dict[str, Any]]:
    service = deps.parking_service
    slots = service.list_free_slots() if onlyFree else service.list_available_slots()
    return [serialize_slot(slot) for slot in slots]


@router.get("/available-vehicles")
def get_available_vehicles() -> List[Dict[str, Any]]:
    """Vehicles currently holding an Occupied slot."""
    return [serialize_session(s) for s in deps.parking_service.list_occupied_vehicles()]


@router.get("/bookings")
def get_all_bookings() -> List[Dict[str, Any]]:
    return [serialize_booking(b) for b in deps.parking_service.list_bookings()]


@router.get("/occupancy")
def get_occupancy() -> Dict[str, Any]:
    zones = deps.parking_service.occupancy_summary()
    totals = {"total": 0, "occupied": 0, "available": 0}
    for counts in zones.values():
        for key in totals:
            totals[key] += counts[key]
    return {"zones": zones, **totals}

