"""Socket.IO manager: pushes slot state to lot dashboards.

The routers call the push helpers after a register / pay goes through;
the parking core itself never talks to Socket.IO.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, TYPE_CHECKING

import socketio
from fastapi.concurrency import run_in_threadpool

from app.config import get_settings

if TYPE_CHECKING:
    from application.parking_service import ParkingService
    from domain.slot import Slot

logger = logging.getLogger(__name__)

LOT_ROOM = "lot"

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=get_settings().cors_origins,
    logger=False,
    engineio_logger=False,
)

_parking_service: Optional["ParkingService"] = None


def set_parking_service(service: "ParkingService") -> None:
    global _parking_service
    _parking_service = service


# ========== Socket.IO events ==========

@sio.event
async def connect(sid: str, environ: dict) -> None:
    logger.info("Socket.IO client connected: %s", sid)


@sio.event
async def disconnect(sid: str) -> None:
    logger.info("Socket.IO client disconnected: %s", sid)


@sio.event
async def subscribe_lot(sid: str, data: dict = None) -> None:
    """Join the lot dashboard room and get the whole grid straight away."""
    await sio.enter_room(sid, LOT_ROOM)
    logger.info("%s subscribed to %s", sid, LOT_ROOM)
    await push_lot_state()


@sio.event
async def unsubscribe_lot(sid: str, data: dict = None) -> None:
    await sio.leave_room(sid, LOT_ROOM)


# ========== Push helpers ==========

async def push_lot_state() -> None:
    if not _parking_service:
        return
    grid = await run_in_threadpool(_parking_service.list_available_slots)
    slots = [slot_to_dict(slot) for slot in grid]
    await sio.emit("lot_update", {"slots": slots}, room=LOT_ROOM)


async def push_slot_state(slot: "Slot") -> None:
    await sio.emit("slot_state", slot_to_dict(slot), room=LOT_ROOM)


async def push_parking_event(event_type: str, registration: str, message: str) -> None:
    now_ms = int(time.time() * 1000)
    event = {
        "id": f"{now_ms}-{registration}-{event_type}",
        "time": now_ms,
        "type": event_type,
        "registrationNumber": registration,
        "message": message,
    }
    await sio.emit("parking_event", event, room=LOT_ROOM)


def slot_to_dict(slot: "Slot") -> Dict[str, Any]:
    return {
        "zone": slot.zone,
        "slot": slot.slot,
        "status": slot.status.value,
        "vehicleRegistrationNumber": slot.occupant_registration,
    }
