"""camelCase JSON shapes for the parking API."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from domain.billing_record import BillingRecord
from domain.booking import BookingView
from domain.receipt import Receipt
from domain.slot import Slot
from domain.vehicle import VehicleSession


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_slot(slot: Slot) -> Dict[str, Any]:
    return {
        "zone": slot.zone,
        "slot": slot.slot,
        "bookedSlotStatus": slot.status.value,
        "vehicleRegistrationNumber": slot.occupant_registration,
    }


def serialize_session(session: VehicleSession) -> Dict[str, Any]:
    return {
        "registrationNumber": session.registration_number,
        "ownerName": session.owner_name,
        "phoneNumber": session.phone_number,
        "vehicleType": session.vehicle_category.value,
        "entryTime": _iso(session.entry_time),
        "state": session.state.value,
    }


def serialize_record(record: BillingRecord) -> Dict[str, Any]:
    return {
        "id": record.record_id,
        "registrationNumber": record.registration_number,
        "vehicleType": record.vehicle_category.value,
        "ownerName": record.owner_name,
        "phoneNumber": record.phone_number,
        "entryTime": _iso(record.entry_time),
        "exitTime": _iso(record.exit_time),
        "totalDuration": record.duration_minutes,
        "amount": record.amount,
        "status": record.status.value,
        "parkingZone": record.zone,
        "parkingSlot": record.slot,
        "paidAt": _iso(record.paid_at),
    }


def serialize_receipt(receipt: Receipt) -> Dict[str, Any]:
    return {
        "id": receipt.receipt_id,
        "registrationNumber": receipt.registration_number,
        "vehicleType": receipt.vehicle_category.value,
        "ownerName": receipt.owner_name,
        "phoneNumber": receipt.phone_number,
        "totalDuration": receipt.duration_minutes,
        "amount": receipt.amount,
        "receiptDate": _iso(receipt.receipt_date),
        "status": receipt.status.value,
        "billingRecordId": receipt.billing_record_id,
    }


def serialize_booking(booking: BookingView) -> Dict[str, Any]:
    return {
        "registrationNumber": booking.registration_number,
        "ownerName": booking.owner_name,
        "phoneNumber": booking.phone_number,
        "vehicleType": booking.vehicle_category.value,
        "zone": booking.zone,
        "slot": booking.slot,
        "status": booking.status.value,
        "sessionState": booking.session_state.value,
        "entryTime": _iso(booking.entry_time),
        "exitTime": _iso(booking.exit_time),
    }
