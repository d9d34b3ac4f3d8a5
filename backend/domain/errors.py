"""Typed failures raised by the parking core.

Every error carries a user-facing ``message`` and a ``kind`` the HTTP layer
maps to a status code:

- ``validation``: bad input or a state the caller can fix (no mutation happened)
- ``not_found``: the thing asked for does not exist
- ``consistency``: stored state contradicts the lifecycle invariants
"""
from __future__ import annotations


class ParkingError(Exception):
    kind = "validation"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ParkingError):
    kind = "validation"


class NotFoundError(ParkingError):
    kind = "not_found"


class ConsistencyError(ParkingError):
    kind = "consistency"


# Validation ---------------------------------------------------------------
class AlreadyInitialized(ValidationError):
    def __init__(self) -> None:
        super().__init__("Parking lot is already initialized.")


class DuplicateRegistration(ValidationError):
    def __init__(self, registration: str):
        super().__init__(f"Vehicle with registration number {registration} is already registered.")
        self.registration = registration


class SlotUnavailable(ValidationError):
    def __init__(self, zone: str, slot: str):
        super().__init__("Parking slot does not exist or is already occupied.")
        self.zone = zone
        self.slot = slot


class UnknownVehicleCategory(ValidationError):
    def __init__(self, category: object):
        super().__init__(f"Unknown vehicle type: {category}")
        self.category = category


class InvalidInterval(ValidationError):
    def __init__(self, entry_time: object, exit_time: object):
        super().__init__(f"Exit time {exit_time} is before entry time {entry_time}.")


# Not found ----------------------------------------------------------------
class SessionNotFound(NotFoundError):
    def __init__(self, registration: str):
        super().__init__(f"No active parking session for registration number {registration}.")
        self.registration = registration


class NoUnpaidBill(NotFoundError):
    def __init__(self, registration: str):
        super().__init__("No unpaid bill found for the provided registration number.")
        self.registration = registration


class ReceiptNotFound(NotFoundError):
    def __init__(self, registration: str):
        super().__init__(f"Receipt not found for registration number: {registration}")
        self.registration = registration


# Consistency --------------------------------------------------------------
class SlotNotFound(ConsistencyError):
    def __init__(self, registration: str):
        super().__init__(f"Parking slot not found for registration number {registration}.")
        self.registration = registration


class NoOccupiedSlot(ConsistencyError):
    def __init__(self, registration: str):
        super().__init__(f"No occupied slot is bound to registration number {registration}.")
        self.registration = registration


class MultipleUnpaidBills(ConsistencyError):
    def __init__(self, registration: str, count: int):
        super().__init__(f"{count} unpaid bills exist for registration number {registration}.")
        self.registration = registration
        self.count = count
