"""Session ledger: which registration is parked and since when."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, TYPE_CHECKING

from domain.errors import DuplicateRegistration, SessionNotFound
from domain.vehicle import SessionState, VehicleInfo, VehicleSession

if TYPE_CHECKING:
    from infrastructure.repository import ParkingRepository


class SessionLedger:
    def __init__(self, repository: "ParkingRepository"):
        self.repo = repository

    def open(self, vehicle: VehicleInfo, now: datetime) -> VehicleSession:
        if self.repo.get_session(vehicle.registration_number):
            raise DuplicateRegistration(vehicle.registration_number)
        session = VehicleSession(
            registration_number=vehicle.registration_number,
            owner_name=vehicle.owner_name,
            phone_number=vehicle.phone_number,
            vehicle_category=vehicle.vehicle_category,
            entry_time=now,
        )
        self.repo.add_session(session)
        return session

    def find(self, registration: str) -> Optional[VehicleSession]:
        return self.repo.get_session(registration)

    def get(self, registration: str) -> VehicleSession:
        session = self.repo.get_session(registration)
        if not session:
            raise SessionNotFound(registration)
        return session

    def get_active(self, registration: str) -> VehicleSession:
        """Like ``get`` but a session that was already billed counts as missing."""
        session = self.get(registration)
        if session.state != SessionState.ACTIVE:
            raise SessionNotFound(registration)
        return session

    def mark_billed(self, session: VehicleSession, now: datetime) -> VehicleSession:
        session.mark_billed(now)
        self.repo.save_session(session)
        return session

    def close(self, registration: str) -> None:
        self.repo.remove_session(registration)

    def list_sessions(self) -> List[VehicleSession]:
        return list(self.repo.list_sessions())
