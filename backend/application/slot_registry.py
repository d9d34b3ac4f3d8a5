"""Slot registry: the fixed grid and its occupancy state."""
from __future__ import annotations

import logging
from typing import List, Optional, TYPE_CHECKING

from domain.errors import AlreadyInitialized, NoOccupiedSlot, SlotUnavailable
from domain.slot import Slot, SlotStatus, build_grid, normalize_label, normalize_zone

if TYPE_CHECKING:
    from infrastructure.repository import ParkingRepository

logger = logging.getLogger(__name__)


class SlotRegistry:
    def __init__(self, repository: "ParkingRepository"):
        self.repo = repository

    def is_initialized(self) -> bool:
        return self.repo.count_slots() > 0

    def initialize(self) -> List[Slot]:
        """One-time bootstrap of zones A-E x 1..10. Never resets an existing grid."""
        if self.is_initialized():
            raise AlreadyInitialized()
        grid = build_grid()
        self.repo.add_slots(grid)
        logger.info("Initialized parking grid with %d slots", len(grid))
        return grid

    def find_available(self, zone: str, slot_label: str) -> Slot:
        zone_key = normalize_zone(zone)
        label_key = normalize_label(slot_label)
        slot = self.repo.get_slot(zone_key, label_key)
        if not slot or slot.status != SlotStatus.AVAILABLE:
            raise SlotUnavailable(zone, slot_label)
        return slot

    def occupy(self, slot: Slot, registration: str) -> Slot:
        if not self.repo.occupy_slot(slot.zone, slot.slot, registration):
            # lost the compare-and-set to a concurrent writer
            raise SlotUnavailable(slot.zone, slot.slot)
        slot.mark_occupied(registration)
        return slot

    def find_by_occupant(self, registration: str) -> Optional[Slot]:
        return self.repo.find_slot_by_occupant(registration)

    def release(self, registration: str) -> Slot:
        slot = self.repo.find_slot_by_occupant(registration)
        if not slot or slot.status != SlotStatus.OCCUPIED:
            raise NoOccupiedSlot(registration)
        slot.mark_available()
        self.repo.save_slot(slot)
        return slot

    def list_all(self) -> List[Slot]:
        return list(self.repo.list_slots())

    def list_occupied(self) -> List[Slot]:
        return [slot for slot in self.repo.list_slots() if slot.status == SlotStatus.OCCUPIED]
