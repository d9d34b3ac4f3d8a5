"""Shared singletons for settings, repository and the parking service.

The storage backend follows ``storage.database`` in app_config.yaml
(or the PARKING_STORAGE environment variable).
"""
from __future__ import annotations

import logging

from app.config import AppConfig, get_settings
from application.parking_service import ParkingService
from infrastructure.memory_store import InMemoryParkingRepository
from infrastructure.receipt_renderer import HtmlReceiptRenderer
from infrastructure.repository import ParkingRepository
from infrastructure.socketio_manager import set_parking_service
from infrastructure.sqlite_repo import SQLiteParkingRepository

logger = logging.getLogger(__name__)

settings = get_settings()


def _create_repository(config: AppConfig) -> ParkingRepository:
    backend = config.database_backend
    if backend == "memory":
        return InMemoryParkingRepository()
    elif backend == "sqlite":
        return SQLiteParkingRepository(config.sqlite_path)
    else:
        raise ValueError(f"Unknown database backend: {backend}. Supported: sqlite, memory")


def build_parking_service(repository: ParkingRepository) -> ParkingService:
    return ParkingService(repository, receipt_renderer=HtmlReceiptRenderer())


repository = _create_repository(settings)
parking_service = build_parking_service(repository)
set_parking_service(parking_service)

logger.info("Database backend: %s", settings.database_backend)


def use_repository(new_repository: ParkingRepository) -> ParkingService:
    """Swap the store behind every router (tests, maintenance scripts)."""
    global repository, parking_service
    repository = new_repository
    parking_service = build_parking_service(new_repository)
    set_parking_service(parking_service)
    return parking_service
