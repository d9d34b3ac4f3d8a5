"""Shared fixtures: fresh stores, a controllable clock, a wired service."""
from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest

# interfaces.deps builds its store at import time
os.environ.setdefault("PARKING_STORAGE", "memory")

from application.parking_service import ParkingService  # noqa: E402
from infrastructure.memory_store import InMemoryParkingRepository  # noqa: E402
from infrastructure.receipt_renderer import HtmlReceiptRenderer  # noqa: E402
from infrastructure.sqlite_repo import SQLiteParkingRepository  # noqa: E402


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture(params=["memory", "sqlite"])
def repository(request, tmp_path):
    if request.param == "memory":
        return InMemoryParkingRepository()
    return SQLiteParkingRepository(tmp_path / "parking.db")


@pytest.fixture
def service(repository, clock) -> ParkingService:
    return ParkingService(repository, receipt_renderer=HtmlReceiptRenderer(), clock=clock)


@pytest.fixture
def ready_service(service) -> ParkingService:
    service.initialize_parking()
    return service
