"""Static hourly rate table keyed by vehicle category."""
from __future__ import annotations

from typing import Dict

from .vehicle import VehicleCategory

HOURLY_RATES: Dict[VehicleCategory, float] = {
    VehicleCategory.CAR: 30.0,
    VehicleCategory.MOTORCYCLE: 10.0,
    VehicleCategory.SCOOTER: 10.0,
    VehicleCategory.VAN: 50.0,
    VehicleCategory.BUS: 50.0,
}


def hourly_rate(category: "str | VehicleCategory") -> float:
    """Rate per hour in Rs; raises UnknownVehicleCategory for anything off the table."""
    return HOURLY_RATES[VehicleCategory.parse(category)]
