from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import LocationStatus


@dataclass(frozen=True)
class Vehicle:
    """A school bus and where it currently is on its route."""

    vehicle_id: int
    model: str
    license_plate: str
    chassis_number: Optional[str]
    image_url: str
    current_location: str
    maintenance_schedule: str
    is_available: bool
    opening_km_today: Optional[float] = None
    closing_km_today: Optional[float] = None
    fitness_certificate_expiry: Optional[date] = None
    insurance_expiry: Optional[date] = None
    pollution_certificate_expiry: Optional[date] = None
    fitness_certificate_photo: Optional[str] = None
    insurance_photo: Optional[str] = None
    pollution_certificate_photo: Optional[str] = None
    route_id: Optional[int] = None
    current_stop_index: int = 0
    location_status: LocationStatus = LocationStatus.AT_STOP
    status_notes: Optional[str] = None

    def certificate_expiries(self) -> dict[str, Optional[date]]:
        return {
            "fitness": self.fitness_certificate_expiry,
            "insurance": self.insurance_expiry,
            "pollution": self.pollution_certificate_expiry,
        }


@dataclass(frozen=True)
class MaintenanceLog:
    log_id: int
    vehicle_id: int
    log_date: date
    opening_km: float
    closing_km: Optional[float] = None
    fuel_liters: Optional[float] = None
    fuel_cost: Optional[float] = None
    maintenance_cost: Optional[float] = None
    notes: Optional[str] = None

    @property
    def distance_km(self) -> float:
        if self.closing_km is None:
            return 0.0
        return float(self.closing_km) - float(self.opening_km)


@dataclass(frozen=True)
class Route:
    route_id: int
    name: str
    stops: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Assignment:
    """Suggested driver/vehicle pairing."""

    driver_id: int
    vehicle_id: int
    reason: str


@dataclass(frozen=True)
class StopTimestamp:
    """Arrival/departure clock times of a vehicle at one stop, e.g. "07:45 AM"."""

    stop: str
    arrival_time: Optional[str] = None
    departure_time: Optional[str] = None
