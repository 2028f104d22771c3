from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LocationStatus
from .model import MaintenanceLog, Route, Vehicle


class VehicleRepository(Protocol):
    def list_all(self) -> Sequence[Vehicle]:
        raise NotImplementedError

    def get_by_id(self, vehicle_id: int) -> Optional[Vehicle]:
        raise NotImplementedError

    def get_by_plate(self, license_plate: str) -> Optional[Vehicle]:
        raise NotImplementedError

    def list_by_route(self, route_id: int) -> Sequence[Vehicle]:
        raise NotImplementedError

    def create(
        self,
        *,
        model: str,
        license_plate: str,
        chassis_number: Optional[str],
        image_url: str,
        current_location: str,
        fitness_certificate_expiry: Optional[date],
        insurance_expiry: Optional[date],
        pollution_certificate_expiry: Optional[date],
        fitness_certificate_photo: Optional[str],
        insurance_photo: Optional[str],
        pollution_certificate_photo: Optional[str],
    ) -> int:
        raise NotImplementedError

    def set_available(self, *, vehicle_id: int, is_available: bool) -> bool:
        raise NotImplementedError

    def assign_route(self, *, vehicle_id: int, route_id: int) -> bool:
        """Put the vehicle at the first stop of a route."""

        raise NotImplementedError

    def update_progress(
        self,
        *,
        vehicle_id: int,
        current_stop_index: int,
        location_status: LocationStatus,
        status_notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def set_today_km(self, *, vehicle_id: int, opening_km: float, closing_km: Optional[float]) -> bool:
        raise NotImplementedError


class RouteRepository(Protocol):
    def list_all(self) -> Sequence[Route]:
        raise NotImplementedError

    def get_by_id(self, route_id: int) -> Optional[Route]:
        raise NotImplementedError

    def create(self, *, name: str, stops: Sequence[str]) -> int:
        raise NotImplementedError


class MaintenanceLogRepository(Protocol):
    def list_for_vehicle(self, vehicle_id: int) -> Sequence[MaintenanceLog]:
        """Oldest first."""

        raise NotImplementedError

    def list_all(self) -> Sequence[MaintenanceLog]:
        raise NotImplementedError

    def add(
        self,
        *,
        vehicle_id: int,
        log_date: date,
        opening_km: float,
        closing_km: Optional[float],
        fuel_liters: Optional[float],
        fuel_cost: Optional[float],
        maintenance_cost: Optional[float],
        notes: Optional[str],
        created_by: Optional[int],
    ) -> int:
        raise NotImplementedError
