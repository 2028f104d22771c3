from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import expiry_level
from ..common.validators import optional_iso_date, require_min_length, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_EXPIRY_WARNING_DAYS, DEFAULT_LOCATION
from ..core.enums import ExpiryLevel, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..drivers.model import Driver
from ..drivers.repository import DriverRepository
from ..reports.summary import LogSummary, MonthlyRow, monthly_breakdown, summarize_logs
from ..tracking.repository import StopTimestampRepository
from .model import Assignment, MaintenanceLog, Route, Vehicle
from .repository import MaintenanceLogRepository, RouteRepository, VehicleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VehicleOverview:
    vehicle: Vehicle
    driver: Optional[Driver]
    expiry_levels: dict[str, ExpiryLevel]


@dataclass(frozen=True)
class VehicleDetails:
    vehicle: Vehicle
    driver: Optional[Driver]
    route: Optional[Route]
    summary: LogSummary
    monthly: list[MonthlyRow]
    logs: list[MaintenanceLog] = field(default_factory=list)


class VehicleService:
    def __init__(
        self,
        vehicles: VehicleRepository,
        drivers: DriverRepository,
        logs: MaintenanceLogRepository,
        routes: RouteRepository,
        *,
        expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
    ):
        self._vehicles = vehicles
        self._drivers = drivers
        self._logs = logs
        self._routes = routes
        self._warning_days = int(expiry_warning_days)

    def check_new_vehicle(
        self,
        *,
        current_role: Role,
        model: str,
        license_plate: str,
        chassis_number: str,
        has_image: bool,
        fitness_certificate_expiry: str = "",
        insurance_expiry: str = "",
        pollution_certificate_expiry: str = "",
    ) -> dict:
        """Validate a new vehicle without saving anything.

        Called before uploads are stored so a rejected form leaves no files.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can add vehicles.")

        model = require_min_length(model, "Vehicle model", 2)
        license_plate = require_min_length(license_plate, "License plate", 3).upper()
        if not has_image:
            raise ValidationError("A vehicle photo is required.")
        if self._vehicles.get_by_plate(license_plate):
            raise ValidationError("A vehicle with this license plate already exists.")

        return {
            "model": model,
            "license_plate": license_plate,
            "chassis_number": (chassis_number or "").strip() or None,
            "fitness_certificate_expiry": optional_iso_date(fitness_certificate_expiry, "Fitness certificate expiry"),
            "insurance_expiry": optional_iso_date(insurance_expiry, "Insurance expiry"),
            "pollution_certificate_expiry": optional_iso_date(
                pollution_certificate_expiry, "Pollution certificate expiry"
            ),
        }

    def add_vehicle(
        self,
        *,
        current_role: Role,
        model: str,
        license_plate: str,
        chassis_number: str,
        image_url: Optional[str],
        fitness_certificate_expiry: str = "",
        insurance_expiry: str = "",
        pollution_certificate_expiry: str = "",
        fitness_certificate_photo: Optional[str] = None,
        insurance_photo: Optional[str] = None,
        pollution_certificate_photo: Optional[str] = None,
    ) -> int:
        cleaned = self.check_new_vehicle(
            current_role=current_role,
            model=model,
            license_plate=license_plate,
            chassis_number=chassis_number,
            has_image=bool(image_url),
            fitness_certificate_expiry=fitness_certificate_expiry,
            insurance_expiry=insurance_expiry,
            pollution_certificate_expiry=pollution_certificate_expiry,
        )
        license_plate = cleaned["license_plate"]

        vehicle_id = self._vehicles.create(
            **cleaned,
            image_url=image_url,
            current_location=DEFAULT_LOCATION,
            fitness_certificate_photo=fitness_certificate_photo,
            insurance_photo=insurance_photo,
            pollution_certificate_photo=pollution_certificate_photo,
        )
        logger.info("Vehicle %s added (%s)", vehicle_id, license_plate)
        return vehicle_id

    def expiry_levels(self, vehicle: Vehicle, today: date) -> dict[str, ExpiryLevel]:
        return {
            name: expiry_level(day, today, self._warning_days)
            for name, day in vehicle.certificate_expiries().items()
        }

    def list_overview(self, today: date) -> list[VehicleOverview]:
        return [
            VehicleOverview(
                vehicle=v,
                driver=self._drivers.get_by_vehicle(v.vehicle_id),
                expiry_levels=self.expiry_levels(v, today),
            )
            for v in self._vehicles.list_all()
        ]

    def details(self, vehicle_id: int) -> VehicleDetails:
        vehicle = self._vehicles.get_by_id(int(vehicle_id))
        if not vehicle:
            raise NotFoundError("Vehicle not found.")

        logs = list(self._logs.list_for_vehicle(vehicle.vehicle_id))
        return VehicleDetails(
            vehicle=vehicle,
            driver=self._drivers.get_by_vehicle(vehicle.vehicle_id),
            route=self._routes.get_by_id(vehicle.route_id) if vehicle.route_id else None,
            summary=summarize_logs(logs),
            monthly=monthly_breakdown(logs),
            logs=sorted(logs, key=lambda x: (x.log_date, x.log_id), reverse=True),
        )


class MaintenanceService:
    """Daily odometer/fuel/cost log kept by the driver of a vehicle."""

    def __init__(self, vehicles: VehicleRepository, drivers: DriverRepository, logs: MaintenanceLogRepository):
        self._vehicles = vehicles
        self._drivers = drivers
        self._logs = logs

    def vehicle_for_driver(self, user_id: int) -> Optional[Vehicle]:
        driver = self._drivers.get_by_user(int(user_id))
        if not driver or driver.assigned_vehicle_id is None:
            return None
        return self._vehicles.get_by_id(driver.assigned_vehicle_id)

    def default_opening_km(self, vehicle: Vehicle) -> float:
        logs = self._logs.list_for_vehicle(vehicle.vehicle_id)
        if logs:
            last = max(logs, key=lambda x: (x.log_date, x.log_id))
            if last.closing_km is not None:
                return float(last.closing_km)
        if vehicle.opening_km_today is not None:
            return float(vehicle.opening_km_today)
        return 0.0

    def log_entry(
        self,
        *,
        current_role: Role,
        user_id: int,
        opening_km: Optional[float],
        closing_km: Optional[float],
        fuel_liters: Optional[float],
        fuel_cost: Optional[float],
        maintenance_cost: Optional[float],
        notes: str,
        today: date,
    ) -> int:
        if current_role != Role.DRIVER:
            raise AuthorizationError("Only drivers can log vehicle maintenance.")

        vehicle = self.vehicle_for_driver(user_id)
        if not vehicle:
            raise ValidationError("No vehicle is assigned to you.")

        if opening_km is None:
            raise ValidationError("Opening mileage is required.")
        require_non_negative(opening_km, "Opening mileage")
        require_non_negative(closing_km, "Closing mileage")
        require_non_negative(fuel_liters, "Fuel")
        require_non_negative(fuel_cost, "Fuel cost")
        require_non_negative(maintenance_cost, "Maintenance cost")
        if closing_km is not None and closing_km < opening_km:
            raise ValidationError("Closing mileage must be greater than or equal to opening mileage.")

        log_id = self._logs.add(
            vehicle_id=vehicle.vehicle_id,
            log_date=today,
            opening_km=float(opening_km),
            closing_km=closing_km,
            fuel_liters=fuel_liters,
            fuel_cost=fuel_cost,
            maintenance_cost=maintenance_cost,
            notes=(notes or "").strip() or None,
            created_by=int(user_id),
        )
        self._vehicles.set_today_km(vehicle_id=vehicle.vehicle_id, opening_km=float(opening_km), closing_km=closing_km)
        logger.info("Maintenance log %s recorded for vehicle %s", log_id, vehicle.vehicle_id)
        return log_id


@dataclass(frozen=True)
class RouteWithVehicles:
    route: Route
    vehicles: list[Vehicle]


class RouteService:
    def __init__(self, routes: RouteRepository, vehicles: VehicleRepository, timestamps: StopTimestampRepository):
        self._routes = routes
        self._vehicles = vehicles
        self._timestamps = timestamps

    @staticmethod
    def clean_stops(stops: Sequence[str]) -> list[str]:
        """Trim, drop blanks and drop repeats while keeping the first occurrence."""
        out: list[str] = []
        for s in stops:
            s = (s or "").strip()
            if s and s not in out:
                out.append(s)
        return out

    def create_and_assign(self, *, current_role: Role, name: str, stops: Sequence[str], vehicle_id: int) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can create routes.")

        name = require_non_empty(name, "Route name")
        cleaned = self.clean_stops(stops)
        if not cleaned:
            raise ValidationError("A route needs at least one stop.")

        vehicle = self._vehicles.get_by_id(int(vehicle_id))
        if not vehicle:
            raise ValidationError("Please select a vehicle for this route.")

        route_id = self._routes.create(name=name, stops=cleaned)
        if not self._vehicles.assign_route(vehicle_id=vehicle.vehicle_id, route_id=route_id):
            raise ValidationError("Assigning the route to the vehicle failed.")
        self._timestamps.clear(vehicle.vehicle_id)

        logger.info("Route %s (%s stops) assigned to vehicle %s", route_id, len(cleaned), vehicle.vehicle_id)
        return route_id

    def list_with_vehicles(self) -> list[RouteWithVehicles]:
        return [RouteWithVehicles(route=r, vehicles=list(self._vehicles.list_by_route(r.route_id))) for r in self._routes.list_all()]

    def all_stops(self) -> list[str]:
        out: list[str] = []
        for r in self._routes.list_all():
            for s in r.stops:
                if s not in out:
                    out.append(s)
        return out


@dataclass(frozen=True)
class AssignmentOverview:
    unassigned_drivers: list[Driver]
    available_vehicles: list[Vehicle]
    assigned: list[tuple[Driver, Optional[Vehicle]]]


class AssignmentService:
    def __init__(
        self,
        drivers: DriverRepository,
        vehicles: VehicleRepository,
        *,
        expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
    ):
        self._drivers = drivers
        self._vehicles = vehicles
        self._warning_days = int(expiry_warning_days)

    def overview(self) -> AssignmentOverview:
        drivers = self._drivers.list_all()
        return AssignmentOverview(
            unassigned_drivers=[d for d in drivers if not d.is_assigned],
            available_vehicles=[v for v in self._vehicles.list_all() if v.is_available],
            assigned=[(d, self._vehicles.get_by_id(d.assigned_vehicle_id)) for d in drivers if d.is_assigned],
        )

    def assign(self, *, current_role: Role, driver_id: int, vehicle_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can assign vehicles.")

        driver = self._drivers.get_by_id(int(driver_id))
        if not driver:
            raise ValidationError("Driver not found.")
        if driver.is_assigned:
            raise ValidationError(f"{driver.name} already has a vehicle assigned.")

        vehicle = self._vehicles.get_by_id(int(vehicle_id))
        if not vehicle:
            raise ValidationError("Vehicle not found.")
        if not vehicle.is_available:
            raise ValidationError(f"{vehicle.model} ({vehicle.license_plate}) is not available.")

        if not self._drivers.set_assigned_vehicle(driver_id=driver.driver_id, vehicle_id=vehicle.vehicle_id):
            raise ValidationError("Assignment failed.")
        self._vehicles.set_available(vehicle_id=vehicle.vehicle_id, is_available=False)
        logger.info("Driver %s assigned to vehicle %s", driver.driver_id, vehicle.vehicle_id)

    def release(self, *, current_role: Role, driver_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can release vehicles.")

        driver = self._drivers.get_by_id(int(driver_id))
        if not driver:
            raise ValidationError("Driver not found.")
        if not driver.is_assigned:
            raise ValidationError(f"{driver.name} has no vehicle assigned.")

        vehicle_id = int(driver.assigned_vehicle_id)
        self._drivers.set_assigned_vehicle(driver_id=driver.driver_id, vehicle_id=None)
        self._vehicles.set_available(vehicle_id=vehicle_id, is_available=True)
        logger.info("Driver %s released vehicle %s", driver.driver_id, vehicle_id)

    def suggest(self, today: date) -> list[Assignment]:
        """Pair unassigned drivers (name order) with available vehicles.

        Drivers with an expired license and vehicles with any expired
        certificate are left out.
        """
        drivers = sorted(
            (
                d
                for d in self._drivers.list_all()
                if not d.is_assigned
                and expiry_level(d.license_expiry, today, self._warning_days) != ExpiryLevel.EXPIRED
            ),
            key=lambda d: d.name.lower(),
        )
        vehicles = [
            v
            for v in self._vehicles.list_all()
            if v.is_available
            and all(
                expiry_level(day, today, self._warning_days) != ExpiryLevel.EXPIRED
                for day in v.certificate_expiries().values()
            )
        ]

        out: list[Assignment] = []
        for d, v in zip(drivers, vehicles):
            out.append(
                Assignment(
                    driver_id=d.driver_id,
                    vehicle_id=v.vehicle_id,
                    reason=f"{d.name} has a valid license and {v.model} ({v.license_plate}) is available with current certificates.",
                )
            )
        return out
