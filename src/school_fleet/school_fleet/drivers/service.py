from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import expiry_level
from ..common.validators import require_iso_date, require_min_length
from ..core.constants import DEFAULT_AVAILABILITY, DEFAULT_EXPIRY_WARNING_DAYS, DEFAULT_LOCATION, avatar_url
from ..core.enums import ExpiryLevel, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..fleet.model import Vehicle
from ..fleet.repository import MaintenanceLogRepository, VehicleRepository
from ..reports.summary import LogSummary, summarize_logs
from .model import Driver
from .repository import DriverRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriverOverview:
    driver: Driver
    vehicle: Optional[Vehicle]
    license_level: ExpiryLevel


@dataclass(frozen=True)
class DriverInsights:
    driver: Driver
    vehicle: Optional[Vehicle]
    summary: Optional[LogSummary]


class DriverService:
    def __init__(
        self,
        drivers: DriverRepository,
        vehicles: VehicleRepository,
        logs: MaintenanceLogRepository,
        *,
        expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
    ):
        self._drivers = drivers
        self._vehicles = vehicles
        self._logs = logs
        self._warning_days = int(expiry_warning_days)

    def add_driver(
        self,
        *,
        current_role: Role,
        name: str,
        contact: str,
        license_number: str,
        license_expiry: str,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can add drivers.")

        name = require_min_length(name, "Name", 2)
        contact = require_min_length(contact, "Contact number", 10)
        license_number = require_min_length(license_number, "License number", 5)
        expiry = require_iso_date(license_expiry, "License expiry")

        driver_id = self._drivers.create(
            user_id=None,
            name=name,
            email=None,
            avatar_url=avatar_url(f"driver{self._drivers.count() + 1}"),
            current_location=DEFAULT_LOCATION,
            availability=DEFAULT_AVAILABILITY,
            license_number=license_number,
            license_expiry=expiry,
            contact=contact,
        )
        logger.info("Driver %s added", driver_id)
        return driver_id

    def list_overview(self, today: date) -> list[DriverOverview]:
        out: list[DriverOverview] = []
        for d in self._drivers.list_all():
            vehicle = self._vehicles.get_by_id(d.assigned_vehicle_id) if d.is_assigned else None
            out.append(
                DriverOverview(
                    driver=d,
                    vehicle=vehicle,
                    license_level=expiry_level(d.license_expiry, today, self._warning_days),
                )
            )
        return out

    def get(self, driver_id: int) -> Driver:
        driver = self._drivers.get_by_id(int(driver_id))
        if not driver:
            raise NotFoundError("Driver not found.")
        return driver

    def get_by_user(self, user_id: int) -> Optional[Driver]:
        return self._drivers.get_by_user(int(user_id))

    def insights(self, driver_id: int) -> DriverInsights:
        """Driver, assigned vehicle and that vehicle's log totals."""
        driver = self.get(driver_id)
        if not driver.is_assigned:
            return DriverInsights(driver=driver, vehicle=None, summary=None)

        vehicle = self._vehicles.get_by_id(driver.assigned_vehicle_id)
        summary = summarize_logs(self._logs.list_for_vehicle(driver.assigned_vehicle_id)) if vehicle else None
        return DriverInsights(driver=driver, vehicle=vehicle, summary=summary)
