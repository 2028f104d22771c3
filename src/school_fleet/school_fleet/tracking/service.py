from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.validators import require_non_empty
from ..core.constants import STOP_TIME_FORMAT
from ..core.enums import LocationStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..drivers.repository import DriverRepository
from ..fleet.model import Route, Vehicle
from ..fleet.repository import RouteRepository, VehicleRepository
from .progress import RouteProgress, build_progress, current_index
from .repository import StopTimestampRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Trip:
    vehicle: Vehicle
    route: Route
    index: int

    @property
    def stop(self) -> str:
        return self.route.stops[self.index]


class RouteProgressService:
    """Moves the driver's vehicle through the stops of its route.

    AT_STOP --depart--> IN_TRANSIT --reached--> AT_STOP, and any state can
    go to ISSUE_REPORTED. An issue is cleared only by marking the stop as
    reached.
    """

    def __init__(
        self,
        drivers: DriverRepository,
        vehicles: VehicleRepository,
        routes: RouteRepository,
        timestamps: StopTimestampRepository,
    ):
        self._drivers = drivers
        self._vehicles = vehicles
        self._routes = routes
        self._timestamps = timestamps

    def _trip_for(self, *, current_role: Role, user_id: int) -> _Trip:
        if current_role != Role.DRIVER:
            raise AuthorizationError("Only drivers can update route progress.")

        driver = self._drivers.get_by_user(int(user_id))
        if not driver or driver.assigned_vehicle_id is None:
            raise ValidationError("No vehicle is assigned to you.")

        vehicle = self._vehicles.get_by_id(driver.assigned_vehicle_id)
        if not vehicle:
            raise ValidationError("No vehicle is assigned to you.")
        if vehicle.route_id is None:
            raise ValidationError("Your vehicle has no route assigned.")

        route = self._routes.get_by_id(vehicle.route_id)
        if not route or not route.stops:
            raise ValidationError("Your vehicle's route has no stops.")

        return _Trip(vehicle=vehicle, route=route, index=current_index(vehicle, route))

    def mark_reached(self, *, current_role: Role, user_id: int, now: datetime) -> None:
        trip = self._trip_for(current_role=current_role, user_id=user_id)

        self._timestamps.set_arrival(
            vehicle_id=trip.vehicle.vehicle_id,
            stop=trip.stop,
            position=trip.index,
            arrival_time=now.strftime(STOP_TIME_FORMAT),
        )
        self._vehicles.update_progress(
            vehicle_id=trip.vehicle.vehicle_id,
            current_stop_index=trip.index,
            location_status=LocationStatus.AT_STOP,
            status_notes=None,
        )
        logger.info("Vehicle %s reached stop %s (%s)", trip.vehicle.vehicle_id, trip.index, trip.stop)

    def depart(self, *, current_role: Role, user_id: int, now: datetime) -> None:
        trip = self._trip_for(current_role=current_role, user_id=user_id)

        if trip.vehicle.location_status == LocationStatus.ISSUE_REPORTED:
            raise ValidationError("An issue is reported. Mark the stop as reached before departing.")
        if trip.vehicle.location_status != LocationStatus.AT_STOP:
            raise ValidationError("Mark the stop as reached before departing.")
        if trip.index >= len(trip.route.stops) - 1:
            raise ValidationError("Already at the last stop. Return trips are not supported.")

        self._timestamps.set_departure(
            vehicle_id=trip.vehicle.vehicle_id,
            stop=trip.stop,
            position=trip.index,
            departure_time=now.strftime(STOP_TIME_FORMAT),
        )
        self._vehicles.update_progress(
            vehicle_id=trip.vehicle.vehicle_id,
            current_stop_index=trip.index + 1,
            location_status=LocationStatus.IN_TRANSIT,
            status_notes=trip.vehicle.status_notes,
        )
        logger.info("Vehicle %s departed %s towards %s", trip.vehicle.vehicle_id, trip.stop, trip.route.stops[trip.index + 1])

    def report_issue(self, *, current_role: Role, user_id: int, note: str) -> None:
        note = require_non_empty(note, "Issue description")
        trip = self._trip_for(current_role=current_role, user_id=user_id)

        self._vehicles.update_progress(
            vehicle_id=trip.vehicle.vehicle_id,
            current_stop_index=trip.index,
            location_status=LocationStatus.ISSUE_REPORTED,
            status_notes=note,
        )
        logger.warning("Vehicle %s reported an issue near %s: %s", trip.vehicle.vehicle_id, trip.stop, note)

    def progress(self, vehicle: Vehicle, *, highlight_stop: Optional[str] = None) -> Optional[RouteProgress]:
        if vehicle.route_id is None:
            return None
        route = self._routes.get_by_id(vehicle.route_id)
        if not route or not route.stops:
            return None
        return build_progress(
            vehicle,
            route,
            self._timestamps.list_for_vehicle(vehicle.vehicle_id),
            highlight_stop=highlight_stop,
        )

    def status(self, vehicle_id: int) -> dict:
        vehicle = self._vehicles.get_by_id(int(vehicle_id))
        if not vehicle:
            raise NotFoundError("Vehicle not found.")

        payload = {
            "vehicle_id": vehicle.vehicle_id,
            "model": vehicle.model,
            "license_plate": vehicle.license_plate,
            "status": vehicle.location_status.value,
            "status_label": vehicle.location_status.label,
            "status_notes": vehicle.status_notes,
            "progress": None,
        }
        p = self.progress(vehicle)
        if p:
            payload["progress"] = p.to_dict()
        return payload
