from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import Role
from ..drivers.model import Driver
from ..drivers.repository import DriverRepository
from ..fleet.model import Route, Vehicle
from ..fleet.repository import RouteRepository, VehicleRepository
from ..school.model import Parent
from ..school.repository import ParentRepository, StudentRepository
from ..tracking.progress import RouteProgress
from ..tracking.service import RouteProgressService


@dataclass(frozen=True)
class ActiveVehicle:
    vehicle: Vehicle
    driver: Optional[Driver]
    progress: Optional[RouteProgress]


@dataclass(frozen=True)
class RiderView:
    """What a parent (or their student) sees about the bus they ride."""

    parent: Optional[Parent]
    route: Optional[Route] = None
    vehicle: Optional[Vehicle] = None
    driver: Optional[Driver] = None
    progress: Optional[RouteProgress] = None

    @property
    def needs_stop(self) -> bool:
        return self.parent is None or not self.parent.nearest_stop or self.parent.assigned_route_id is None


@dataclass(frozen=True)
class Dashboard:
    role: Role
    data: dict[str, Any] = field(default_factory=dict)


class DashboardService:
    def __init__(
        self,
        drivers: DriverRepository,
        vehicles: VehicleRepository,
        routes: RouteRepository,
        parents: ParentRepository,
        students: StudentRepository,
        progress: RouteProgressService,
    ):
        self._drivers = drivers
        self._vehicles = vehicles
        self._routes = routes
        self._parents = parents
        self._students = students
        self._progress = progress

    def for_user(self, *, role: Role, user_id: int) -> Dashboard:
        if role == Role.ADMIN:
            return Dashboard(role=role, data=self._admin())
        if role == Role.DRIVER:
            return Dashboard(role=role, data=self._driver(user_id))
        if role == Role.PARENT:
            return Dashboard(role=role, data={"rider": self._rider(self._parents.get_by_user(int(user_id)))})
        if role == Role.STUDENT:
            student = self._students.get_by_user(int(user_id))
            parent = self._parents.get_by_id(student.parent_id) if student and student.parent_id else None
            return Dashboard(role=role, data={"student": student, "rider": self._rider(parent)})
        return Dashboard(role=role)

    def _admin(self) -> dict[str, Any]:
        drivers = self._drivers.list_all()
        vehicles = self._vehicles.list_all()

        active: list[ActiveVehicle] = []
        for v in vehicles:
            if v.is_available or v.route_id is None:
                continue
            active.append(
                ActiveVehicle(
                    vehicle=v,
                    driver=self._drivers.get_by_vehicle(v.vehicle_id),
                    progress=self._progress.progress(v),
                )
            )

        return {
            "total_drivers": len(drivers),
            "total_vehicles": len(vehicles),
            "available_vehicles": sum(1 for v in vehicles if v.is_available),
            "unassigned_drivers": sum(1 for d in drivers if not d.is_assigned),
            "active_vehicles": active,
        }

    def _driver(self, user_id: int) -> dict[str, Any]:
        driver = self._drivers.get_by_user(int(user_id))
        vehicle = self._vehicles.get_by_id(driver.assigned_vehicle_id) if driver and driver.is_assigned else None
        route = self._routes.get_by_id(vehicle.route_id) if vehicle and vehicle.route_id else None
        return {
            "driver": driver,
            "vehicle": vehicle,
            "route": route,
            "progress": self._progress.progress(vehicle) if vehicle else None,
        }

    def _rider(self, parent: Optional[Parent]) -> RiderView:
        if parent is None or not parent.nearest_stop or parent.assigned_route_id is None:
            return RiderView(parent=parent)

        route = self._routes.get_by_id(parent.assigned_route_id)
        vehicles = list(self._vehicles.list_by_route(parent.assigned_route_id)) if route else []
        vehicle = vehicles[0] if vehicles else None
        if vehicle is None:
            return RiderView(parent=parent, route=route)

        return RiderView(
            parent=parent,
            route=route,
            vehicle=vehicle,
            driver=self._drivers.get_by_vehicle(vehicle.vehicle_id),
            progress=self._progress.progress(vehicle, highlight_stop=parent.nearest_stop),
        )
