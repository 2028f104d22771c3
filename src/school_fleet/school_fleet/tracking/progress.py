"""Read model of a vehicle's position along its route."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..core.constants import END_OF_ROUTE
from ..core.enums import LocationStatus
from ..fleet.model import Route, StopTimestamp, Vehicle


@dataclass(frozen=True)
class StopView:
    name: str
    position: int
    arrival_time: Optional[str]
    departure_time: Optional[str]
    passed: bool
    current: bool
    highlighted: bool


@dataclass(frozen=True)
class RouteProgress:
    vehicle_id: int
    route_id: int
    route_name: str
    current_index: int
    current_stop: str
    next_stop: str
    is_last_stop: bool
    status: LocationStatus
    status_notes: Optional[str]
    stops: list[StopView] = field(default_factory=list)

    @property
    def status_label(self) -> str:
        return self.status.label

    def to_dict(self) -> dict:
        return {
            "vehicle_id": self.vehicle_id,
            "route_id": self.route_id,
            "route_name": self.route_name,
            "current_index": self.current_index,
            "current_stop": self.current_stop,
            "next_stop": self.next_stop,
            "is_last_stop": self.is_last_stop,
            "status": self.status.value,
            "status_label": self.status_label,
            "status_notes": self.status_notes,
            "stops": [
                {
                    "name": s.name,
                    "arrival_time": s.arrival_time,
                    "departure_time": s.departure_time,
                    "passed": s.passed,
                    "current": s.current,
                }
                for s in self.stops
            ],
        }


def current_index(vehicle: Vehicle, route: Route) -> int:
    """Stop index clamped to the route; routes can be shorter than a stale index."""
    if not route.stops:
        return 0
    return max(0, min(int(vehicle.current_stop_index), len(route.stops) - 1))


def build_progress(
    vehicle: Vehicle,
    route: Route,
    timestamps: Sequence[StopTimestamp],
    *,
    highlight_stop: Optional[str] = None,
) -> RouteProgress:
    idx = current_index(vehicle, route)
    by_stop = {t.stop: t for t in timestamps}
    is_last = idx >= len(route.stops) - 1

    stops: list[StopView] = []
    for pos, name in enumerate(route.stops):
        ts = by_stop.get(name)
        stops.append(
            StopView(
                name=name,
                position=pos,
                arrival_time=ts.arrival_time if ts else None,
                departure_time=ts.departure_time if ts else None,
                passed=pos < idx,
                current=pos == idx,
                highlighted=highlight_stop is not None and name == highlight_stop,
            )
        )

    return RouteProgress(
        vehicle_id=vehicle.vehicle_id,
        route_id=route.route_id,
        route_name=route.name,
        current_index=idx,
        current_stop=route.stops[idx] if route.stops else END_OF_ROUTE,
        next_stop=END_OF_ROUTE if is_last else route.stops[idx + 1],
        is_last_stop=is_last,
        status=vehicle.location_status,
        status_notes=vehicle.status_notes,
        stops=stops,
    )
