from __future__ import annotations

from typing import Protocol, Sequence

from ..fleet.model import StopTimestamp


class StopTimestampRepository(Protocol):
    def list_for_vehicle(self, vehicle_id: int) -> Sequence[StopTimestamp]:
        """Entries in route order."""

        raise NotImplementedError

    def set_arrival(self, *, vehicle_id: int, stop: str, position: int, arrival_time: str) -> None:
        """Create the stop's entry or overwrite its arrival time."""

        raise NotImplementedError

    def set_departure(self, *, vehicle_id: int, stop: str, position: int, departure_time: str) -> None:
        raise NotImplementedError

    def clear(self, vehicle_id: int) -> None:
        raise NotImplementedError
