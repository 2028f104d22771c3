from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Driver


class DriverRepository(Protocol):
    def list_all(self) -> Sequence[Driver]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def get_by_id(self, driver_id: int) -> Optional[Driver]:
        raise NotImplementedError

    def get_by_user(self, user_id: int) -> Optional[Driver]:
        raise NotImplementedError

    def get_by_vehicle(self, vehicle_id: int) -> Optional[Driver]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: Optional[int],
        name: str,
        email: Optional[str],
        avatar_url: str,
        current_location: str,
        availability: str,
        license_number: str,
        license_expiry: Optional[date],
        contact: str,
    ) -> int:
        raise NotImplementedError

    def set_assigned_vehicle(self, *, driver_id: int, vehicle_id: Optional[int]) -> bool:
        raise NotImplementedError
