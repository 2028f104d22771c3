from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Driver:
    driver_id: int
    user_id: Optional[int]
    name: str
    email: Optional[str]
    avatar_url: str
    current_location: str
    availability: str
    assigned_vehicle_id: Optional[int]
    license_number: str
    license_expiry: Optional[date]
    contact: str

    @property
    def is_assigned(self) -> bool:
        return self.assigned_vehicle_id is not None
