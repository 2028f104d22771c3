from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Login account. Role records (driver, parent, ...) link to it by user_id."""

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
