from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import Driver
from .repository import DriverRepository

_COLUMNS = (
    "driver_id, user_id, name, email, avatar_url, current_location, availability, "
    "assigned_vehicle_id, license_number, license_expiry, contact"
)


def _row_to_driver(r: dict) -> Driver:
    return Driver(
        driver_id=int(r["driver_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        name=r["name"],
        email=r.get("email"),
        avatar_url=r["avatar_url"],
        current_location=r["current_location"],
        availability=r["availability"],
        assigned_vehicle_id=int(r["assigned_vehicle_id"]) if r.get("assigned_vehicle_id") is not None else None,
        license_number=r["license_number"],
        license_expiry=as_date(r.get("license_expiry")),
        contact=r["contact"],
    )


class MySQLDriverRepository(DriverRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Driver]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM drivers ORDER BY name ASC")
            return [_row_to_driver(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS cnt FROM drivers")
            row = fetchone(cur)
            return int(row["cnt"]) if row else 0

    def get_by_id(self, driver_id: int) -> Optional[Driver]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM drivers WHERE driver_id=%s", (int(driver_id),))
            row = fetchone(cur)
            return _row_to_driver(row) if row else None

    def get_by_user(self, user_id: int) -> Optional[Driver]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM drivers WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_driver(row) if row else None

    def get_by_vehicle(self, vehicle_id: int) -> Optional[Driver]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM drivers WHERE assigned_vehicle_id=%s", (int(vehicle_id),))
            row = fetchone(cur)
            return _row_to_driver(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO drivers(
                    user_id, name, email, avatar_url, current_location, availability,
                    license_number, license_expiry, contact
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user_id,
                    name,
                    email,
                    avatar_url,
                    current_location,
                    availability,
                    license_number,
                    license_expiry,
                    contact,
                ),
            )
            return int(cur.lastrowid)

    def set_assigned_vehicle(self, *, driver_id: int, vehicle_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE drivers SET assigned_vehicle_id=%s WHERE driver_id=%s",
                (int(vehicle_id) if vehicle_id is not None else None, int(driver_id)),
            )
            return cur.rowcount > 0
