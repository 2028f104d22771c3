from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LocationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_float, db_cursor, fetchall, fetchone
from .model import Vehicle
from .repository import VehicleRepository

_COLUMNS = (
    "vehicle_id, model, license_plate, chassis_number, image_url, current_location, "
    "maintenance_schedule, is_available, opening_km_today, closing_km_today, "
    "fitness_certificate_expiry, insurance_expiry, pollution_certificate_expiry, "
    "fitness_certificate_photo, insurance_photo, pollution_certificate_photo, "
    "route_id, current_stop_index, location_status, status_notes"
)


def _row_to_vehicle(r: dict) -> Vehicle:
    return Vehicle(
        vehicle_id=int(r["vehicle_id"]),
        model=r["model"],
        license_plate=r["license_plate"],
        chassis_number=r.get("chassis_number"),
        image_url=r["image_url"],
        current_location=r["current_location"],
        maintenance_schedule=r.get("maintenance_schedule") or "",
        is_available=bool(r["is_available"]),
        opening_km_today=as_float(r.get("opening_km_today")),
        closing_km_today=as_float(r.get("closing_km_today")),
        fitness_certificate_expiry=as_date(r.get("fitness_certificate_expiry")),
        insurance_expiry=as_date(r.get("insurance_expiry")),
        pollution_certificate_expiry=as_date(r.get("pollution_certificate_expiry")),
        fitness_certificate_photo=r.get("fitness_certificate_photo"),
        insurance_photo=r.get("insurance_photo"),
        pollution_certificate_photo=r.get("pollution_certificate_photo"),
        route_id=int(r["route_id"]) if r.get("route_id") is not None else None,
        current_stop_index=int(r.get("current_stop_index") or 0),
        location_status=LocationStatus(r.get("location_status") or LocationStatus.AT_STOP.value),
        status_notes=r.get("status_notes"),
    )


class MySQLVehicleRepository(VehicleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Vehicle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM vehicles ORDER BY model ASC, vehicle_id ASC")
            return [_row_to_vehicle(r) for r in fetchall(cur)]

    def get_by_id(self, vehicle_id: int) -> Optional[Vehicle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM vehicles WHERE vehicle_id=%s", (int(vehicle_id),))
            row = fetchone(cur)
            return _row_to_vehicle(row) if row else None

    def get_by_plate(self, license_plate: str) -> Optional[Vehicle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM vehicles WHERE license_plate=%s", (license_plate.strip().upper(),))
            row = fetchone(cur)
            return _row_to_vehicle(row) if row else None

    def list_by_route(self, route_id: int) -> Sequence[Vehicle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM vehicles WHERE route_id=%s ORDER BY vehicle_id ASC",
                (int(route_id),),
            )
            return [_row_to_vehicle(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        model: str,
        license_plate: str,
        chassis_number: Optional[str],
        image_url: str,
        current_location: str,
        fitness_certificate_expiry: Optional[date],
        insurance_expiry: Optional[date],
        pollution_certificate_expiry: Optional[date],
        fitness_certificate_photo: Optional[str],
        insurance_photo: Optional[str],
        pollution_certificate_photo: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vehicles(
                    model, license_plate, chassis_number, image_url, current_location,
                    maintenance_schedule, is_available,
                    fitness_certificate_expiry, insurance_expiry, pollution_certificate_expiry,
                    fitness_certificate_photo, insurance_photo, pollution_certificate_photo,
                    current_stop_index, location_status
                )
                VALUES(%s,%s,%s,%s,%s,'',1,%s,%s,%s,%s,%s,%s,0,%s)
                """,
                (
                    model,
                    license_plate,
                    chassis_number,
                    image_url,
                    current_location,
                    fitness_certificate_expiry,
                    insurance_expiry,
                    pollution_certificate_expiry,
                    fitness_certificate_photo,
                    insurance_photo,
                    pollution_certificate_photo,
                    LocationStatus.AT_STOP.value,
                ),
            )
            return int(cur.lastrowid)

    def set_available(self, *, vehicle_id: int, is_available: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE vehicles SET is_available=%s WHERE vehicle_id=%s",
                (1 if is_available else 0, int(vehicle_id)),
            )
            return cur.rowcount > 0

    def assign_route(self, *, vehicle_id: int, route_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vehicles
                SET route_id=%s, current_stop_index=0, location_status=%s, status_notes=NULL
                WHERE vehicle_id=%s
                """,
                (int(route_id), LocationStatus.AT_STOP.value, int(vehicle_id)),
            )
            return cur.rowcount > 0

    def update_progress(
        self,
        *,
        vehicle_id: int,
        current_stop_index: int,
        location_status: LocationStatus,
        status_notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vehicles
                SET current_stop_index=%s, location_status=%s, status_notes=%s
                WHERE vehicle_id=%s
                """,
                (int(current_stop_index), location_status.value, status_notes, int(vehicle_id)),
            )
            return cur.rowcount > 0

    def set_today_km(self, *, vehicle_id: int, opening_km: float, closing_km: Optional[float]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE vehicles SET opening_km_today=%s, closing_km_today=%s WHERE vehicle_id=%s",
                (opening_km, closing_km, int(vehicle_id)),
            )
            return cur.rowcount > 0
