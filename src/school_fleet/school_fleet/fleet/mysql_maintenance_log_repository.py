from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_float, db_cursor, fetchall
from .model import MaintenanceLog
from .repository import MaintenanceLogRepository

_COLUMNS = "log_id, vehicle_id, log_date, opening_km, closing_km, fuel_liters, fuel_cost, maintenance_cost, notes"


def _row_to_log(r: dict) -> MaintenanceLog:
    return MaintenanceLog(
        log_id=int(r["log_id"]),
        vehicle_id=int(r["vehicle_id"]),
        log_date=as_date(r["log_date"]),
        opening_km=float(r["opening_km"]),
        closing_km=as_float(r.get("closing_km")),
        fuel_liters=as_float(r.get("fuel_liters")),
        fuel_cost=as_float(r.get("fuel_cost")),
        maintenance_cost=as_float(r.get("maintenance_cost")),
        notes=r.get("notes"),
    )


class MySQLMaintenanceLogRepository(MaintenanceLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_vehicle(self, vehicle_id: int) -> Sequence[MaintenanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM maintenance_logs WHERE vehicle_id=%s ORDER BY log_date ASC, log_id ASC",
                (int(vehicle_id),),
            )
            return [_row_to_log(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[MaintenanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM maintenance_logs ORDER BY log_date ASC, log_id ASC")
            return [_row_to_log(r) for r in fetchall(cur)]

    def add(
        self,
        *,
        vehicle_id: int,
        log_date: date,
        opening_km: float,
        closing_km: Optional[float],
        fuel_liters: Optional[float],
        fuel_cost: Optional[float],
        maintenance_cost: Optional[float],
        notes: Optional[str],
        created_by: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO maintenance_logs(
                    vehicle_id, log_date, opening_km, closing_km,
                    fuel_liters, fuel_cost, maintenance_cost, notes, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(vehicle_id),
                    log_date,
                    opening_km,
                    closing_km,
                    fuel_liters,
                    fuel_cost,
                    maintenance_cost,
                    notes,
                    created_by,
                ),
            )
            return int(cur.lastrowid)
