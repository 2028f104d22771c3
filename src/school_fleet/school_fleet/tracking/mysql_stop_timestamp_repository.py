from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..fleet.model import StopTimestamp
from .repository import StopTimestampRepository


class MySQLStopTimestampRepository(StopTimestampRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_vehicle(self, vehicle_id: int) -> Sequence[StopTimestamp]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT stop_name, arrival_time, departure_time
                FROM stop_timestamps
                WHERE vehicle_id=%s
                ORDER BY position ASC
                """,
                (int(vehicle_id),),
            )
            return [
                StopTimestamp(
                    stop=r["stop_name"],
                    arrival_time=r.get("arrival_time"),
                    departure_time=r.get("departure_time"),
                )
                for r in fetchall(cur)
            ]

    def set_arrival(self, *, vehicle_id: int, stop: str, position: int, arrival_time: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO stop_timestamps(vehicle_id, stop_name, position, arrival_time)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE arrival_time=VALUES(arrival_time), position=VALUES(position)
                """,
                (int(vehicle_id), stop, int(position), arrival_time),
            )

    def set_departure(self, *, vehicle_id: int, stop: str, position: int, departure_time: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO stop_timestamps(vehicle_id, stop_name, position, departure_time)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE departure_time=VALUES(departure_time), position=VALUES(position)
                """,
                (int(vehicle_id), stop, int(position), departure_time),
            )

    def clear(self, vehicle_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM stop_timestamps WHERE vehicle_id=%s", (int(vehicle_id),))
