from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Route
from .repository import RouteRepository


class MySQLRouteRepository(RouteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _stops_for(cur, route_ids: Sequence[int]) -> dict[int, list[str]]:
        stops: dict[int, list[str]] = {rid: [] for rid in route_ids}
        if not route_ids:
            return stops
        placeholders = ",".join(["%s"] * len(route_ids))
        cur.execute(
            f"""
            SELECT route_id, stop_name
            FROM route_stops
            WHERE route_id IN ({placeholders})
            ORDER BY route_id ASC, position ASC
            """,
            tuple(route_ids),
        )
        for r in fetchall(cur):
            stops[int(r["route_id"])].append(r["stop_name"])
        return stops

    def list_all(self) -> Sequence[Route]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT route_id, name FROM routes ORDER BY route_id ASC")
            rows = fetchall(cur)
            stops = self._stops_for(cur, [int(r["route_id"]) for r in rows])
            return [
                Route(route_id=int(r["route_id"]), name=r["name"], stops=tuple(stops[int(r["route_id"])]))
                for r in rows
            ]

    def get_by_id(self, route_id: int) -> Optional[Route]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT route_id, name FROM routes WHERE route_id=%s", (int(route_id),))
            row = fetchone(cur)
            if not row:
                return None
            stops = self._stops_for(cur, [int(row["route_id"])])
            return Route(route_id=int(row["route_id"]), name=row["name"], stops=tuple(stops[int(row["route_id"])]))

    def create(self, *, name: str, stops: Sequence[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO routes(name) VALUES(%s)", (name,))
            route_id = int(cur.lastrowid)
            cur.executemany(
                "INSERT INTO route_stops(route_id, position, stop_name) VALUES(%s,%s,%s)",
                [(route_id, i, stop) for i, stop in enumerate(stops)],
            )
            return route_id
