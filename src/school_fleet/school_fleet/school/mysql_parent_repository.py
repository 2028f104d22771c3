from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Parent
from .repository import ParentRepository

_COLUMNS = "parent_id, user_id, name, email, avatar_url, child_name, nearest_stop, assigned_route_id"


def _row_to_parent(r: dict) -> Parent:
    return Parent(
        parent_id=int(r["parent_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        name=r["name"],
        email=r["email"],
        avatar_url=r["avatar_url"],
        child_name=r["child_name"],
        nearest_stop=r.get("nearest_stop"),
        assigned_route_id=int(r["assigned_route_id"]) if r.get("assigned_route_id") is not None else None,
    )


class MySQLParentRepository(ParentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Parent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM parents ORDER BY name ASC")
            return [_row_to_parent(r) for r in fetchall(cur)]

    def get_by_id(self, parent_id: int) -> Optional[Parent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM parents WHERE parent_id=%s", (int(parent_id),))
            row = fetchone(cur)
            return _row_to_parent(row) if row else None

    def get_by_user(self, user_id: int) -> Optional[Parent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM parents WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_parent(row) if row else None

    def create(
        self,
        *,
        user_id: Optional[int],
        name: str,
        email: str,
        avatar_url: str,
        child_name: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO parents(user_id, name, email, avatar_url, child_name, nearest_stop, assigned_route_id)
                VALUES(%s,%s,%s,%s,%s,NULL,NULL)
                """,
                (user_id, name, email, avatar_url, child_name),
            )
            return int(cur.lastrowid)

    def update_profile(
        self,
        *,
        parent_id: int,
        name: str,
        child_name: str,
        nearest_stop: str,
        assigned_route_id: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE parents
                SET name=%s, child_name=%s, nearest_stop=%s, assigned_route_id=%s
                WHERE parent_id=%s
                """,
                (name, child_name, nearest_stop, assigned_route_id, int(parent_id)),
            )
            return cur.rowcount > 0
