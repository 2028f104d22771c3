from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = "teacher_id, user_id, name, email, subjects_json"


def _row_to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=int(r["teacher_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        name=r["name"],
        email=r["email"],
        subjects=tuple(load_json(r.get("subjects_json"), [])),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers ORDER BY name ASC")
            return [_row_to_teacher(r) for r in fetchall(cur)]

    def get_by_user(self, user_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_teacher(row) if row else None

    def create(self, *, user_id: Optional[int], name: str, email: str, subjects: Sequence[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO teachers(user_id, name, email, subjects_json) VALUES(%s,%s,%s,%s)",
                (user_id, name, email, dump_json(list(subjects))),
            )
            return int(cur.lastrowid)
