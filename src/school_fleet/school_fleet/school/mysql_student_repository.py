from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = (
    "student_id, user_id, name, email, father_name, mother_name, dob, "
    "class_name, roll_no, result_card_url, parent_id"
)


def _row_to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        name=r["name"],
        email=r.get("email"),
        father_name=r["father_name"],
        mother_name=r["mother_name"],
        dob=r["dob"],
        class_name=r["class_name"],
        roll_no=r["roll_no"],
        result_card_url=r.get("result_card_url"),
        parent_id=int(r["parent_id"]) if r.get("parent_id") is not None else None,
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY class_name ASC, roll_no ASC, name ASC")
            return [_row_to_student(r) for r in fetchall(cur)]

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            row = fetchone(cur)
            return _row_to_student(row) if row else None

    def get_by_user(self, user_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_student(row) if row else None

    def create(
        self,
        *,
        user_id: Optional[int],
        name: str,
        email: Optional[str],
        father_name: str,
        mother_name: str,
        dob: str,
        class_name: str,
        roll_no: str,
        result_card_url: Optional[str],
        parent_id: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(
                    user_id, name, email, father_name, mother_name, dob,
                    class_name, roll_no, result_card_url, parent_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user_id,
                    name,
                    email,
                    father_name,
                    mother_name,
                    dob,
                    class_name,
                    roll_no,
                    result_card_url,
                    parent_id,
                ),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
