from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import ApplicationStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Application
from .repository import ApplicationRepository

_COLUMNS = "application_id, user_id, name, email, role, status, applied_date, profile_json, decided_at"


def _row_to_application(r: dict) -> Application:
    return Application(
        application_id=int(r["application_id"]),
        user_id=int(r["user_id"]),
        name=r["name"],
        email=r["email"],
        role=Role(r["role"]),
        status=ApplicationStatus(r["status"]),
        applied_date=r["applied_date"],
        profile=load_json(r.get("profile_json"), {}),
        decided_at=r.get("decided_at"),
    )


class MySQLApplicationRepository(ApplicationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        role: Role,
        status: ApplicationStatus,
        applied_date: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO applications(user_id, name, email, role, status, applied_date, profile_json)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), name, email, role.value, status.value, applied_date, dump_json({})),
            )
            return int(cur.lastrowid)

    def get_by_id(self, application_id: int) -> Optional[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM applications WHERE application_id=%s", (int(application_id),))
            row = fetchone(cur)
            return _row_to_application(row) if row else None

    def get_by_user(self, user_id: int) -> Optional[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM applications WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_application(row) if row else None

    def list_by_status(self, status: ApplicationStatus) -> Sequence[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM applications WHERE status=%s ORDER BY applied_date ASC",
                (status.value,),
            )
            return [_row_to_application(r) for r in fetchall(cur)]

    def submit_profile(self, *, application_id: int, profile: dict[str, Any]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE applications
                SET profile_json=%s, status=%s
                WHERE application_id=%s AND status IN (%s, %s)
                """,
                (
                    dump_json(profile),
                    ApplicationStatus.PENDING.value,
                    int(application_id),
                    ApplicationStatus.PROFILE_INCOMPLETE.value,
                    ApplicationStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def decide(self, *, application_id: int, status: ApplicationStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE applications
                SET status=%s, decided_at=NOW()
                WHERE application_id=%s AND status=%s
                """,
                (status.value, int(application_id), ApplicationStatus.PENDING.value),
            )
            return cur.rowcount > 0
