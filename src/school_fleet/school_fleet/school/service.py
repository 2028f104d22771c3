from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.validators import require_iso_date, require_min_length, require_non_empty, require_url_or_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..fleet.repository import RouteRepository
from .model import Parent, Student, Teacher
from .repository import ParentRepository, StudentRepository, TeacherRepository

logger = logging.getLogger(__name__)

_STAFF = {Role.ADMIN, Role.TEACHER}


@dataclass(frozen=True)
class StudentRow:
    student: Student
    parent: Optional[Parent]


class StudentService:
    def __init__(self, students: StudentRepository, parents: ParentRepository):
        self._students = students
        self._parents = parents

    def add_student(
        self,
        *,
        current_role: Role,
        name: str,
        father_name: str,
        mother_name: str,
        dob: str,
        class_name: str,
        roll_no: str,
        parent_id: Optional[int] = None,
        result_card_url: str = "",
    ) -> int:
        if current_role not in _STAFF:
            raise AuthorizationError("Only administrators and teachers can add students.")

        name = require_min_length(name, "Student name", 2)
        father_name = require_min_length(father_name, "Father's name", 2)
        mother_name = require_min_length(mother_name, "Mother's name", 2)
        dob_value = require_iso_date(dob, "Date of birth")
        class_name = require_non_empty(class_name, "Class")
        roll_no = require_non_empty(roll_no, "Roll number")
        result_card_url = require_url_or_empty(result_card_url, "Result card URL")

        if parent_id is not None and not self._parents.get_by_id(int(parent_id)):
            raise ValidationError("Selected parent does not exist.")

        student_id = self._students.create(
            user_id=None,
            name=name,
            email=None,
            father_name=father_name,
            mother_name=mother_name,
            dob=dob_value.isoformat(),
            class_name=class_name,
            roll_no=roll_no,
            result_card_url=result_card_url or None,
            parent_id=int(parent_id) if parent_id is not None else None,
        )
        logger.info("Student %s added to class %s", student_id, class_name)
        return student_id

    def delete_student(self, *, current_role: Role, student_id: int) -> None:
        if current_role not in _STAFF:
            raise AuthorizationError("Only administrators and teachers can delete students.")
        if not self._students.delete_by_id(int(student_id)):
            raise NotFoundError("Student not found.")
        logger.info("Student %s deleted", student_id)

    def list_with_parents(self) -> list[StudentRow]:
        parents = {p.parent_id: p for p in self._parents.list_all()}
        return [StudentRow(student=s, parent=parents.get(s.parent_id)) for s in self._students.list_all()]

    def list_parents(self) -> Sequence[Parent]:
        return self._parents.list_all()

    def get_by_user(self, user_id: int) -> Optional[Student]:
        return self._students.get_by_user(int(user_id))


class TeacherService:
    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def list_all(self) -> Sequence[Teacher]:
        return self._teachers.list_all()


class ParentService:
    def __init__(self, parents: ParentRepository, routes: RouteRepository):
        self._parents = parents
        self._routes = routes

    def get_by_user(self, user_id: int) -> Optional[Parent]:
        return self._parents.get_by_user(int(user_id))

    def get(self, parent_id: int) -> Optional[Parent]:
        return self._parents.get_by_id(int(parent_id))

    def update_profile(
        self,
        *,
        current_role: Role,
        user_id: int,
        name: str,
        child_name: str,
        nearest_stop: str,
    ) -> Parent:
        """Save the parent's details; the route follows from the chosen stop."""
        if current_role != Role.PARENT:
            raise AuthorizationError("Only parents can update this profile.")

        parent = self._parents.get_by_user(int(user_id))
        if not parent:
            raise NotFoundError("Parent profile not found.")

        name = require_min_length(name, "Name", 2)
        child_name = require_min_length(child_name, "Child's name", 2)
        nearest_stop = require_non_empty(nearest_stop, "Nearest stop")

        route_id: Optional[int] = None
        for r in self._routes.list_all():
            if nearest_stop in r.stops:
                route_id = r.route_id
                break
        if route_id is None:
            raise ValidationError("Please choose a stop from the list.")

        self._parents.update_profile(
            parent_id=parent.parent_id,
            name=name,
            child_name=child_name,
            nearest_stop=nearest_stop,
            assigned_route_id=route_id,
        )
        logger.info("Parent %s set nearest stop %s (route %s)", parent.parent_id, nearest_stop, route_id)
        return Parent(
            parent_id=parent.parent_id,
            user_id=parent.user_id,
            name=name,
            email=parent.email,
            avatar_url=parent.avatar_url,
            child_name=child_name,
            nearest_stop=nearest_stop,
            assigned_route_id=route_id,
        )
