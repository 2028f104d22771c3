from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Parent, Student, Teacher


class StudentRepository(Protocol):
    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_user(self, user_id: int) -> Optional[Student]:
        raise NotImplementedError

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
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError


class TeacherRepository(Protocol):
    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def get_by_user(self, user_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def create(self, *, user_id: Optional[int], name: str, email: str, subjects: Sequence[str]) -> int:
        raise NotImplementedError


class ParentRepository(Protocol):
    def list_all(self) -> Sequence[Parent]:
        raise NotImplementedError

    def get_by_id(self, parent_id: int) -> Optional[Parent]:
        raise NotImplementedError

    def get_by_user(self, user_id: int) -> Optional[Parent]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: Optional[int],
        name: str,
        email: str,
        avatar_url: str,
        child_name: str,
    ) -> int:
        raise NotImplementedError

    def update_profile(
        self,
        *,
        parent_id: int,
        name: str,
        child_name: str,
        nearest_stop: str,
        assigned_route_id: Optional[int],
    ) -> bool:
        raise NotImplementedError
