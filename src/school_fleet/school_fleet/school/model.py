from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Student:
    student_id: int
    user_id: Optional[int]
    name: str
    email: Optional[str]
    father_name: str
    mother_name: str
    dob: str
    class_name: str
    roll_no: str
    result_card_url: Optional[str] = None
    parent_id: Optional[int] = None


@dataclass(frozen=True)
class Teacher:
    teacher_id: int
    user_id: Optional[int]
    name: str
    email: str
    subjects: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Parent:
    parent_id: int
    user_id: Optional[int]
    name: str
    email: str
    avatar_url: str
    child_name: str
    nearest_stop: Optional[str] = None
    assigned_route_id: Optional[int] = None
