from __future__ import annotations

import pytest

from src.school_fleet.school_fleet.core.enums import Role
from src.school_fleet.school_fleet.core.exceptions import AuthorizationError, NotFoundError, ValidationError

STUDENT = dict(
    name="Anu Shetty",
    father_name="Ramesh",
    mother_name="Lata",
    dob="2015-06-01",
    class_name="4A",
    roll_no="12",
)


def _parent(container, user_id=5):
    return container.parents_repo.create(
        user_id=user_id, name="Lata Shetty", email="lata@example.com", avatar_url="https://x/y.png", child_name="N/A"
    )


def test_add_student_with_parent(container):
    pid = _parent(container)

    sid = container.student_service.add_student(current_role=Role.TEACHER, parent_id=pid, **STUDENT)

    [row] = container.student_service.list_with_parents()
    assert row.student.student_id == sid
    assert row.student.dob == "2015-06-01"
    assert row.student.result_card_url is None
    assert row.parent.parent_id == pid


def test_add_student_validation(container):
    svc = container.student_service
    with pytest.raises(AuthorizationError):
        svc.add_student(current_role=Role.PARENT, **STUDENT)
    with pytest.raises(ValidationError):
        svc.add_student(current_role=Role.ADMIN, parent_id=77, **STUDENT)
    with pytest.raises(ValidationError):
        svc.add_student(current_role=Role.ADMIN, **{**STUDENT, "dob": "01-06-2015"})
    with pytest.raises(ValidationError):
        svc.add_student(current_role=Role.ADMIN, result_card_url="not a url", **STUDENT)


def test_delete_student(container):
    sid = container.student_service.add_student(current_role=Role.ADMIN, **STUDENT)

    container.student_service.delete_student(current_role=Role.ADMIN, student_id=sid)
    assert container.students_repo.list_all() == []

    with pytest.raises(NotFoundError):
        container.student_service.delete_student(current_role=Role.ADMIN, student_id=sid)
    with pytest.raises(AuthorizationError):
        container.student_service.delete_student(current_role=Role.DRIVER, student_id=sid)


def test_parent_profile_picks_first_route_with_stop(container):
    _parent(container)
    container.routes_repo.create(name="North", stops=("School", "Temple Square"))
    south = container.routes_repo.create(name="South", stops=("School", "Lake View"))
    container.routes_repo.create(name="East", stops=("Lake View",))

    updated = container.parent_service.update_profile(
        current_role=Role.PARENT, user_id=5, name="Lata S", child_name="Anu", nearest_stop="Lake View"
    )

    assert updated.assigned_route_id == south
    stored = container.parents_repo.get_by_user(5)
    assert (stored.name, stored.child_name, stored.nearest_stop, stored.assigned_route_id) == (
        "Lata S",
        "Anu",
        "Lake View",
        south,
    )


def test_parent_profile_unknown_stop(container):
    _parent(container)
    container.routes_repo.create(name="North", stops=("School",))
    with pytest.raises(ValidationError, match="choose a stop from the list"):
        container.parent_service.update_profile(
            current_role=Role.PARENT, user_id=5, name="Lata", child_name="Anu", nearest_stop="Moon"
        )


def test_parent_profile_guards(container):
    with pytest.raises(AuthorizationError):
        container.parent_service.update_profile(
            current_role=Role.DRIVER, user_id=5, name="Lata", child_name="Anu", nearest_stop="School"
        )
    with pytest.raises(NotFoundError):
        container.parent_service.update_profile(
            current_role=Role.PARENT, user_id=5, name="Lata", child_name="Anu", nearest_stop="School"
        )
