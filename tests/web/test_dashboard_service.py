from __future__ import annotations

from src.school_fleet.school_fleet.core.enums import Role
from tests.fakes import add_driver, add_vehicle


def test_admin_stats(container):
    route_id = container.routes_repo.create(name="R", stops=("A", "B"))
    on_route = add_vehicle(container.vehicles_repo, is_available=False, route_id=route_id)
    add_vehicle(container.vehicles_repo, plate="KA02")
    did = add_driver(container.drivers_repo, name="Amy")
    add_driver(container.drivers_repo, name="Bob")
    container.drivers_repo.set_assigned_vehicle(driver_id=did, vehicle_id=on_route)

    data = container.dashboard_service.for_user(role=Role.ADMIN, user_id=1).data

    assert data["total_drivers"] == 2
    assert data["total_vehicles"] == 2
    assert data["available_vehicles"] == 1
    assert data["unassigned_drivers"] == 1
    [active] = data["active_vehicles"]
    assert active.driver.name == "Amy"
    assert active.progress.current_stop == "A"


def test_parent_without_stop_is_asked_for_one(container):
    container.parents_repo.create(user_id=3, name="Lata", email="l@example.com", avatar_url="a", child_name="N/A")

    rider = container.dashboard_service.for_user(role=Role.PARENT, user_id=3).data["rider"]

    assert rider.needs_stop
    assert rider.vehicle is None


def test_parent_follows_bus_on_their_route(container):
    route_id = container.routes_repo.create(name="South", stops=("School", "Lake View", "Hill Top"))
    vid = add_vehicle(container.vehicles_repo, is_available=False, route_id=route_id)
    pid = container.parents_repo.create(user_id=3, name="Lata", email="l@example.com", avatar_url="a", child_name="Anu")
    container.parents_repo.update_profile(
        parent_id=pid, name="Lata", child_name="Anu", nearest_stop="Lake View", assigned_route_id=route_id
    )

    rider = container.dashboard_service.for_user(role=Role.PARENT, user_id=3).data["rider"]

    assert not rider.needs_stop
    assert rider.vehicle.vehicle_id == vid
    assert rider.driver is None
    assert [s.highlighted for s in rider.progress.stops] == [False, True, False]


def test_student_sees_parent_route(container):
    route_id = container.routes_repo.create(name="South", stops=("School", "Lake View"))
    add_vehicle(container.vehicles_repo, is_available=False, route_id=route_id)
    pid = container.parents_repo.create(user_id=3, name="Lata", email="l@example.com", avatar_url="a", child_name="Anu")
    container.parents_repo.update_profile(
        parent_id=pid, name="Lata", child_name="Anu", nearest_stop="School", assigned_route_id=route_id
    )
    container.students_repo.create(
        user_id=8, name="Anu", email=None, father_name="R", mother_name="Lata", dob="2015-06-01",
        class_name="4A", roll_no="12", result_card_url=None, parent_id=pid,
    )

    data = container.dashboard_service.for_user(role=Role.STUDENT, user_id=8).data

    assert data["student"].name == "Anu"
    assert data["rider"].progress.route_name == "South"


def test_driver_without_vehicle(container):
    add_driver(container.drivers_repo, user_id=4)
    data = container.dashboard_service.for_user(role=Role.DRIVER, user_id=4).data
    assert data["vehicle"] is None
    assert data["progress"] is None
