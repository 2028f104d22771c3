from __future__ import annotations

from datetime import date

import pytest

from src.school_fleet.school_fleet.core.enums import ExpiryLevel, LocationStatus, Role
from src.school_fleet.school_fleet.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.school_fleet.school_fleet.fleet.service import RouteService
from tests.fakes import add_driver, add_vehicle


def test_add_vehicle_requires_admin(container):
    with pytest.raises(AuthorizationError):
        container.vehicle_service.add_vehicle(
            current_role=Role.TEACHER, model="Tata", license_plate="KA01", chassis_number="", image_url="/x.png"
        )


def test_add_vehicle_requires_photo(container):
    with pytest.raises(ValidationError):
        container.vehicle_service.add_vehicle(
            current_role=Role.ADMIN, model="Tata", license_plate="KA01", chassis_number="", image_url=None
        )


def test_add_vehicle_normalizes_fields(container):
    vid = container.vehicle_service.add_vehicle(
        current_role=Role.ADMIN,
        model=" Tata Starbus ",
        license_plate="ka01ab1234",
        chassis_number="  ",
        image_url="/static/uploads/bus.png",
        insurance_expiry="2025-06-30",
    )

    v = container.vehicles_repo.get_by_id(vid)
    assert v.model == "Tata Starbus"
    assert v.license_plate == "KA01AB1234"
    assert v.chassis_number is None
    assert v.is_available
    assert v.insurance_expiry == date(2025, 6, 30)
    assert v.fitness_certificate_expiry is None


def test_add_vehicle_rejects_bad_expiry_date(container):
    with pytest.raises(ValidationError):
        container.vehicle_service.add_vehicle(
            current_role=Role.ADMIN,
            model="Tata",
            license_plate="KA01",
            chassis_number="",
            image_url="/x.png",
            fitness_certificate_expiry="30/06/2025",
        )


def test_expiry_levels(container, today):
    vid = add_vehicle(
        container.vehicles_repo,
        fitness_certificate_expiry=date(2025, 3, 1),
        insurance_expiry=date(2025, 3, 25),
        pollution_certificate_expiry=None,
    )
    levels = container.vehicle_service.expiry_levels(container.vehicles_repo.get_by_id(vid), today)

    assert levels == {
        "fitness": ExpiryLevel.EXPIRED,
        "insurance": ExpiryLevel.EXPIRING_SOON,
        "pollution": ExpiryLevel.UNKNOWN,
    }


def test_vehicle_details_newest_logs_first(container):
    vid = add_vehicle(container.vehicles_repo)
    logs = container.logs_repo
    logs.add(vehicle_id=vid, log_date=date(2025, 1, 5), opening_km=100, closing_km=150, fuel_liters=5,
             fuel_cost=500, maintenance_cost=0, notes=None, created_by=1)
    logs.add(vehicle_id=vid, log_date=date(2025, 2, 5), opening_km=150, closing_km=210, fuel_liters=6,
             fuel_cost=600, maintenance_cost=200, notes="Oil change", created_by=1)

    details = container.vehicle_service.details(vid)

    assert [x.log_date for x in details.logs] == [date(2025, 2, 5), date(2025, 1, 5)]
    assert details.summary.total_km == 110
    assert [m.month for m in details.monthly] == ["Jan 2025", "Feb 2025"]
    assert details.route is None


def test_vehicle_details_missing(container):
    with pytest.raises(NotFoundError):
        container.vehicle_service.details(42)


# maintenance


@pytest.fixture
def driver_with_vehicle(container):
    vid = add_vehicle(container.vehicles_repo)
    did = add_driver(container.drivers_repo, user_id=9)
    container.drivers_repo.set_assigned_vehicle(driver_id=did, vehicle_id=vid)
    return container, vid


def _log(container, today, **overrides):
    kwargs = dict(
        current_role=Role.DRIVER,
        user_id=9,
        opening_km=1000.0,
        closing_km=1040.0,
        fuel_liters=8.0,
        fuel_cost=800.0,
        maintenance_cost=None,
        notes="",
        today=today,
    )
    kwargs.update(overrides)
    return container.maintenance_service.log_entry(**kwargs)


def test_log_entry_persists_and_updates_today_km(driver_with_vehicle, today):
    container, vid = driver_with_vehicle

    _log(container, today)

    [entry] = container.logs_repo.list_for_vehicle(vid)
    assert entry.log_date == today
    assert entry.distance_km == 40
    v = container.vehicles_repo.get_by_id(vid)
    assert (v.opening_km_today, v.closing_km_today) == (1000.0, 1040.0)
    assert container.maintenance_service.default_opening_km(v) == 1040.0


def test_log_entry_closing_below_opening(driver_with_vehicle, today):
    container, _ = driver_with_vehicle
    with pytest.raises(ValidationError):
        _log(container, today, closing_km=900.0)


def test_log_entry_negative_values(driver_with_vehicle, today):
    container, _ = driver_with_vehicle
    with pytest.raises(ValidationError):
        _log(container, today, fuel_cost=-1.0)


def test_log_entry_requires_driver_with_vehicle(container, today):
    add_driver(container.drivers_repo, user_id=9)
    with pytest.raises(ValidationError):
        _log(container, today)
    with pytest.raises(AuthorizationError):
        _log(container, today, current_role=Role.ADMIN)


# routes


def test_clean_stops():
    assert RouteService.clean_stops([" A ", "", "B", "A", "  "]) == ["A", "B"]


def test_create_and_assign_resets_progress(container):
    vid = add_vehicle(
        container.vehicles_repo, current_stop_index=3, location_status=LocationStatus.ISSUE_REPORTED, status_notes="x"
    )
    container.timestamps_repo.set_arrival(vehicle_id=vid, stop="Old", position=0, arrival_time="07:00 AM")

    rid = container.route_service.create_and_assign(
        current_role=Role.ADMIN, name="Route 1", stops=["School", "Park", "School"], vehicle_id=vid
    )

    assert container.routes_repo.get_by_id(rid).stops == ("School", "Park")
    v = container.vehicles_repo.get_by_id(vid)
    assert v.route_id == rid
    assert v.current_stop_index == 0
    assert v.location_status == LocationStatus.AT_STOP
    assert v.status_notes is None
    assert container.timestamps_repo.list_for_vehicle(vid) == []


def test_create_route_validation(container):
    vid = add_vehicle(container.vehicles_repo)
    with pytest.raises(ValidationError):
        container.route_service.create_and_assign(current_role=Role.ADMIN, name="R", stops=["", " "], vehicle_id=vid)
    with pytest.raises(ValidationError):
        container.route_service.create_and_assign(current_role=Role.ADMIN, name="R", stops=["A"], vehicle_id=99)
    with pytest.raises(AuthorizationError):
        container.route_service.create_and_assign(current_role=Role.DRIVER, name="R", stops=["A"], vehicle_id=vid)


def test_all_stops_are_unique_in_route_order(container):
    container.routes_repo.create(name="R1", stops=("A", "B"))
    container.routes_repo.create(name="R2", stops=("B", "C"))
    assert container.route_service.all_stops() == ["A", "B", "C"]


# assignments


def test_assign_and_release(container):
    vid = add_vehicle(container.vehicles_repo)
    did = add_driver(container.drivers_repo)
    svc = container.assignment_service

    svc.assign(current_role=Role.ADMIN, driver_id=did, vehicle_id=vid)
    assert container.drivers_repo.get_by_id(did).assigned_vehicle_id == vid
    assert not container.vehicles_repo.get_by_id(vid).is_available
    overview = svc.overview()
    assert overview.unassigned_drivers == []
    assert overview.available_vehicles == []
    assert overview.assigned[0][1].vehicle_id == vid

    svc.release(current_role=Role.ADMIN, driver_id=did)
    assert container.drivers_repo.get_by_id(did).assigned_vehicle_id is None
    assert container.vehicles_repo.get_by_id(vid).is_available


def test_assign_rejects_busy_driver_and_vehicle(container):
    v1 = add_vehicle(container.vehicles_repo)
    v2 = add_vehicle(container.vehicles_repo, plate="KA02")
    d1 = add_driver(container.drivers_repo, name="A")
    d2 = add_driver(container.drivers_repo, name="B")
    svc = container.assignment_service
    svc.assign(current_role=Role.ADMIN, driver_id=d1, vehicle_id=v1)

    with pytest.raises(ValidationError):
        svc.assign(current_role=Role.ADMIN, driver_id=d1, vehicle_id=v2)
    with pytest.raises(ValidationError):
        svc.assign(current_role=Role.ADMIN, driver_id=d2, vehicle_id=v1)
    with pytest.raises(ValidationError):
        svc.release(current_role=Role.ADMIN, driver_id=d2)


def test_suggest_skips_expired(container, today):
    add_vehicle(container.vehicles_repo, plate="OLD", insurance_expiry=date(2024, 1, 1))
    good = add_vehicle(container.vehicles_repo, plate="NEW")
    add_driver(container.drivers_repo, name="Zed", license_expiry=date(2024, 1, 1))
    amy = add_driver(container.drivers_repo, name="Amy")
    bob = add_driver(container.drivers_repo, name="Bob")

    suggestions = container.assignment_service.suggest(today)

    assert [(s.driver_id, s.vehicle_id) for s in suggestions] == [(amy, good)]
    assert bob not in [s.driver_id for s in suggestions]


def test_add_vehicle_rejects_duplicate_plate(container):
    add_vehicle(container.vehicles_repo, plate="KA01AB1234")

    with pytest.raises(ValidationError, match="already exists"):
        container.vehicle_service.add_vehicle(
            current_role=Role.ADMIN, model="Eicher", license_plate=" ka01ab1234", chassis_number="", image_url="/x.png"
        )
    assert len(container.vehicles_repo.items) == 1


def test_check_new_vehicle_saves_nothing(container):
    cleaned = container.vehicle_service.check_new_vehicle(
        current_role=Role.ADMIN,
        model="Eicher Skyline",
        license_plate="ka05mn4321",
        chassis_number="",
        has_image=True,
        pollution_certificate_expiry="2026-02-01",
    )

    assert cleaned["license_plate"] == "KA05MN4321"
    assert cleaned["pollution_certificate_expiry"] == date(2026, 2, 1)
    assert container.vehicles_repo.items == {}
