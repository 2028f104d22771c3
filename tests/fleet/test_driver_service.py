from __future__ import annotations

from datetime import date

import pytest

from src.school_fleet.school_fleet.core.enums import ExpiryLevel, Role
from src.school_fleet.school_fleet.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from tests.fakes import add_driver, add_vehicle


def test_add_driver(container):
    did = container.driver_service.add_driver(
        current_role=Role.ADMIN,
        name="Suresh",
        contact="9876543210",
        license_number="KA-0120230001",
        license_expiry="2027-05-01",
    )

    d = container.drivers_repo.get_by_id(did)
    assert d.license_expiry == date(2027, 5, 1)
    assert d.avatar_url.endswith("/driver1/100/100")
    assert d.current_location == "School Campus"
    assert not d.is_assigned


@pytest.mark.parametrize(
    "field, value",
    [("name", "S"), ("contact", "12345"), ("license_number", "KA1"), ("license_expiry", "tomorrow")],
)
def test_add_driver_validation(container, field, value):
    kwargs = dict(name="Suresh", contact="9876543210", license_number="KA-0120230001", license_expiry="2027-05-01")
    kwargs[field] = value
    with pytest.raises(ValidationError):
        container.driver_service.add_driver(current_role=Role.ADMIN, **kwargs)


def test_add_driver_requires_admin(container):
    with pytest.raises(AuthorizationError):
        container.driver_service.add_driver(
            current_role=Role.PARENT,
            name="Suresh",
            contact="9876543210",
            license_number="KA-0120230001",
            license_expiry="2027-05-01",
        )


def test_overview_license_levels(container, today):
    add_driver(container.drivers_repo, name="Expired", license_expiry=date(2025, 1, 1))
    add_driver(container.drivers_repo, name="Soon", license_expiry=date(2025, 4, 1))
    add_driver(container.drivers_repo, name="Unknown", license_expiry=None)

    levels = {o.driver.name: o.license_level for o in container.driver_service.list_overview(today)}

    assert levels == {
        "Expired": ExpiryLevel.EXPIRED,
        "Soon": ExpiryLevel.EXPIRING_SOON,
        "Unknown": ExpiryLevel.UNKNOWN,
    }


def test_insights(container):
    did = add_driver(container.drivers_repo)
    insights = container.driver_service.insights(did)
    assert insights.vehicle is None and insights.summary is None

    vid = add_vehicle(container.vehicles_repo)
    container.drivers_repo.set_assigned_vehicle(driver_id=did, vehicle_id=vid)
    container.logs_repo.add(vehicle_id=vid, log_date=date(2025, 3, 1), opening_km=0, closing_km=120,
                            fuel_liters=10, fuel_cost=1000, maintenance_cost=None, notes=None, created_by=1)

    insights = container.driver_service.insights(did)
    assert insights.vehicle.vehicle_id == vid
    assert insights.summary.average_mileage == 12

    with pytest.raises(NotFoundError):
        container.driver_service.insights(99)
