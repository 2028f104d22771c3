from __future__ import annotations

import io

import pytest
from werkzeug.security import generate_password_hash

from src.school_fleet.school_fleet.core.enums import ApplicationStatus, LocationStatus, Role
from src.school_fleet.school_fleet.main import create_app
from tests.fakes import add_driver, add_vehicle


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login_as(client, role: Role, user_id: int = 1, name: str = "Tester"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["name"] = name
        sess["email"] = "tester@example.com"
        sess["role"] = role.value


def test_login_page_and_protected_redirect(client):
    assert client.get("/").status_code == 200

    resp = client.get("/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/")


def test_login_flow_for_admin(client, container):
    container.users_repo.create_user(
        full_name="Admin", email="admin@sdm.in", password_hash=generate_password_hash("admin123"), role=Role.ADMIN
    )

    resp = client.post("/", data={"email": "admin@sdm.in", "password": "admin123"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")

    with client.session_transaction() as sess:
        assert sess["role"] == "admin"


def test_login_failure_stays_on_page(client):
    resp = client.post("/", data={"email": "x@example.com", "password": "nope"})
    assert resp.status_code == 200
    assert b"Invalid email or password." in resp.data


def test_register_then_complete_profile_redirect(client, container):
    resp = client.post(
        "/register", data={"name": "Dev Rao", "email": "dev@example.com", "password": "secret1", "role": "driver"}
    )
    assert resp.status_code == 302

    resp = client.post("/", data={"email": "dev@example.com", "password": "secret1"})
    assert resp.headers["Location"].endswith("/registration/profile")


def test_wrong_role_gets_403(client):
    _login_as(client, Role.PARENT)
    resp = client.get("/vehicles")
    assert resp.status_code == 403
    assert b"Access denied" in resp.data


def test_admin_dashboard_renders(client, container):
    route_id = container.routes_repo.create(name="Morning Route", stops=("School", "Lake View"))
    add_vehicle(container.vehicles_repo, is_available=False, route_id=route_id)
    _login_as(client, Role.ADMIN)

    resp = client.get("/dashboard")
    assert resp.status_code == 200
    assert b"Morning Route" in resp.data


def test_unapproved_user_is_sent_to_review(client, container, fixed_now):
    container.applications_repo.create(
        user_id=3, name="Pat", email="pat@example.com", role=Role.PARENT, status=ApplicationStatus.PENDING,
        applied_date=fixed_now,
    )
    _login_as(client, Role.PARENT, user_id=3)

    resp = client.get("/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/under-review")


def test_driver_trip_actions(client, container):
    route_id = container.routes_repo.create(name="Morning Route", stops=("School", "Lake View"))
    vid = add_vehicle(container.vehicles_repo, is_available=False, route_id=route_id)
    did = add_driver(container.drivers_repo, user_id=4)
    container.drivers_repo.set_assigned_vehicle(driver_id=did, vehicle_id=vid)
    _login_as(client, Role.DRIVER, user_id=4)

    resp = client.post("/trip/depart")
    assert resp.status_code == 302
    assert container.vehicles_repo.get_by_id(vid).location_status == LocationStatus.IN_TRANSIT

    client.post("/trip/issue", data={"note": "Traffic jam"})
    assert container.vehicles_repo.get_by_id(vid).status_notes == "Traffic jam"

    resp = client.get("/dashboard")
    assert resp.status_code == 200
    assert b"Traffic jam" in resp.data


def test_status_api(client, container):
    route_id = container.routes_repo.create(name="Morning Route", stops=("School", "Lake View"))
    vid = add_vehicle(container.vehicles_repo, route_id=route_id)

    assert client.get(f"/api/vehicles/{vid}/status").status_code == 401

    _login_as(client, Role.PARENT)
    body = client.get(f"/api/vehicles/{vid}/status").get_json()
    assert body["success"] is True
    assert body["data"]["progress"]["next_stop"] == "Lake View"

    resp = client.get("/api/vehicles/999/status")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_vehicle_export_downloads_excel(client, container):
    add_vehicle(container.vehicles_repo)
    _login_as(client, Role.ADMIN)

    resp = client.get("/vehicles/export")
    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def test_rejected_vehicle_form_leaves_no_uploads(client, app, container, tmp_path):
    app.config["UPLOAD_FOLDER"] = str(tmp_path)
    add_vehicle(container.vehicles_repo, plate="KA01AB1234")
    _login_as(client, Role.ADMIN)

    resp = client.post(
        "/vehicles/add",
        data={
            "model": "Eicher",
            "license_plate": "KA01AB1234",
            "image": (io.BytesIO(b"fake image"), "bus.png"),
            "insurance_photo": (io.BytesIO(b"fake image"), "insurance.png"),
        },
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    assert b"already exists" in resp.data
    assert list(tmp_path.iterdir()) == []


def test_vehicle_upload_is_saved_once_valid(client, app, container, tmp_path):
    app.config["UPLOAD_FOLDER"] = str(tmp_path)
    _login_as(client, Role.ADMIN)

    resp = client.post(
        "/vehicles/add",
        data={"model": "Eicher", "license_plate": "KA07", "image": (io.BytesIO(b"fake image"), "bus.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 302
    [vehicle] = container.vehicles_repo.list_all()
    assert vehicle.image_url.startswith("/static/uploads/")
    assert len(list(tmp_path.iterdir())) == 1
