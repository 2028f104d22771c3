"""In-memory repositories shared by the service and web tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Optional, Sequence

from src.school_fleet.school_fleet.accounts.model import User
from src.school_fleet.school_fleet.applications.model import Application
from src.school_fleet.school_fleet.container import Container, wire
from src.school_fleet.school_fleet.core.enums import ApplicationStatus, LocationStatus, Role
from src.school_fleet.school_fleet.drivers.model import Driver
from src.school_fleet.school_fleet.fleet.model import MaintenanceLog, Route, StopTimestamp, Vehicle
from src.school_fleet.school_fleet.school.model import Parent, Student, Teacher


class _Ids:
    def __init__(self):
        self._next = 0

    def next(self) -> int:
        self._next += 1
        return self._next


class InMemoryUsers:
    def __init__(self):
        self.items: dict[int, User] = {}
        self._ids = _Ids()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.items.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return next((u for u in self.items.values() if u.email == email), None)

    def create_user(self, *, full_name: str, email: str, password_hash: str, role: Role) -> int:
        uid = self._ids.next()
        self.items[uid] = User(user_id=uid, full_name=full_name, email=email, password_hash=password_hash, role=role)
        return uid


class InMemoryApplications:
    def __init__(self):
        self.items: dict[int, Application] = {}
        self._ids = _Ids()

    def create(self, *, user_id, name, email, role, status, applied_date) -> int:
        aid = self._ids.next()
        self.items[aid] = Application(
            application_id=aid,
            user_id=int(user_id),
            name=name,
            email=email,
            role=role,
            status=status,
            applied_date=applied_date,
        )
        return aid

    def get_by_id(self, application_id: int) -> Optional[Application]:
        return self.items.get(int(application_id))

    def get_by_user(self, user_id: int) -> Optional[Application]:
        return next((a for a in self.items.values() if a.user_id == int(user_id)), None)

    def list_by_status(self, status: ApplicationStatus) -> Sequence[Application]:
        return [a for a in self.items.values() if a.status == status]

    def submit_profile(self, *, application_id: int, profile: dict[str, Any]) -> bool:
        app = self.items.get(int(application_id))
        if not app or app.status not in {ApplicationStatus.PROFILE_INCOMPLETE, ApplicationStatus.PENDING}:
            return False
        self.items[app.application_id] = replace(app, profile=dict(profile), status=ApplicationStatus.PENDING)
        return True

    def decide(self, *, application_id: int, status: ApplicationStatus) -> bool:
        app = self.items.get(int(application_id))
        if not app or app.status != ApplicationStatus.PENDING:
            return False
        self.items[app.application_id] = replace(app, status=status, decided_at=datetime(2025, 1, 1, 9, 0))
        return True


class InMemoryDrivers:
    def __init__(self):
        self.items: dict[int, Driver] = {}
        self._ids = _Ids()

    def list_all(self) -> Sequence[Driver]:
        return sorted(self.items.values(), key=lambda d: d.name)

    def count(self) -> int:
        return len(self.items)

    def get_by_id(self, driver_id: int) -> Optional[Driver]:
        return self.items.get(int(driver_id))

    def get_by_user(self, user_id: int) -> Optional[Driver]:
        return next((d for d in self.items.values() if d.user_id == int(user_id)), None)

    def get_by_vehicle(self, vehicle_id: int) -> Optional[Driver]:
        return next((d for d in self.items.values() if d.assigned_vehicle_id == int(vehicle_id)), None)

    def create(self, *, user_id, name, email, avatar_url, current_location, availability, license_number, license_expiry, contact) -> int:
        did = self._ids.next()
        self.items[did] = Driver(
            driver_id=did,
            user_id=user_id,
            name=name,
            email=email,
            avatar_url=avatar_url,
            current_location=current_location,
            availability=availability,
            assigned_vehicle_id=None,
            license_number=license_number,
            license_expiry=license_expiry,
            contact=contact,
        )
        return did

    def set_assigned_vehicle(self, *, driver_id: int, vehicle_id: Optional[int]) -> bool:
        d = self.items.get(int(driver_id))
        if not d:
            return False
        self.items[d.driver_id] = replace(d, assigned_vehicle_id=vehicle_id)
        return True


class InMemoryVehicles:
    def __init__(self):
        self.items: dict[int, Vehicle] = {}
        self._ids = _Ids()

    def list_all(self) -> Sequence[Vehicle]:
        return list(self.items.values())

    def get_by_id(self, vehicle_id: int) -> Optional[Vehicle]:
        return self.items.get(int(vehicle_id)) if vehicle_id is not None else None

    def get_by_plate(self, license_plate: str) -> Optional[Vehicle]:
        plate = license_plate.strip().upper()
        return next((v for v in self.items.values() if v.license_plate == plate), None)

    def list_by_route(self, route_id: int) -> Sequence[Vehicle]:
        return [v for v in self.items.values() if v.route_id == int(route_id)]

    def create(self, *, model, license_plate, chassis_number, image_url, current_location, **expiries_and_photos) -> int:
        vid = self._ids.next()
        self.items[vid] = Vehicle(
            vehicle_id=vid,
            model=model,
            license_plate=license_plate,
            chassis_number=chassis_number,
            image_url=image_url,
            current_location=current_location,
            maintenance_schedule="",
            is_available=True,
            **expiries_and_photos,
        )
        return vid

    def set_available(self, *, vehicle_id: int, is_available: bool) -> bool:
        v = self.items.get(int(vehicle_id))
        if not v:
            return False
        self.items[v.vehicle_id] = replace(v, is_available=is_available)
        return True

    def assign_route(self, *, vehicle_id: int, route_id: int) -> bool:
        v = self.items.get(int(vehicle_id))
        if not v:
            return False
        self.items[v.vehicle_id] = replace(
            v, route_id=route_id, current_stop_index=0, location_status=LocationStatus.AT_STOP, status_notes=None
        )
        return True

    def update_progress(self, *, vehicle_id, current_stop_index, location_status, status_notes) -> bool:
        v = self.items.get(int(vehicle_id))
        if not v:
            return False
        self.items[v.vehicle_id] = replace(
            v, current_stop_index=current_stop_index, location_status=location_status, status_notes=status_notes
        )
        return True

    def set_today_km(self, *, vehicle_id, opening_km, closing_km) -> bool:
        v = self.items.get(int(vehicle_id))
        if not v:
            return False
        self.items[v.vehicle_id] = replace(v, opening_km_today=opening_km, closing_km_today=closing_km)
        return True


class InMemoryRoutes:
    def __init__(self):
        self.items: dict[int, Route] = {}
        self._ids = _Ids()

    def list_all(self) -> Sequence[Route]:
        return [self.items[k] for k in sorted(self.items)]

    def get_by_id(self, route_id: int) -> Optional[Route]:
        return self.items.get(int(route_id))

    def create(self, *, name: str, stops: Sequence[str]) -> int:
        rid = self._ids.next()
        self.items[rid] = Route(route_id=rid, name=name, stops=tuple(stops))
        return rid


class InMemoryLogs:
    def __init__(self):
        self.items: list[MaintenanceLog] = []

    def list_for_vehicle(self, vehicle_id: int) -> Sequence[MaintenanceLog]:
        return sorted((x for x in self.items if x.vehicle_id == int(vehicle_id)), key=lambda x: (x.log_date, x.log_id))

    def list_all(self) -> Sequence[MaintenanceLog]:
        return sorted(self.items, key=lambda x: (x.log_date, x.log_id))

    def add(self, *, vehicle_id, log_date, opening_km, closing_km, fuel_liters, fuel_cost, maintenance_cost, notes, created_by) -> int:
        lid = len(self.items) + 1
        self.items.append(
            MaintenanceLog(
                log_id=lid,
                vehicle_id=int(vehicle_id),
                log_date=log_date,
                opening_km=opening_km,
                closing_km=closing_km,
                fuel_liters=fuel_liters,
                fuel_cost=fuel_cost,
                maintenance_cost=maintenance_cost,
                notes=notes,
            )
        )
        return lid


class InMemoryTimestamps:
    def __init__(self):
        # vehicle_id -> stop -> (position, StopTimestamp)
        self.items: dict[int, dict[str, tuple[int, StopTimestamp]]] = {}

    def list_for_vehicle(self, vehicle_id: int) -> Sequence[StopTimestamp]:
        entries = self.items.get(int(vehicle_id), {})
        return [ts for _, ts in sorted(entries.values(), key=lambda e: e[0])]

    def _get(self, vehicle_id: int, stop: str) -> StopTimestamp:
        entry = self.items.get(int(vehicle_id), {}).get(stop)
        return entry[1] if entry else StopTimestamp(stop=stop)

    def set_arrival(self, *, vehicle_id, stop, position, arrival_time) -> None:
        ts = replace(self._get(vehicle_id, stop), arrival_time=arrival_time)
        self.items.setdefault(int(vehicle_id), {})[stop] = (position, ts)

    def set_departure(self, *, vehicle_id, stop, position, departure_time) -> None:
        ts = replace(self._get(vehicle_id, stop), departure_time=departure_time)
        self.items.setdefault(int(vehicle_id), {})[stop] = (position, ts)

    def clear(self, vehicle_id: int) -> None:
        self.items.pop(int(vehicle_id), None)


class InMemoryStudents:
    def __init__(self):
        self.items: dict[int, Student] = {}
        self._ids = _Ids()

    def list_all(self) -> Sequence[Student]:
        return list(self.items.values())

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.items.get(int(student_id))

    def get_by_user(self, user_id: int) -> Optional[Student]:
        return next((s for s in self.items.values() if s.user_id == int(user_id)), None)

    def create(self, **fields) -> int:
        sid = self._ids.next()
        self.items[sid] = Student(student_id=sid, **fields)
        return sid

    def delete_by_id(self, student_id: int) -> bool:
        return self.items.pop(int(student_id), None) is not None


class InMemoryTeachers:
    def __init__(self):
        self.items: dict[int, Teacher] = {}
        self._ids = _Ids()

    def list_all(self) -> Sequence[Teacher]:
        return list(self.items.values())

    def get_by_user(self, user_id: int) -> Optional[Teacher]:
        return next((t for t in self.items.values() if t.user_id == int(user_id)), None)

    def create(self, *, user_id, name, email, subjects) -> int:
        tid = self._ids.next()
        self.items[tid] = Teacher(teacher_id=tid, user_id=user_id, name=name, email=email, subjects=tuple(subjects))
        return tid


class InMemoryParents:
    def __init__(self):
        self.items: dict[int, Parent] = {}
        self._ids = _Ids()

    def list_all(self) -> Sequence[Parent]:
        return list(self.items.values())

    def get_by_id(self, parent_id: int) -> Optional[Parent]:
        return self.items.get(int(parent_id))

    def get_by_user(self, user_id: int) -> Optional[Parent]:
        return next((p for p in self.items.values() if p.user_id == int(user_id)), None)

    def create(self, *, user_id, name, email, avatar_url, child_name) -> int:
        pid = self._ids.next()
        self.items[pid] = Parent(
            parent_id=pid, user_id=user_id, name=name, email=email, avatar_url=avatar_url, child_name=child_name
        )
        return pid

    def update_profile(self, *, parent_id, name, child_name, nearest_stop, assigned_route_id) -> bool:
        p = self.items.get(int(parent_id))
        if not p:
            return False
        self.items[p.parent_id] = replace(
            p, name=name, child_name=child_name, nearest_stop=nearest_stop, assigned_route_id=assigned_route_id
        )
        return True


def make_container(**overrides) -> Container:
    repos = dict(
        users_repo=InMemoryUsers(),
        applications_repo=InMemoryApplications(),
        drivers_repo=InMemoryDrivers(),
        vehicles_repo=InMemoryVehicles(),
        routes_repo=InMemoryRoutes(),
        logs_repo=InMemoryLogs(),
        timestamps_repo=InMemoryTimestamps(),
        students_repo=InMemoryStudents(),
        teachers_repo=InMemoryTeachers(),
        parents_repo=InMemoryParents(),
    )
    repos.update(overrides)
    return wire(conn=None, **repos)


def add_vehicle(vehicles: InMemoryVehicles, *, model: str = "Tata Starbus", plate: str = "KA01AB1234", **fields) -> int:
    vid = vehicles.create(
        model=model,
        license_plate=plate,
        chassis_number=None,
        image_url="/static/uploads/bus.png",
        current_location="School Campus",
    )
    if fields:
        vehicles.items[vid] = replace(vehicles.items[vid], **fields)
    return vid


def add_driver(drivers: InMemoryDrivers, *, name: str = "Ravi Kumar", user_id: Optional[int] = None, license_expiry: Optional[date] = date(2030, 1, 1)) -> int:
    return drivers.create(
        user_id=user_id,
        name=name,
        email=None,
        avatar_url="https://picsum.photos/seed/x/100/100",
        current_location="School Campus",
        availability="Mon-Fri, 7am-4pm",
        license_number="DL-12345",
        license_expiry=license_expiry,
        contact="9876543210",
    )
