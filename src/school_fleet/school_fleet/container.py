from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .accounts.mysql_user_repository import MySQLUserRepository
from .accounts.repository import UserRepository
from .accounts.service import AuthService, RegistrationService
from .applications.mysql_application_repository import MySQLApplicationRepository
from .applications.repository import ApplicationRepository
from .applications.service import ApplicationService
from .core.constants import DEFAULT_ADMIN_EMAIL, DEFAULT_EXPIRY_WARNING_DAYS
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .drivers.mysql_driver_repository import MySQLDriverRepository
from .drivers.repository import DriverRepository
from .drivers.service import DriverService
from .fleet.mysql_maintenance_log_repository import MySQLMaintenanceLogRepository
from .fleet.mysql_route_repository import MySQLRouteRepository
from .fleet.mysql_vehicle_repository import MySQLVehicleRepository
from .fleet.repository import MaintenanceLogRepository, RouteRepository, VehicleRepository
from .fleet.service import AssignmentService, MaintenanceService, RouteService, VehicleService
from .reports.service import FleetReportService
from .school.mysql_parent_repository import MySQLParentRepository
from .school.mysql_student_repository import MySQLStudentRepository
from .school.mysql_teacher_repository import MySQLTeacherRepository
from .school.repository import ParentRepository, StudentRepository, TeacherRepository
from .school.service import ParentService, StudentService, TeacherService
from .tracking.mysql_stop_timestamp_repository import MySQLStopTimestampRepository
from .tracking.repository import StopTimestampRepository
from .tracking.service import RouteProgressService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    applications_repo: ApplicationRepository
    drivers_repo: DriverRepository
    vehicles_repo: VehicleRepository
    routes_repo: RouteRepository
    logs_repo: MaintenanceLogRepository
    timestamps_repo: StopTimestampRepository
    students_repo: StudentRepository
    teachers_repo: TeacherRepository
    parents_repo: ParentRepository

    auth_service: AuthService
    registration_service: RegistrationService
    application_service: ApplicationService
    driver_service: DriverService
    vehicle_service: VehicleService
    maintenance_service: MaintenanceService
    route_service: RouteService
    assignment_service: AssignmentService
    progress_service: RouteProgressService
    student_service: StudentService
    teacher_service: TeacherService
    parent_service: ParentService
    report_service: FleetReportService
    dashboard_service: DashboardService


def wire(
    *,
    conn: Optional[DatabaseConnection],
    users_repo,
    applications_repo,
    drivers_repo,
    vehicles_repo,
    routes_repo,
    logs_repo,
    timestamps_repo,
    students_repo,
    teachers_repo,
    parents_repo,
    admin_email: str = DEFAULT_ADMIN_EMAIL,
    expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
) -> Container:
    """Build services over any set of repositories (MySQL ones or test fakes)."""
    progress_service = RouteProgressService(drivers_repo, vehicles_repo, routes_repo, timestamps_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        applications_repo=applications_repo,
        drivers_repo=drivers_repo,
        vehicles_repo=vehicles_repo,
        routes_repo=routes_repo,
        logs_repo=logs_repo,
        timestamps_repo=timestamps_repo,
        students_repo=students_repo,
        teachers_repo=teachers_repo,
        parents_repo=parents_repo,
        auth_service=AuthService(users_repo, applications_repo, admin_email=admin_email),
        registration_service=RegistrationService(users_repo, applications_repo),
        application_service=ApplicationService(
            applications_repo, drivers_repo, students_repo, teachers_repo, parents_repo
        ),
        driver_service=DriverService(
            drivers_repo, vehicles_repo, logs_repo, expiry_warning_days=expiry_warning_days
        ),
        vehicle_service=VehicleService(
            vehicles_repo, drivers_repo, logs_repo, routes_repo, expiry_warning_days=expiry_warning_days
        ),
        maintenance_service=MaintenanceService(vehicles_repo, drivers_repo, logs_repo),
        route_service=RouteService(routes_repo, vehicles_repo, timestamps_repo),
        assignment_service=AssignmentService(drivers_repo, vehicles_repo, expiry_warning_days=expiry_warning_days),
        progress_service=progress_service,
        student_service=StudentService(students_repo, parents_repo),
        teacher_service=TeacherService(teachers_repo),
        parent_service=ParentService(parents_repo, routes_repo),
        report_service=FleetReportService(vehicles_repo, logs_repo, drivers_repo),
        dashboard_service=DashboardService(
            drivers_repo, vehicles_repo, routes_repo, parents_repo, students_repo, progress_service
        ),
    )


def build_container(
    *,
    db_config: dict,
    admin_email: str = DEFAULT_ADMIN_EMAIL,
    expiry_warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        applications_repo=MySQLApplicationRepository(conn),
        drivers_repo=MySQLDriverRepository(conn),
        vehicles_repo=MySQLVehicleRepository(conn),
        routes_repo=MySQLRouteRepository(conn),
        logs_repo=MySQLMaintenanceLogRepository(conn),
        timestamps_repo=MySQLStopTimestampRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        parents_repo=MySQLParentRepository(conn),
        admin_email=admin_email,
        expiry_warning_days=expiry_warning_days,
    )
