from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.constants import (
    DEFAULT_AVAILABILITY,
    DEFAULT_LOCATION,
    NOT_AVAILABLE,
    avatar_url,
)
from ..core.enums import ApplicationStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..drivers.repository import DriverRepository
from ..school.repository import ParentRepository, StudentRepository, TeacherRepository
from .forms import form_for
from .model import Application
from .repository import ApplicationRepository

logger = logging.getLogger(__name__)

_APPROVABLE_ROLES = frozenset({Role.DRIVER, Role.STUDENT, Role.TEACHER, Role.PARENT})


def _first_name(name: str) -> str:
    parts = (name or "").split()
    return parts[0] if parts else "user"


def split_subjects(raw: Any) -> list[str]:
    """'Math, Physics,,' -> ['Math', 'Physics']"""
    if isinstance(raw, (list, tuple)):
        items = [str(x) for x in raw]
    else:
        items = str(raw or "").split(",")
    return [s.strip() for s in items if s.strip()]


class ApplicationService:
    """Profile completion by applicants and the admin's approve/reject decision."""

    def __init__(
        self,
        applications: ApplicationRepository,
        drivers: DriverRepository,
        students: StudentRepository,
        teachers: TeacherRepository,
        parents: ParentRepository,
    ):
        self._applications = applications
        self._drivers = drivers
        self._students = students
        self._teachers = teachers
        self._parents = parents

    def get_for_user(self, user_id: int) -> Optional[Application]:
        return self._applications.get_by_user(int(user_id))

    def submit_profile(self, *, user_id: int, role: Role, form: Mapping[str, Any], today: date) -> None:
        app = self._applications.get_by_user(int(user_id))
        if not app:
            raise NotFoundError("Your application data was not found. Please register again.")
        if app.role != role:
            raise AuthorizationError("This registration form is not for your role.")
        if app.status not in {ApplicationStatus.PROFILE_INCOMPLETE, ApplicationStatus.PENDING}:
            raise ValidationError("Your application has already been reviewed.")

        profile_form = form_for(role)
        if profile_form is None:
            raise ValidationError("No registration form exists for this role.")

        cleaned = profile_form.validate(form, today=today)
        profile = {**app.profile, **cleaned}
        if not self._applications.submit_profile(application_id=app.application_id, profile=profile):
            raise ValidationError("Submitting your profile failed. Please try again.")
        logger.info("Application %s submitted for review (%s)", app.application_id, role.value)

    def list_pending(self, *, current_role: Role) -> Sequence[Application]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can review applications.")
        return self._applications.list_by_status(ApplicationStatus.PENDING)

    def _pending(self, application_id: int) -> Application:
        app = self._applications.get_by_id(int(application_id))
        if not app:
            raise NotFoundError("Application not found.")
        if app.status != ApplicationStatus.PENDING:
            raise ValidationError("This application has already been processed.")
        return app

    def _create_role_record(self, app: Application) -> int:
        p = app.profile
        if app.role == Role.DRIVER:
            expiry_raw = p.get("licenseExpiryDate")
            return self._drivers.create(
                user_id=app.user_id,
                name=app.name,
                email=app.email,
                avatar_url=avatar_url(_first_name(app.name)),
                current_location=DEFAULT_LOCATION,
                availability=DEFAULT_AVAILABILITY,
                license_number=p.get("drivingLicenseNumber") or NOT_AVAILABLE,
                license_expiry=parse_iso_date(expiry_raw) if expiry_raw else None,
                contact=p.get("mobileNumber") or NOT_AVAILABLE,
            )
        if app.role == Role.STUDENT:
            return self._students.create(
                user_id=app.user_id,
                name=app.name,
                email=app.email,
                father_name=p.get("fatherName") or NOT_AVAILABLE,
                mother_name=p.get("motherName") or NOT_AVAILABLE,
                dob=p.get("dob") or NOT_AVAILABLE,
                class_name=NOT_AVAILABLE,
                roll_no=NOT_AVAILABLE,
                result_card_url=None,
                parent_id=None,
            )
        if app.role == Role.TEACHER:
            return self._teachers.create(
                user_id=app.user_id,
                name=app.name,
                email=app.email,
                subjects=split_subjects(p.get("subjects")),
            )
        if app.role == Role.PARENT:
            return self._parents.create(
                user_id=app.user_id,
                name=app.name,
                email=app.email,
                avatar_url=avatar_url(_first_name(app.name)),
                child_name=NOT_AVAILABLE,
            )
        raise ValidationError("Invalid role for approval")

    def approve(self, *, current_role: Role, application_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can approve applications.")

        app = self._pending(application_id)
        if app.role not in _APPROVABLE_ROLES:
            raise ValidationError("Invalid role for approval")

        # decide only succeeds while the application is still pending
        if not self._applications.decide(application_id=app.application_id, status=ApplicationStatus.APPROVED):
            raise ValidationError("Approving the application failed.")
        try:
            record_id = self._create_role_record(app)
        except Exception:
            logger.error("Application %s approved but the %s record was not created", app.application_id,
                         app.role.value, exc_info=True)
            raise
        logger.info("Application %s approved; %s record %s created", app.application_id, app.role.value, record_id)

    def reject(self, *, current_role: Role, application_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can reject applications.")

        app = self._pending(application_id)
        if not self._applications.decide(application_id=app.application_id, status=ApplicationStatus.REJECTED):
            raise ValidationError("Rejecting the application failed.")
        logger.info("Application %s rejected", app.application_id)
