from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from werkzeug.security import check_password_hash, generate_password_hash

from ..applications.repository import ApplicationRepository
from ..common.validators import require_email, require_min_length
from ..core.constants import DEFAULT_ADMIN_EMAIL, MIN_PASSWORD_LENGTH
from ..core.enums import ApplicationStatus, Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class LoginDestination(str, Enum):
    DASHBOARD = "dashboard"
    UNDER_REVIEW = "under_review"
    COMPLETE_PROFILE = "complete_profile"


@dataclass(frozen=True)
class LoginResult:
    """What the login screen needs: who logged in and where to send them."""

    user: User
    destination: LoginDestination


class RegistrationService:
    """Use case: self-registration of non-admin users."""

    def __init__(self, users: UserRepository, applications: ApplicationRepository):
        self._users = users
        self._applications = applications

    def register(self, *, name: str, email: str, password: str, role: str, now: datetime) -> int:
        name = require_min_length(name, "Full name", 2)
        email = require_email(email)
        if password is None or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")

        try:
            role_value = Role(role)
        except ValueError:
            raise ValidationError("Please select a valid role.")
        if role_value not in Role.registrable():
            raise ValidationError("Please select a valid role.")

        if self._users.get_by_email(email):
            raise ValidationError("This email address is already in use by another account.")

        user_id = self._users.create_user(
            full_name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role_value,
        )

        # Parents have no profile form, so they go straight to review.
        status = ApplicationStatus.PENDING if role_value == Role.PARENT else ApplicationStatus.PROFILE_INCOMPLETE
        self._applications.create(
            user_id=user_id,
            name=name,
            email=email,
            role=role_value,
            status=status,
            applied_date=now,
        )
        logger.info("User %s registered as %s (application %s)", user_id, role_value.value, status.value)
        return user_id


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository, applications: ApplicationRepository, *, admin_email: str = DEFAULT_ADMIN_EMAIL):
        self._users = users
        self._applications = applications
        self._admin_email = admin_email.strip().lower()

    def authenticate(self, email: str, password: str) -> LoginResult:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password.")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # unknown hash method, e.g. a placeholder seeded by hand
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password.")

        if user.role == Role.ADMIN or user.email == self._admin_email:
            return LoginResult(user=user, destination=LoginDestination.DASHBOARD)

        app = self._applications.get_by_user(user.user_id)
        if not app:
            raise AuthenticationError("Your application data was not found. Please contact the administrator.")

        if app.status == ApplicationStatus.APPROVED:
            destination = LoginDestination.DASHBOARD
        elif app.status in {ApplicationStatus.PENDING, ApplicationStatus.REJECTED}:
            destination = LoginDestination.UNDER_REVIEW
        elif user.role == Role.PARENT:
            destination = LoginDestination.UNDER_REVIEW
        else:
            destination = LoginDestination.COMPLETE_PROFILE
        return LoginResult(user=user, destination=destination)
