from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for access control."""

    ADMIN = "admin"
    DRIVER = "driver"
    TEACHER = "teacher"
    PARENT = "parent"
    STUDENT = "student"

    @classmethod
    def registrable(cls) -> tuple["Role", ...]:
        return (cls.TEACHER, cls.STUDENT, cls.PARENT, cls.DRIVER)


class ApplicationStatus(str, Enum):
    """Lifecycle of a registration application."""

    PROFILE_INCOMPLETE = "profile_incomplete"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LocationStatus(str, Enum):
    """Where a vehicle is relative to its route."""

    IN_TRANSIT = "IN_TRANSIT"
    AT_STOP = "AT_STOP"
    ISSUE_REPORTED = "ISSUE_REPORTED"

    @property
    def label(self) -> str:
        return {
            LocationStatus.IN_TRANSIT: "In Transit",
            LocationStatus.AT_STOP: "At Stop",
            LocationStatus.ISSUE_REPORTED: "Issue Reported",
        }[self]


class ExpiryLevel(str, Enum):
    """Badge level for licenses and vehicle certificates."""

    EXPIRED = "EXPIRED"
    EXPIRING_SOON = "EXPIRING_SOON"
    VALID = "VALID"
    UNKNOWN = "UNKNOWN"
