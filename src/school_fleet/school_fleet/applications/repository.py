from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import ApplicationStatus, Role
from .model import Application


class ApplicationRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        role: Role,
        status: ApplicationStatus,
        applied_date: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, application_id: int) -> Optional[Application]:
        raise NotImplementedError

    def get_by_user(self, user_id: int) -> Optional[Application]:
        raise NotImplementedError

    def list_by_status(self, status: ApplicationStatus) -> Sequence[Application]:
        raise NotImplementedError

    def submit_profile(self, *, application_id: int, profile: dict[str, Any]) -> bool:
        """Store the profile and move the application to PENDING."""

        raise NotImplementedError

    def decide(self, *, application_id: int, status: ApplicationStatus) -> bool:
        """Approve/reject; only succeeds while the application is PENDING."""

        raise NotImplementedError
