from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import ApplicationStatus, Role


@dataclass(frozen=True)
class Application:
    """Registration request waiting for admin review.

    `profile` holds whatever the role-specific registration form collected.
    """

    application_id: int
    user_id: int
    name: str
    email: str
    role: Role
    status: ApplicationStatus
    applied_date: datetime
    profile: dict[str, Any] = field(default_factory=dict)
    decided_at: Optional[datetime] = None
