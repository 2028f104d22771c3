from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.constants import DEFAULT_EXPIRY_WARNING_DAYS
from ..core.enums import ExpiryLevel


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def age_on(dob: date, today: date) -> int:
    """Full years between dob and today."""
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years


def days_until(day: date, today: date) -> int:
    return (day - today).days


def expiry_level(day: Optional[date], today: date, warning_days: int = DEFAULT_EXPIRY_WARNING_DAYS) -> ExpiryLevel:
    if day is None:
        return ExpiryLevel.UNKNOWN
    remaining = days_until(day, today)
    if remaining < 0:
        return ExpiryLevel.EXPIRED
    if remaining <= warning_days:
        return ExpiryLevel.EXPIRING_SOON
    return ExpiryLevel.VALID
