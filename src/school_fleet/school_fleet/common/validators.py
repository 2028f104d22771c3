from __future__ import annotations

import re
from datetime import date
from typing import Optional
from urllib.parse import urlparse

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required.")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value.strip()) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters.")
    return value.strip()


def require_email(value: str, field_name: str = "Email") -> str:
    value = (value or "").strip()
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"{field_name}: please enter a valid email address.")
    return value.lower()


def is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def require_url_or_empty(value: Optional[str], field_name: str) -> str:
    value = (value or "").strip()
    if value and not is_url(value):
        raise ValidationError(f"{field_name}: please enter a valid URL.")
    return value


def require_non_negative(value: Optional[float], field_name: str) -> Optional[float]:
    if value is None:
        return None
    if value < 0:
        raise ValidationError(f"{field_name} must be a positive number.")
    return value


def require_iso_date(value: str, field_name: str) -> date:
    try:
        return parse_iso_date((value or "").strip())
    except ValueError:
        raise ValidationError(f"{field_name}: invalid date.")


def optional_iso_date(value: Optional[str], field_name: str) -> Optional[date]:
    if not value or not value.strip():
        return None
    return require_iso_date(value, field_name)
