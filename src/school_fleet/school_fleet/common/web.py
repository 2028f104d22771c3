from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import flash, redirect, render_template, session, url_for

from ..core.enums import Role


def current_role() -> Optional[Role]:
    raw = session.get("role")
    try:
        return Role(raw) if raw else None
    except ValueError:
        return None


def current_user_id() -> int:
    return int(session["user_id"])


def render_forbidden() -> tuple[str, int]:
    current_user = {"full_name": session.get("name"), "role": session.get("role")}
    return render_template("403.html", current_user=current_user), 403


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            flash("Please log in to continue.", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    """Allow only the given roles; everybody else gets the 403 page."""

    allowed = set(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return redirect(url_for("login"))
            if current_role() not in allowed:
                return render_forbidden()
            return view(*args, **kwargs)

        return wrapper

    return decorator


def parse_optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not str(value).strip():
        return None
    return float(value)


def parse_optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not str(value).strip():
        return None
    return int(value)
