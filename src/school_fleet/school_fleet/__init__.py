"""School Fleet package.

Feature modules (accounts, applications, drivers, fleet, tracking, school,
reports, dashboard) each have a thin Flask controller on top of
service/repository layers.
"""
from __future__ import annotations

from .main import create_app

__all__ = ["create_app"]
