from __future__ import annotations

from datetime import date, datetime

import pytest

from tests.fakes import make_container


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 7, 45, 0)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def container():
    return make_container()
