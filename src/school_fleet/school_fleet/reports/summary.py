"""Distance, fuel and cost aggregation over maintenance logs."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..fleet.model import MaintenanceLog


@dataclass(frozen=True)
class LogSummary:
    total_km: float
    total_fuel_liters: float
    total_fuel_cost: float
    total_maintenance_cost: float
    average_mileage: Optional[float]

    @property
    def total_cost(self) -> float:
        return self.total_fuel_cost + self.total_maintenance_cost


@dataclass(frozen=True)
class MonthlyRow:
    month: str
    distance_km: float
    fuel_liters: float
    total_cost: float


def summarize_logs(logs: Iterable[MaintenanceLog]) -> LogSummary:
    """Totals over a set of logs.

    A log without closing km contributes no distance. Average mileage is
    km per litre and stays None while no fuel has been recorded.
    """
    km = fuel = fuel_cost = maintenance_cost = 0.0
    for log in logs:
        km += log.distance_km
        fuel += float(log.fuel_liters or 0)
        fuel_cost += float(log.fuel_cost or 0)
        maintenance_cost += float(log.maintenance_cost or 0)

    return LogSummary(
        total_km=km,
        total_fuel_liters=fuel,
        total_fuel_cost=fuel_cost,
        total_maintenance_cost=maintenance_cost,
        average_mileage=(km / fuel) if fuel > 0 else None,
    )


def _month_key(day: date) -> tuple[int, int]:
    return day.year, day.month


def monthly_breakdown(logs: Iterable[MaintenanceLog]) -> list[MonthlyRow]:
    """One row per calendar month ("Jan 2025"), oldest month first."""
    buckets: dict[tuple[int, int], list[MaintenanceLog]] = {}
    for log in logs:
        buckets.setdefault(_month_key(log.log_date), []).append(log)

    rows: list[MonthlyRow] = []
    for (year, month) in sorted(buckets):
        s = summarize_logs(buckets[(year, month)])
        rows.append(
            MonthlyRow(
                month=date(year, month, 1).strftime("%b %Y"),
                distance_km=s.total_km,
                fuel_liters=s.total_fuel_liters,
                total_cost=s.total_cost,
            )
        )
    return rows
