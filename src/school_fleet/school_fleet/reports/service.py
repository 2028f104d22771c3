from __future__ import annotations

import io
from dataclasses import dataclass

import pandas as pd

from ..drivers.repository import DriverRepository
from ..fleet.repository import MaintenanceLogRepository, VehicleRepository
from .summary import LogSummary, summarize_logs


@dataclass(frozen=True)
class FleetSummary:
    vehicle_count: int
    available_count: int
    logs: LogSummary


class FleetReportService:
    def __init__(self, vehicles: VehicleRepository, logs: MaintenanceLogRepository, drivers: DriverRepository):
        self._vehicles = vehicles
        self._logs = logs
        self._drivers = drivers

    def fleet_summary(self) -> FleetSummary:
        vehicles = self._vehicles.list_all()
        return FleetSummary(
            vehicle_count=len(vehicles),
            available_count=sum(1 for v in vehicles if v.is_available),
            logs=summarize_logs(self._logs.list_all()),
        )

    def export_rows(self) -> list[dict]:
        """One row per vehicle with its driver and lifetime log totals."""
        logs_by_vehicle: dict[int, list] = {}
        for log in self._logs.list_all():
            logs_by_vehicle.setdefault(log.vehicle_id, []).append(log)

        rows: list[dict] = []
        for v in self._vehicles.list_all():
            driver = self._drivers.get_by_vehicle(v.vehicle_id)
            s = summarize_logs(logs_by_vehicle.get(v.vehicle_id, []))
            rows.append(
                {
                    "Vehicle": v.model,
                    "License Plate": v.license_plate,
                    "Driver": driver.name if driver else "Unassigned",
                    "Available": "Yes" if v.is_available else "No",
                    "Fitness Expiry": _fmt_date(v.fitness_certificate_expiry),
                    "Insurance Expiry": _fmt_date(v.insurance_expiry),
                    "Pollution Expiry": _fmt_date(v.pollution_certificate_expiry),
                    "Total KM": round(s.total_km, 1),
                    "Fuel (L)": round(s.total_fuel_liters, 2),
                    "Fuel Cost": round(s.total_fuel_cost, 2),
                    "Maintenance Cost": round(s.total_maintenance_cost, 2),
                    "Avg Mileage (km/L)": round(s.average_mileage, 2) if s.average_mileage is not None else "",
                }
            )
        return rows

    @staticmethod
    def to_excel(rows: list[dict], *, sheet_name: str = "Fleet") -> io.BytesIO:
        df = pd.DataFrame(rows)

        # Written in memory, never to disk.
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)
        output.seek(0)
        return output


def _fmt_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else ""
