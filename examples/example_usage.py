"""Example: use the service layer directly (no Flask).

Controllers are thin; the fleet report below is the same one the
/vehicles page shows.
"""

import importlib

from config import get_settings_module

from src.school_fleet.school_fleet.common.datetime_utils import today_local
from src.school_fleet.school_fleet.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    summary = container.report_service.fleet_summary()
    print(f"{summary.vehicle_count} vehicles ({summary.available_count} available)")
    print(f"distance={summary.logs.total_km:.1f} km cost={summary.logs.total_cost:.2f}")

    for row in container.vehicle_service.list_overview(today_local()):
        levels = ", ".join(f"{k}={v.value}" for k, v in row.expiry_levels.items())
        driver = row.driver.name if row.driver else "-"
        print(f"  {row.vehicle.license_plate:<12} {row.vehicle.model:<24} driver={driver:<16} {levels}")


if __name__ == "__main__":
    main()
