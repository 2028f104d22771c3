from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_fleet.school_fleet.database.bootstrap import apply_seed_sql, ensure_admin_user
from src.school_fleet.school_fleet.database.connection import DBConfig


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo routes, vehicles, drivers and the admin account.")
    parser.add_argument("--admin-password", default="admin123")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    admin_email = getattr(settings, "ADMIN_EMAIL", "admin@sdm.in")

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_admin_user(db_config, email=admin_email, password=args.admin_password)

    print(f"OK: Seeded database -> {DBConfig.from_dict(db_config).describe()} (admin={admin_email})")


if __name__ == "__main__":
    main()
