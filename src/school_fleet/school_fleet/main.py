from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, session

from config import get_settings_module

from .accounts.controller import register as register_accounts
from .applications.controller import register as register_applications
from .common.web import current_role
from .container import Container, build_container
from .core.constants import DEFAULT_ADMIN_EMAIL, DEFAULT_EXPIRY_WARNING_DAYS
from .core.navigation import nav_for
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin_user, list_tables
from .database.connection import DBConfig
from .drivers.controller import register as register_drivers
from .fleet.controller import register as register_fleet
from .school.controller import register as register_school
from .tracking.controller import register as register_tracking

logger = logging.getLogger(__name__)

_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    A prebuilt container skips all database setup (used by the web tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["UPLOAD_FOLDER"] = getattr(settings, "UPLOAD_FOLDER", str(_ROOT / "static" / "uploads"))
    app.config["ALLOWED_IMAGE_EXTENSIONS"] = set(getattr(settings, "ALLOWED_IMAGE_EXTENSIONS", {"png", "jpg", "jpeg"}))
    admin_email = getattr(settings, "ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL)
    expiry_warning_days = int(getattr(settings, "EXPIRY_WARNING_DAYS", DEFAULT_EXPIRY_WARNING_DAYS))

    if container is None:
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_ROOT / "database" / "seed.sql")
            ensure_admin_user(db_config, email=admin_email)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            admin_email=admin_email,
            expiry_warning_days=expiry_warning_days,
        )

    @app.context_processor
    def inject_navigation():
        role = current_role() if "user_id" in session else None
        current_user = {"full_name": session.get("name"), "email": session.get("email"), "role": session.get("role")}
        return {"nav_items": nav_for(role) if role else [], "current_user": current_user}

    register_accounts(app, container)
    register_applications(app, container)
    register_dashboard(app, container)
    register_drivers(app, container)
    register_fleet(app, container)
    register_tracking(app, container)
    register_school(app, container)

    return app
