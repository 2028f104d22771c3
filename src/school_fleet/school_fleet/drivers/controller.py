from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import today_local
from ..common.web import current_role, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/drivers", methods=["GET", "POST"], endpoint="drivers")
    @roles_required(Role.ADMIN)
    def drivers():
        if request.method == "POST":
            try:
                container.driver_service.add_driver(
                    current_role=current_role(),
                    name=request.form.get("name", ""),
                    contact=request.form.get("contact", ""),
                    license_number=request.form.get("license_number", ""),
                    license_expiry=request.form.get("license_expiry", ""),
                )
                flash("Driver added.", "success")
                return redirect(url_for("drivers"))
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.error("Adding driver failed", exc_info=True)
                flash("System error while adding the driver.", "danger")

        rows = container.driver_service.list_overview(today_local())
        return render_template("drivers.html", rows=rows, active_page="drivers")

    @app.route("/drivers/<int:driver_id>/insights", methods=["GET"], endpoint="driver_insights")
    @roles_required(Role.ADMIN)
    def driver_insights(driver_id: int):
        try:
            insights = container.driver_service.insights(driver_id)
        except NotFoundError as e:
            flash(str(e), "danger")
            return redirect(url_for("drivers"))
        return render_template("driver_insights.html", insights=insights, active_page="drivers")
