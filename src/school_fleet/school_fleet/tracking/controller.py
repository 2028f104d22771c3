from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, request, session, url_for

from ..common.datetime_utils import now_local
from ..common.web import current_role, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _run(action, success_message: str):
        try:
            action()
            flash(success_message, "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.error("Trip update failed", exc_info=True)
            flash("System error while updating the trip.", "danger")
        return redirect(url_for("dashboard"))

    @app.route("/trip/reached", methods=["POST"], endpoint="trip_reached")
    @roles_required(Role.DRIVER)
    def trip_reached():
        return _run(
            lambda: container.progress_service.mark_reached(
                current_role=current_role(), user_id=int(session["user_id"]), now=now_local()
            ),
            "Arrival recorded.",
        )

    @app.route("/trip/depart", methods=["POST"], endpoint="trip_depart")
    @roles_required(Role.DRIVER)
    def trip_depart():
        return _run(
            lambda: container.progress_service.depart(
                current_role=current_role(), user_id=int(session["user_id"]), now=now_local()
            ),
            "Departure recorded.",
        )

    @app.route("/trip/issue", methods=["POST"], endpoint="trip_issue")
    @roles_required(Role.DRIVER)
    def trip_issue():
        return _run(
            lambda: container.progress_service.report_issue(
                current_role=current_role(), user_id=int(session["user_id"]), note=request.form.get("note", "")
            ),
            "Issue reported.",
        )

    @app.route("/api/vehicles/<int:vehicle_id>/status", methods=["GET"], endpoint="api_vehicle_status")
    def api_vehicle_status(vehicle_id: int):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue."}), 401
        try:
            return jsonify({"success": True, "data": container.progress_service.status(vehicle_id)})
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except Exception:
            logger.error("Status lookup for vehicle %s failed", vehicle_id, exc_info=True)
            return jsonify({"success": False, "message": "System error"}), 500
