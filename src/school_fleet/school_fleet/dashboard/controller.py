from __future__ import annotations

from flask import Flask, redirect, render_template, session, url_for

from ..common.web import current_role, login_required, render_forbidden
from ..container import Container
from ..core.enums import ApplicationStatus, Role


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        role = current_role()
        if role is None:
            return render_forbidden()
        if role != Role.ADMIN:
            application = container.application_service.get_for_user(int(session["user_id"]))
            if application and application.status != ApplicationStatus.APPROVED:
                return redirect(url_for("under_review"))

        view = container.dashboard_service.for_user(role=role, user_id=int(session["user_id"]))
        return render_template("dashboard.html", view=view, **view.data, active_page="dashboard")
