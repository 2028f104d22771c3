from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.datetime_utils import now_local
from ..common.web import login_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .service import LoginDestination

logger = logging.getLogger(__name__)

_DESTINATION_ENDPOINTS = {
    LoginDestination.DASHBOARD: "dashboard",
    LoginDestination.UNDER_REVIEW: "under_review",
    LoginDestination.COMPLETE_PROFILE: "registration_profile",
}


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")

            try:
                result = container.auth_service.authenticate(email, password)

                session.clear()
                session["user_id"] = result.user.user_id
                session["name"] = result.user.full_name
                session["email"] = result.user.email
                session["role"] = result.user.role.value

                if result.destination == LoginDestination.DASHBOARD:
                    flash("Logged in successfully.", "success")
                return redirect(url_for(_DESTINATION_ENDPOINTS[result.destination]))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.error("Login failed", exc_info=True)
                if bool(app.config.get("DEBUG", False)):
                    flash(f"System error while logging in: {e}", "danger")
                else:
                    flash("System error while logging in.", "danger")

        return render_template("login.html")

    @app.route("/register", methods=["GET", "POST"], endpoint="register")
    def register_user():
        if request.method == "POST":
            try:
                container.registration_service.register(
                    name=request.form.get("name", ""),
                    email=request.form.get("email", ""),
                    password=request.form.get("password", ""),
                    role=request.form.get("role", ""),
                    now=now_local(),
                )
                flash("Account created. Please log in to continue.", "success")
                return redirect(url_for("login"))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.error("Registration failed", exc_info=True)
                flash("System error while creating the account.", "danger")

        return render_template(
            "register.html",
            roles=Role.registrable(),
            form=request.form,
        )

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("You have been logged out.", "info")
        return redirect(url_for("login"))

    @app.route("/under-review", endpoint="under_review")
    @login_required
    def under_review():
        application = container.application_service.get_for_user(int(session["user_id"]))
        return render_template("under_review.html", application=application)
