from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.datetime_utils import today_local
from ..common.web import current_role, login_required, render_forbidden, roles_required
from ..container import Container
from ..core.constants import DEFAULT_NATIONALITY
from ..core.enums import ApplicationStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .forms import form_for

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/approvals", methods=["GET"], endpoint="approvals")
    @roles_required(Role.ADMIN)
    def approvals():
        pending = container.application_service.list_pending(current_role=current_role())
        return render_template("approvals.html", applications=pending, active_page="approvals")

    @app.route("/approvals/<int:application_id>/approve", methods=["POST"], endpoint="approve_application")
    @roles_required(Role.ADMIN)
    def approve_application(application_id: int):
        try:
            container.application_service.approve(current_role=current_role(), application_id=application_id)
            flash("Application approved.", "success")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.error("Approving application %s failed", application_id, exc_info=True)
            flash("System error while approving the application.", "danger")
        return redirect(url_for("approvals"))

    @app.route("/approvals/<int:application_id>/reject", methods=["POST"], endpoint="reject_application")
    @roles_required(Role.ADMIN)
    def reject_application(application_id: int):
        try:
            container.application_service.reject(current_role=current_role(), application_id=application_id)
            flash("Application rejected.", "info")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.error("Rejecting application %s failed", application_id, exc_info=True)
            flash("System error while rejecting the application.", "danger")
        return redirect(url_for("approvals"))

    @app.route("/registration/profile", methods=["GET", "POST"], endpoint="registration_profile")
    @login_required
    def registration_profile():
        role = current_role()
        profile_form = form_for(role) if role else None
        if profile_form is None:
            return render_forbidden()

        application = container.application_service.get_for_user(int(session["user_id"]))
        if application and application.status not in {ApplicationStatus.PROFILE_INCOMPLETE, ApplicationStatus.PENDING}:
            return redirect(url_for("under_review"))

        values = dict(application.profile) if application else {}
        if "nationality" in profile_form.field_names:
            values.setdefault("nationality", DEFAULT_NATIONALITY)
        if request.method == "POST":
            values.update(request.form.to_dict())
            try:
                container.application_service.submit_profile(
                    user_id=int(session["user_id"]),
                    role=role,
                    form=request.form,
                    today=today_local(),
                )
                flash("Your application has been submitted for review.", "success")
                return redirect(url_for("under_review"))
            except (ValidationError, AuthorizationError, NotFoundError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.error("Profile submission failed", exc_info=True)
                flash("System error while submitting your application.", "danger")

        return render_template("registration_profile.html", form=profile_form, values=values)
