from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.web import current_role, parse_optional_int, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/students", methods=["GET", "POST"], endpoint="students")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def students():
        if request.method == "POST":
            try:
                container.student_service.add_student(
                    current_role=current_role(),
                    name=request.form.get("name", ""),
                    father_name=request.form.get("father_name", ""),
                    mother_name=request.form.get("mother_name", ""),
                    dob=request.form.get("dob", ""),
                    class_name=request.form.get("class_name", ""),
                    roll_no=request.form.get("roll_no", ""),
                    parent_id=parse_optional_int(request.form.get("parent_id")),
                    result_card_url=request.form.get("result_card_url", ""),
                )
                flash("Student added.", "success")
                return redirect(url_for("students"))
            except ValueError:
                flash("Invalid parent selection.", "danger")
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.error("Adding student failed", exc_info=True)
                flash("System error while adding the student.", "danger")

        return render_template(
            "students.html",
            rows=container.student_service.list_with_parents(),
            parents=container.student_service.list_parents(),
            active_page="students",
        )

    @app.route("/students/<int:student_id>/delete", methods=["POST"], endpoint="delete_student")
    @roles_required(Role.ADMIN, Role.TEACHER)
    def delete_student(student_id: int):
        try:
            container.student_service.delete_student(current_role=current_role(), student_id=student_id)
            flash("Student deleted.", "success")
        except (ValidationError, AuthorizationError, NotFoundError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.error("Deleting student %s failed", student_id, exc_info=True)
            flash("System error while deleting the student.", "danger")
        return redirect(url_for("students"))

    @app.route("/teachers", methods=["GET"], endpoint="teachers")
    @roles_required(Role.ADMIN)
    def teachers():
        return render_template("teachers.html", teachers=container.teacher_service.list_all(), active_page="teachers")

    @app.route("/profile", methods=["GET", "POST"], endpoint="profile")
    @roles_required(Role.DRIVER, Role.PARENT, Role.STUDENT)
    def profile():
        role = current_role()
        user_id = int(session["user_id"])

        if request.method == "POST" and role == Role.PARENT:
            try:
                container.parent_service.update_profile(
                    current_role=role,
                    user_id=user_id,
                    name=request.form.get("name", ""),
                    child_name=request.form.get("child_name", ""),
                    nearest_stop=request.form.get("nearest_stop", ""),
                )
                flash("Profile updated.", "success")
                return redirect(url_for("dashboard"))
            except (ValidationError, AuthorizationError, NotFoundError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.error("Updating parent profile failed", exc_info=True)
                flash("System error while updating your profile.", "danger")

        context = {"role": role, "active_page": "profile"}
        if role == Role.PARENT:
            context["parent"] = container.parent_service.get_by_user(user_id)
            context["stops"] = container.route_service.all_stops()
        elif role == Role.DRIVER:
            context["driver"] = container.driver_service.get_by_user(user_id)
        else:
            context["student"] = container.student_service.get_by_user(user_id)
        return render_template("profile.html", **context)
