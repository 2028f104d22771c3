from __future__ import annotations

import logging

from flask import Flask, current_app, flash, redirect, render_template, request, send_file, session, url_for

from ..common.datetime_utils import today_local
from ..common.uploads import allowed_file, save_uploaded_file
from ..common.web import current_role, parse_optional_float, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_DOCUMENT_FIELDS = ("fitness_certificate_photo", "insurance_photo", "pollution_certificate_photo")


def _upload(field_name: str):
    file = request.files.get(field_name)
    if not file or not file.filename:
        return None
    extensions = current_app.config["ALLOWED_IMAGE_EXTENSIONS"]
    if not allowed_file(file.filename, extensions):
        raise ValidationError(f"Unsupported file type for {field_name.replace('_', ' ')}.")
    return file


def _save(file):
    return save_uploaded_file(file, current_app.config["UPLOAD_FOLDER"]) if file else None


def register(app: Flask, container: Container) -> None:
    @app.route("/vehicles", methods=["GET"], endpoint="vehicles")
    @roles_required(Role.ADMIN)
    def vehicles():
        rows = container.vehicle_service.list_overview(today_local())
        summary = container.report_service.fleet_summary()
        return render_template("vehicles.html", rows=rows, summary=summary, active_page="vehicles")

    @app.route("/vehicles/add", methods=["GET", "POST"], endpoint="add_vehicle")
    @roles_required(Role.ADMIN)
    def add_vehicle():
        if request.method == "POST":
            try:
                image = _upload("image")
                document_files = {name: _upload(name) for name in _DOCUMENT_FIELDS}
                fields = dict(
                    current_role=current_role(),
                    model=request.form.get("model", ""),
                    license_plate=request.form.get("license_plate", ""),
                    chassis_number=request.form.get("chassis_number", ""),
                    fitness_certificate_expiry=request.form.get("fitness_certificate_expiry", ""),
                    insurance_expiry=request.form.get("insurance_expiry", ""),
                    pollution_certificate_expiry=request.form.get("pollution_certificate_expiry", ""),
                )
                # nothing is written to the upload folder until the form is valid
                container.vehicle_service.check_new_vehicle(has_image=image is not None, **fields)

                container.vehicle_service.add_vehicle(
                    image_url=_save(image),
                    **{name: _save(f) for name, f in document_files.items()},
                    **fields,
                )
                flash("Vehicle added.", "success")
                return redirect(url_for("vehicles"))
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.error("Adding vehicle failed", exc_info=True)
                flash("System error while adding the vehicle.", "danger")

        return render_template("add_vehicle.html", active_page="add_vehicle")

    @app.route("/vehicles/<int:vehicle_id>", methods=["GET"], endpoint="vehicle_details")
    @roles_required(Role.ADMIN)
    def vehicle_details(vehicle_id: int):
        try:
            details = container.vehicle_service.details(vehicle_id)
        except NotFoundError as e:
            flash(str(e), "danger")
            return redirect(url_for("vehicles"))
        levels = container.vehicle_service.expiry_levels(details.vehicle, today_local())
        return render_template("vehicle_details.html", details=details, levels=levels, active_page="vehicles")

    @app.route("/vehicles/export", methods=["GET"], endpoint="export_vehicles")
    @roles_required(Role.ADMIN)
    def export_vehicles():
        output = container.report_service.to_excel(container.report_service.export_rows())
        return send_file(
            output,
            download_name=f"fleet_report_{today_local().isoformat()}.xlsx",
            as_attachment=True,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    @app.route("/routes", methods=["GET", "POST"], endpoint="routes")
    @roles_required(Role.ADMIN)
    def routes():
        if request.method == "POST":
            try:
                stops = request.form.getlist("stops")
                if len(stops) == 1:
                    stops = stops[0].splitlines()
                container.route_service.create_and_assign(
                    current_role=current_role(),
                    name=request.form.get("name", ""),
                    stops=stops,
                    vehicle_id=int(request.form.get("vehicle_id") or 0),
                )
                flash("Route created and assigned.", "success")
                return redirect(url_for("routes"))
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.error("Creating route failed", exc_info=True)
                flash("System error while creating the route.", "danger")

        return render_template(
            "routes.html",
            routes=container.route_service.list_with_vehicles(),
            vehicles=container.vehicles_repo.list_all(),
            active_page="routes",
        )

    @app.route("/assignments", methods=["GET", "POST"], endpoint="assignments")
    @roles_required(Role.ADMIN)
    def assignments():
        if request.method == "POST":
            try:
                container.assignment_service.assign(
                    current_role=current_role(),
                    driver_id=int(request.form.get("driver_id") or 0),
                    vehicle_id=int(request.form.get("vehicle_id") or 0),
                )
                flash("Vehicle assigned.", "success")
                return redirect(url_for("assignments"))
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.error("Assigning vehicle failed", exc_info=True)
                flash("System error while assigning the vehicle.", "danger")

        return render_template(
            "assignments.html",
            overview=container.assignment_service.overview(),
            suggestions=container.assignment_service.suggest(today_local()),
            active_page="assignments",
        )

    @app.route("/assignments/<int:driver_id>/release", methods=["POST"], endpoint="release_assignment")
    @roles_required(Role.ADMIN)
    def release_assignment(driver_id: int):
        try:
            container.assignment_service.release(current_role=current_role(), driver_id=driver_id)
            flash("Vehicle released.", "info")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "danger")
        except Exception:
            logger.error("Releasing driver %s failed", driver_id, exc_info=True)
            flash("System error while releasing the vehicle.", "danger")
        return redirect(url_for("assignments"))

    @app.route("/maintenance", methods=["GET", "POST"], endpoint="maintenance")
    @roles_required(Role.DRIVER)
    def maintenance():
        user_id = int(session["user_id"])
        if request.method == "POST":
            try:
                container.maintenance_service.log_entry(
                    current_role=current_role(),
                    user_id=user_id,
                    opening_km=parse_optional_float(request.form.get("opening_km")),
                    closing_km=parse_optional_float(request.form.get("closing_km")),
                    fuel_liters=parse_optional_float(request.form.get("fuel_liters")),
                    fuel_cost=parse_optional_float(request.form.get("fuel_cost")),
                    maintenance_cost=parse_optional_float(request.form.get("maintenance_cost")),
                    notes=request.form.get("notes", ""),
                    today=today_local(),
                )
                flash("Maintenance log saved.", "success")
                return redirect(url_for("maintenance"))
            except ValueError:
                flash("Please enter valid numbers.", "danger")
            except (ValidationError, AuthorizationError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.error("Saving maintenance log failed", exc_info=True)
                flash("System error while saving the log.", "danger")

        vehicle = container.maintenance_service.vehicle_for_driver(user_id)
        opening_km = container.maintenance_service.default_opening_km(vehicle) if vehicle else 0.0
        return render_template(
            "maintenance.html",
            vehicle=vehicle,
            opening_km=opening_km,
            active_page="maintenance",
        )
