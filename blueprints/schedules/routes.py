# blueprints/schedules/routes.py
from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from blueprints.auth.routes import teacher_required
from blueprints.core.actions import ActionError, as_response
from blueprints.core.validators import combine_date_time
from . import services as svc

bp = Blueprint("schedules", __name__)
api_bp = Blueprint("schedules_api", __name__)


@bp.get("/Schedules")
@login_required
def index():
    if current_user.is_teacher:
        res = svc.get_schedules_by_teacher(current_user.id)
    else:
        res = svc.get_schedules()
    if not res.success:
        flash(res.error, "danger")
    return render_template(
        "schedules/index.html",
        schedules=res.data if res.success else [],
        show_teacher=not current_user.is_teacher,
    )


@bp.route("/CreateSchedule", methods=["GET", "POST"])
@teacher_required
def create():
    form = {}
    if request.method == "POST":
        form = request.form.to_dict()
        res = svc.create_schedule(current_user, {
            "title": form.get("title"),
            "description": form.get("description"),
            "start_time": combine_date_time(form.get("start_date"), form.get("start_time")),
            "end_time": combine_date_time(form.get("end_date"), form.get("end_time")),
        })
        if res.success:
            flash("Schedule created successfully", "success")
            return redirect(url_for("schedules.index"))
        flash(res.error, "danger")
    return render_template("schedules/create.html", form=form)


# ---------- API ----------
@api_bp.get("/schedules")
@login_required
def api_list():
    teacher_id = request.args.get("teacher_id")
    if teacher_id:
        return as_response(svc.get_schedules_by_teacher(teacher_id))
    return as_response(svc.get_schedules())


@api_bp.post("/schedules")
@login_required
def api_create():
    payload = request.get_json(silent=True)
    return as_response(svc.create_schedule(current_user, payload if payload is not None else {}), 201)


@api_bp.get("/schedules/<schedule_id>")
@login_required
def api_get(schedule_id: str):
    res = svc.get_schedule_by_id(schedule_id)
    if res.success and res.data is None:
        res = ActionError("Schedule not found", "not_found")
    return as_response(res)


@api_bp.put("/schedules/<schedule_id>")
@login_required
def api_update(schedule_id: str):
    payload = request.get_json(silent=True)
    return as_response(svc.update_schedule(current_user, schedule_id, payload if payload is not None else {}))
