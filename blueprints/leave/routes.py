# blueprints/leave/routes.py
from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from blueprints.auth.routes import student_required, teacher_required
from blueprints.core.actions import ActionError, as_response
from . import services as svc

bp = Blueprint("leave", __name__)
api_bp = Blueprint("leave_api", __name__)


@bp.get("/LeaveRequests")
@login_required
def index():
    if current_user.is_teacher:
        res = svc.get_leave_requests()
    else:
        res = svc.get_leave_requests_by_student(current_user.id)
    if not res.success:
        flash(res.error, "danger")
    return render_template("leave/index.html", requests=res.data if res.success else [])


@bp.post("/LeaveRequests/<request_id>/decide")
@teacher_required
def decide(request_id: str):
    status = (request.form.get("status") or "").upper()
    res = svc.update_leave_request(current_user, request_id, {"status": status})
    if res.success:
        flash(f"Leave request {res.data.status.value.lower()}", "success")
    else:
        flash(res.error, "danger")
    return redirect(url_for("leave.index"))


@bp.route("/CreateLeaveRequest", methods=["GET", "POST"])
@student_required
def create():
    form = {}
    if request.method == "POST":
        form = request.form.to_dict()
        res = svc.create_leave_request(current_user, form)
        if res.success:
            flash("Leave request submitted successfully", "success")
            return redirect(url_for("leave.index"))
        flash(res.error, "danger")
    return render_template("leave/create.html", form=form)


# ---------- API ----------
@api_bp.get("/leave-requests")
@login_required
def api_list():
    student_id = request.args.get("student_id")
    if student_id:
        return as_response(svc.get_leave_requests_by_student(student_id))
    return as_response(svc.get_leave_requests(request.args.get("status")))


@api_bp.post("/leave-requests")
@login_required
def api_create():
    payload = request.get_json(silent=True)
    return as_response(svc.create_leave_request(current_user, payload if payload is not None else {}), 201)


@api_bp.get("/leave-requests/<request_id>")
@login_required
def api_get(request_id: str):
    res = svc.get_leave_request_by_id(request_id)
    if res.success and res.data is None:
        res = ActionError("Leave request not found", "not_found")
    return as_response(res)


@api_bp.patch("/leave-requests/<request_id>")
@login_required
def api_decide(request_id: str):
    payload = request.get_json(silent=True)
    return as_response(svc.update_leave_request(current_user, request_id, payload if payload is not None else {}))
