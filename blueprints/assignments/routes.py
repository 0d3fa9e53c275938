# blueprints/assignments/routes.py
from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required

from blueprints.auth.routes import student_required, teacher_required
from blueprints.core.actions import ActionError, as_response
from . import services as svc

bp = Blueprint("assignments", __name__)
api_bp = Blueprint("assignments_api", __name__)


def _flash_error(res) -> None:
    flash(res.error, "danger")


# ---------- SSR ----------
@bp.get("/Assignments")
@login_required
def index():
    if current_user.is_teacher:
        res = svc.get_assignments_by_teacher(current_user.id)
        if not res.success:
            _flash_error(res)
        return render_template("assignments/index.html", assignments=res.data if res.success else [])

    res = svc.get_assignments()
    subs = svc.get_submissions_by_student(current_user.id)
    if not res.success:
        _flash_error(res)
    if not subs.success:
        _flash_error(subs)
    by_assignment = {s.assignment_id: s for s in (subs.data if subs.success else [])}
    rows = [
        (a, svc.submission_status(by_assignment.get(a.id)))
        for a in (res.data if res.success else [])
    ]
    return render_template("assignments/index.html", rows=rows)


@bp.route("/CreateAssignment", methods=["GET", "POST"])
@teacher_required
def create():
    form = {}
    if request.method == "POST":
        form = request.form.to_dict()
        res = svc.create_assignment(current_user, form)
        if res.success:
            flash("Assignment created successfully", "success")
            return redirect(url_for("assignments.index"))
        _flash_error(res)
    return render_template("assignments/create.html", form=form)


@bp.get("/AssignmentDetail/<assignment_id>")
@login_required
def detail(assignment_id: str):
    res = svc.get_assignment_by_id(assignment_id)
    if not res.success:
        _flash_error(res)
        return redirect(url_for("assignments.index"))
    if res.data is None:
        return render_template("assignments/detail.html", assignment=None), 404
    assignment = res.data

    submissions, my_submission = [], None
    if current_user.is_teacher:
        subs = svc.get_submissions_by_assignment(assignment_id)
        if subs.success:
            submissions = subs.data
        else:
            _flash_error(subs)
    else:
        subs = svc.get_submissions_by_student(current_user.id)
        if subs.success:
            my_submission = next((s for s in subs.data if s.assignment_id == assignment_id), None)
        else:
            _flash_error(subs)

    return render_template(
        "assignments/detail.html",
        assignment=assignment,
        submissions=submissions,
        my_submission=my_submission,
        is_owner=current_user.is_teacher and assignment.teacher_id == current_user.id,
    )


@bp.post("/AssignmentDetail/<assignment_id>/submit")
@student_required
def submit(assignment_id: str):
    res = svc.create_submission(current_user, {
        "assignment_id": assignment_id,
        "content": request.form.get("content"),
    })
    if res.success:
        flash("Assignment submitted successfully", "success")
        return redirect(url_for("assignments.index"))
    _flash_error(res)
    return redirect(url_for("assignments.detail", assignment_id=assignment_id))


@bp.post("/AssignmentDetail/<assignment_id>/grade/<submission_id>")
@teacher_required
def grade(assignment_id: str, submission_id: str):
    res = svc.update_submission(current_user, submission_id, {
        "grade": request.form.get("grade"),
        "feedback": request.form.get("feedback"),
    })
    if res.success:
        flash("Submission graded successfully", "success")
    else:
        _flash_error(res)
    return redirect(url_for("assignments.detail", assignment_id=assignment_id))


# ---------- API ----------
def _json_payload() -> dict:
    data = request.get_json(silent=True)
    return data if data is not None else request.form.to_dict()


@api_bp.get("/assignments")
@login_required
def api_list():
    teacher_id = request.args.get("teacher_id")
    if teacher_id:
        return as_response(svc.get_assignments_by_teacher(teacher_id))
    return as_response(svc.get_assignments())


@api_bp.post("/assignments")
@login_required
def api_create():
    return as_response(svc.create_assignment(current_user, _json_payload()), 201)


@api_bp.get("/assignments/<assignment_id>")
@login_required
def api_get(assignment_id: str):
    res = svc.get_assignment_by_id(assignment_id)
    if res.success and res.data is None:
        res = ActionError("Assignment not found", "not_found")
    return as_response(res)


@api_bp.get("/assignments/<assignment_id>/submissions")
@login_required
def api_submissions(assignment_id: str):
    return as_response(svc.get_submissions_by_assignment(assignment_id))


@api_bp.post("/assignments/<assignment_id>/submissions")
@login_required
def api_submit(assignment_id: str):
    payload = _json_payload()
    if isinstance(payload, dict):
        payload = {**payload, "assignment_id": assignment_id}
    return as_response(svc.create_submission(current_user, payload), 201)


@api_bp.patch("/submissions/<submission_id>")
@login_required
def api_grade(submission_id: str):
    return as_response(svc.update_submission(current_user, submission_id, _json_payload()))


@api_bp.get("/students/<student_id>/submissions")
@login_required
def api_student_submissions(student_id: str):
    return as_response(svc.get_submissions_by_student(student_id))
