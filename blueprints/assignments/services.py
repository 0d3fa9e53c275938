# blueprints/assignments/services.py
from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from extensions import db
from models import Assignment, Role, Submission, utcnow
from blueprints.auth.services import ensure_role, ensure_self
from blueprints.core.actions import revalidate_path, server_action
from .schemas import AssignmentIn, AssignmentOut, GradeIn, SubmissionIn, SubmissionOut

log = logging.getLogger(__name__)

ALREADY_SUBMITTED = "You have already submitted this assignment"


def _detail_path(assignment_id: str) -> str:
    return f"/AssignmentDetail/{assignment_id}"


# ---------- assignments ----------
@server_action("Failed to create assignment")
def create_assignment(actor, payload: Mapping[str, Any]) -> AssignmentOut:
    data = AssignmentIn.model_validate(payload)
    ensure_role(actor, Role.TEACHER, "Only teachers can create assignments")
    teacher_id = ensure_self(actor, data.teacher_id, "Assignments can only be created in your own name")

    a = Assignment(
        title=data.title,
        description=data.description,
        due_date=data.due_date,
        teacher_id=teacher_id,
    )
    db.session.add(a)
    db.session.commit()
    log.info("assignment %s created by %s", a.id, teacher_id)

    revalidate_path("/Assignments", "/Dashboard")
    return AssignmentOut.model_validate(a)


@server_action("Failed to fetch assignments")
def get_assignments() -> list[AssignmentOut]:
    rows = Assignment.query.order_by(Assignment.due_date.asc(), Assignment.created_at.asc()).all()
    return [AssignmentOut.model_validate(a) for a in rows]


@server_action("Failed to fetch assignment")
def get_assignment_by_id(assignment_id: str) -> Optional[AssignmentOut]:
    a = db.session.get(Assignment, str(assignment_id))
    return AssignmentOut.model_validate(a) if a else None


@server_action("Failed to fetch assignments")
def get_assignments_by_teacher(teacher_id: str) -> list[AssignmentOut]:
    rows = (Assignment.query
            .filter(Assignment.teacher_id == str(teacher_id))
            .order_by(Assignment.due_date.asc(), Assignment.created_at.asc())
            .all())
    return [AssignmentOut.model_validate(a) for a in rows]


# ---------- submissions ----------
@server_action("Failed to submit assignment")
def create_submission(actor, payload: Mapping[str, Any]) -> SubmissionOut:
    data = SubmissionIn.model_validate(payload)
    ensure_role(actor, Role.STUDENT, "Only students can submit assignments")
    student_id = ensure_self(actor, data.student_id, "You can only submit your own work")

    if db.session.get(Assignment, data.assignment_id) is None:
        raise LookupError("Assignment not found")

    exists = (Submission.query
              .filter_by(student_id=student_id, assignment_id=data.assignment_id)
              .first())
    if exists:
        raise ValueError(ALREADY_SUBMITTED)

    s = Submission(
        content=data.content,
        submission_date=utcnow(),
        student_id=student_id,
        assignment_id=data.assignment_id,
    )
    db.session.add(s)
    try:
        db.session.commit()
    except IntegrityError:
        # concurrent double submit, caught by uq_submission_student_assignment
        db.session.rollback()
        raise ValueError(ALREADY_SUBMITTED)
    log.info("submission %s for assignment %s by %s", s.id, data.assignment_id, student_id)

    revalidate_path(_detail_path(data.assignment_id), "/Assignments", "/Dashboard")
    return SubmissionOut.model_validate(s)


@server_action("Failed to grade submission")
def update_submission(actor, submission_id: str, payload: Mapping[str, Any]) -> SubmissionOut:
    data = GradeIn.model_validate(payload)
    ensure_role(actor, Role.TEACHER, "Only teachers can grade submissions")

    s: Optional[Submission] = db.session.get(Submission, str(submission_id))
    if s is None:
        raise LookupError("Submission not found")
    if s.assignment.teacher_id != actor.id:
        raise PermissionError("You can only grade submissions for your own assignments")

    s.grade = data.grade
    s.feedback = data.feedback
    db.session.commit()
    log.info("submission %s graded by %s", s.id, actor.id)

    revalidate_path(_detail_path(s.assignment_id), "/Assignments", "/Dashboard")
    return SubmissionOut.model_validate(s)


@server_action("Failed to fetch submissions")
def get_submissions_by_assignment(assignment_id: str) -> list[SubmissionOut]:
    rows = (Submission.query
            .filter(Submission.assignment_id == str(assignment_id))
            .order_by(Submission.submission_date.desc())
            .all())
    return [SubmissionOut.model_validate(s) for s in rows]


@server_action("Failed to fetch submissions")
def get_submissions_by_student(student_id: str) -> list[SubmissionOut]:
    rows = (Submission.query
            .filter(Submission.student_id == str(student_id))
            .order_by(Submission.submission_date.desc())
            .all())
    return [SubmissionOut.model_validate(s) for s in rows]


def submission_status(sub: Optional[SubmissionOut]) -> str:
    """Label shown to a student next to an assignment."""
    if sub is None:
        return "Not Submitted"
    if sub.grade:
        return f"Graded: {sub.grade}"
    return "Submitted"
