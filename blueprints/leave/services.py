# blueprints/leave/services.py
from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

from sqlalchemy import update

from extensions import db
from models import LeaveRequest, LeaveStatus, Role, utcnow
from blueprints.auth.services import ensure_role, ensure_self
from blueprints.core.actions import revalidate_path, server_action
from .schemas import LeaveDecisionIn, LeaveRequestIn, LeaveRequestOut

log = logging.getLogger(__name__)


def _parse_status(status) -> Optional[LeaveStatus]:
    if isinstance(status, LeaveStatus):
        return status
    if status is None or status == "":
        return None
    try:
        return LeaveStatus(str(status).upper())
    except ValueError:
        raise ValueError(f"Unknown status: {status}") from None


def _find(request_id) -> Optional[LeaveRequest]:
    return db.session.get(LeaveRequest, str(request_id))


@server_action("Failed to create leave request")
def create_leave_request(actor, payload: Mapping[str, Any]) -> LeaveRequestOut:
    data = LeaveRequestIn.model_validate(payload)
    ensure_role(actor, Role.STUDENT, "Only students can request leave")
    student_id = ensure_self(actor, data.student_id, "You can only request leave for yourself")

    lr = LeaveRequest(
        reason=data.reason,
        start_date=data.start_date,
        end_date=data.end_date,
        status=LeaveStatus.PENDING,
        student_id=student_id,
    )
    db.session.add(lr)
    db.session.commit()
    log.info("leave request %s filed by %s", lr.id, student_id)

    revalidate_path("/LeaveRequests", "/Dashboard")
    return LeaveRequestOut.model_validate(lr)


@server_action("Failed to update leave request")
def update_leave_request(actor, request_id: str, payload: Mapping[str, Any]) -> LeaveRequestOut:
    """Decide a pending request. Only PENDING -> APPROVED/REJECTED is allowed."""
    data = LeaveDecisionIn.model_validate(payload)
    ensure_role(actor, Role.TEACHER, "Only teachers can approve or reject leave requests")

    lr = _find(request_id)
    if lr is None:
        raise LookupError("Leave request not found")
    if lr.status != LeaveStatus.PENDING:
        raise ValueError(f"Leave request has already been {lr.status.value.lower()}")

    # status stays in the WHERE clause: a concurrent decision leaves rowcount 0
    res = db.session.execute(
        update(LeaveRequest)
        .where(LeaveRequest.id == lr.id, LeaveRequest.status == LeaveStatus.PENDING)
        .values(status=data.status, decided_by_id=actor.id, decided_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        db.session.rollback()
        current = db.session.get(LeaveRequest, lr.id)
        raise ValueError(f"Leave request has already been {current.status.value.lower()}")
    db.session.commit()
    lr = db.session.get(LeaveRequest, lr.id)
    log.info("leave request %s %s by %s", lr.id, lr.status.value, actor.id)

    revalidate_path("/LeaveRequests", "/Dashboard")
    return LeaveRequestOut.model_validate(lr)


@server_action("Failed to fetch leave requests")
def get_leave_requests(status=None) -> list[LeaveRequestOut]:
    q = LeaveRequest.query
    wanted = _parse_status(status)
    if wanted is not None:
        q = q.filter(LeaveRequest.status == wanted)
    rows = q.order_by(LeaveRequest.created_at.desc()).all()
    return [LeaveRequestOut.model_validate(lr) for lr in rows]


@server_action("Failed to fetch leave request")
def get_leave_request_by_id(request_id: str) -> Optional[LeaveRequestOut]:
    lr = db.session.get(LeaveRequest, str(request_id))
    return LeaveRequestOut.model_validate(lr) if lr else None


@server_action("Failed to fetch leave requests")
def get_leave_requests_by_student(student_id: str) -> list[LeaveRequestOut]:
    rows = (LeaveRequest.query
            .filter(LeaveRequest.student_id == str(student_id))
            .order_by(LeaveRequest.created_at.desc())
            .all())
    return [LeaveRequestOut.model_validate(lr) for lr in rows]
