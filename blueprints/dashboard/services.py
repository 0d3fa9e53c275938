# blueprints/dashboard/services.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable

from blueprints.assignments import services as assignments
from blueprints.leave import services as leave
from blueprints.schedules import services as schedules
from blueprints.assignments.schemas import AssignmentOut, SubmissionOut
from blueprints.leave.schemas import LeaveRequestOut
from blueprints.schedules.schemas import ScheduleOut
from models import LeaveStatus


@dataclass
class DashboardData:
    assignments: list[AssignmentOut] = field(default_factory=list)
    schedules: list[ScheduleOut] = field(default_factory=list)
    leave_requests: list[LeaveRequestOut] = field(default_factory=list)
    submissions: list[SubmissionOut] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def pending_assignments(all_assignments: Iterable[AssignmentOut],
                        submissions: Iterable[SubmissionOut]) -> list[AssignmentOut]:
    """Assignments the student has not submitted yet, order kept."""
    done = {s.assignment_id for s in submissions}
    return [a for a in all_assignments if a.id not in done]


def _take(res, out: DashboardData, limit: int) -> list:
    if not res.success:
        out.errors.append(res.error)
        return []
    return list(res.data)[:limit]


def dashboard_for(user, *, limit: int = 5) -> DashboardData:
    out = DashboardData()
    if user.is_teacher:
        out.assignments = _take(assignments.get_assignments_by_teacher(user.id), out, limit)
        out.schedules = _take(schedules.get_schedules_by_teacher(user.id), out, limit)
        out.leave_requests = _take(leave.get_leave_requests(LeaveStatus.PENDING), out, limit)
        return out

    all_res = assignments.get_assignments()
    subs_res = assignments.get_submissions_by_student(user.id)
    if all_res.success and subs_res.success:
        out.assignments = pending_assignments(all_res.data, subs_res.data)[:limit]
    else:
        out.errors.extend(r.error for r in (all_res, subs_res) if not r.success)
    out.submissions = list(subs_res.data)[:limit] if subs_res.success else []
    out.schedules = _take(schedules.get_schedules(), out, limit)
    out.leave_requests = _take(leave.get_leave_requests_by_student(user.id), out, limit)
    return out
