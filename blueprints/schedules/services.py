# blueprints/schedules/services.py
from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

from extensions import db
from models import Role, Schedule
from blueprints.auth.services import ensure_role, ensure_self
from blueprints.core.actions import revalidate_path, server_action
from .schemas import ScheduleIn, ScheduleOut

log = logging.getLogger(__name__)

_FIELDS = ("title", "description", "start_time", "end_time")


@server_action("Failed to create schedule")
def create_schedule(actor, payload: Mapping[str, Any]) -> ScheduleOut:
    data = ScheduleIn.model_validate(payload)
    ensure_role(actor, Role.TEACHER, "Only teachers can create schedules")
    teacher_id = ensure_self(actor, data.teacher_id, "Schedules can only be created in your own name")

    s = Schedule(
        title=data.title,
        description=data.description,
        start_time=data.start_time,
        end_time=data.end_time,
        teacher_id=teacher_id,
    )
    db.session.add(s)
    db.session.commit()
    log.info("schedule %s created by %s", s.id, teacher_id)

    revalidate_path("/Schedules", "/Dashboard")
    return ScheduleOut.model_validate(s)


@server_action("Failed to update schedule")
def update_schedule(actor, schedule_id: str, payload: Mapping[str, Any]) -> ScheduleOut:
    """Partial update: omitted fields keep their stored value, the merged
    record is validated as a whole so the time range still holds."""
    ensure_role(actor, Role.TEACHER, "Only teachers can update schedules")
    s: Optional[Schedule] = db.session.get(Schedule, str(schedule_id))
    if s is None:
        raise LookupError("Schedule not found")
    if s.teacher_id != actor.id:
        raise PermissionError("You can only update your own schedules")

    merged = {f: getattr(s, f) for f in _FIELDS}
    if isinstance(payload, Mapping):
        merged.update({k: v for k, v in payload.items() if k in _FIELDS})
        merged["teacher_id"] = payload.get("teacher_id")
    else:
        merged = payload
    data = ScheduleIn.model_validate(merged)
    ensure_self(actor, data.teacher_id, "Schedules cannot be reassigned to another teacher")

    for f in _FIELDS:
        setattr(s, f, getattr(data, f))
    db.session.commit()
    log.info("schedule %s updated by %s", s.id, actor.id)

    revalidate_path("/Schedules", "/Dashboard")
    return ScheduleOut.model_validate(s)


@server_action("Failed to fetch schedules")
def get_schedules() -> list[ScheduleOut]:
    rows = Schedule.query.order_by(Schedule.start_time.asc()).all()
    return [ScheduleOut.model_validate(s) for s in rows]


@server_action("Failed to fetch schedule")
def get_schedule_by_id(schedule_id: str) -> Optional[ScheduleOut]:
    s = db.session.get(Schedule, str(schedule_id))
    return ScheduleOut.model_validate(s) if s else None


@server_action("Failed to fetch schedules")
def get_schedules_by_teacher(teacher_id: str) -> list[ScheduleOut]:
    rows = (Schedule.query
            .filter(Schedule.teacher_id == str(teacher_id))
            .order_by(Schedule.start_time.asc())
            .all())
    return [ScheduleOut.model_validate(s) for s in rows]
