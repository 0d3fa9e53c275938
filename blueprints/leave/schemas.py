from __future__ import annotations
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models import LeaveStatus
from blueprints.auth.schemas import UserRef
from blueprints.core.validators import calendar_day, ensure_date_range, optional_text, require_text, require_value


class LeaveRequestIn(BaseModel):
    reason: str = Field(None, validate_default=True)
    start_date: date = Field(None, validate_default=True)
    end_date: date = Field(None, validate_default=True)
    student_id: Optional[str] = None

    @field_validator("reason", mode="before")
    @classmethod
    def _reason(cls, v):
        return require_text(v, "Reason is required")

    @field_validator("start_date", mode="before")
    @classmethod
    def _start(cls, v):
        return calendar_day(require_value(v, "Start date is required"),
                            "Start date must be a date without a time of day")

    @field_validator("end_date", mode="before")
    @classmethod
    def _end(cls, v):
        return calendar_day(require_value(v, "End date is required"),
                            "End date must be a date without a time of day")

    @field_validator("student_id", mode="before")
    @classmethod
    def _student_id(cls, v):
        return optional_text(v)

    @model_validator(mode="after")
    def _range(self):
        ensure_date_range(self.start_date, self.end_date)
        return self


class LeaveDecisionIn(BaseModel):
    status: LeaveStatus = Field(None, validate_default=True)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        v = require_text(v, "Status is required").upper()
        if v not in (LeaveStatus.APPROVED.value, LeaveStatus.REJECTED.value):
            raise ValueError("Status must be APPROVED or REJECTED")
        return v


class LeaveRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    reason: str
    start_date: date
    end_date: date
    status: LeaveStatus
    student_id: str
    decided_by_id: Optional[str] = None
    decided_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    student: Optional[UserRef] = None
