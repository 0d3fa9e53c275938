from __future__ import annotations
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blueprints.auth.schemas import UserRef
from blueprints.core.validators import calendar_day, optional_text, require_text, require_value


# ---------- In ----------
class AssignmentIn(BaseModel):
    title: str = Field(None, validate_default=True, max_length=255)
    description: str = Field(None, validate_default=True)
    due_date: date = Field(None, validate_default=True)
    teacher_id: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        return require_text(v, "Title is required")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return require_text(v, "Description is required")

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v):
        v = require_value(v, "Due date is required")
        return calendar_day(v, "Due date must be a date without a time of day")

    @field_validator("teacher_id", mode="before")
    @classmethod
    def _teacher_id(cls, v):
        return optional_text(v)


class SubmissionIn(BaseModel):
    assignment_id: str = Field(None, validate_default=True)
    student_id: Optional[str] = None
    content: str = Field(None, validate_default=True)

    @field_validator("assignment_id", mode="before")
    @classmethod
    def _assignment_id(cls, v):
        return require_text(v, "Assignment ID is required")

    @field_validator("student_id", mode="before")
    @classmethod
    def _student_id(cls, v):
        return optional_text(v)

    @field_validator("content", mode="before")
    @classmethod
    def _content(cls, v):
        return require_text(v, "Content is required")


class GradeIn(BaseModel):
    grade: str = Field(None, validate_default=True, max_length=50)
    feedback: Optional[str] = None

    @field_validator("grade", mode="before")
    @classmethod
    def _grade(cls, v):
        return require_text(v, "Grade is required")

    @field_validator("feedback", mode="before")
    @classmethod
    def _feedback(cls, v):
        return optional_text(v)


# ---------- Out ----------
class AssignmentRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    due_date: date


class AssignmentOut(AssignmentRef):
    description: str
    teacher_id: str
    created_at: datetime
    updated_at: datetime
    teacher: Optional[UserRef] = None


class SubmissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    content: str
    submission_date: datetime
    student_id: str
    assignment_id: str
    grade: Optional[str] = None
    feedback: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    student: Optional[UserRef] = None
    assignment: Optional[AssignmentRef] = None
