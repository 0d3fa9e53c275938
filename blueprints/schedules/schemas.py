from __future__ import annotations
from datetime import UTC, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blueprints.auth.schemas import UserRef
from blueprints.core.validators import ensure_time_range, optional_text, require_text, require_value


class ScheduleIn(BaseModel):
    title: str = Field(None, validate_default=True, max_length=255)
    description: str = Field(None, validate_default=True)
    start_time: datetime = Field(None, validate_default=True)
    end_time: datetime = Field(None, validate_default=True)
    teacher_id: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        return require_text(v, "Title is required")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return require_text(v, "Description is required")

    @field_validator("start_time", mode="before")
    @classmethod
    def _start(cls, v):
        return require_value(v, "Start time is required")

    @field_validator("end_time", mode="before")
    @classmethod
    def _end(cls, v):
        return require_value(v, "End time is required")

    @field_validator("start_time", "end_time")
    @classmethod
    def _naive_utc(cls, v: datetime):
        # stored naive; "...Z" from a JS client arrives tz-aware
        if v.tzinfo is not None:
            v = v.astimezone(UTC).replace(tzinfo=None)
        return v

    @field_validator("teacher_id", mode="before")
    @classmethod
    def _teacher_id(cls, v):
        return optional_text(v)

    @model_validator(mode="after")
    def _range(self):
        ensure_time_range(self.start_time, self.end_time)
        return self


class ScheduleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    start_time: datetime
    end_time: datetime
    teacher_id: str
    teacher: Optional[UserRef] = None
