from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from models import Role


class UserRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None


class UserOut(UserRef):
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
