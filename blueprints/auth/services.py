# blueprints/auth/services.py
from __future__ import annotations
import logging
from typing import Optional

from flask import current_app
from sqlalchemy import func

from extensions import db
from models import Role, User
from blueprints.core.actions import server_action
from .schemas import UserOut

log = logging.getLogger(__name__)


def authenticate(email: str, password: str, *, require_password: Optional[bool] = None) -> Optional[User]:
    """Look a user up by email and, unless disabled in config, check the password.

    Unknown email and wrong password both give None, callers show one message.
    """
    email = (email or "").strip().lower()
    if not email:
        return None
    if require_password is None:
        require_password = bool(current_app.config.get("AUTH_REQUIRE_PASSWORD", True))

    user: Optional[User] = User.query.filter(func.lower(User.email) == email).first()
    if user is None:
        log.info("login failed: unknown email")
        return None
    if require_password and not user.check_password(password or ""):
        log.info("login failed: bad password for user %s", user.id)
        return None
    return user


def restore_session(user_id: str | None) -> Optional[User]:
    if not user_id:
        return None
    return db.session.get(User, str(user_id))


# ---------- policy ----------
def ensure_role(actor, role: Role, message: str) -> None:
    if actor is None or not getattr(actor, "is_authenticated", False):
        raise PermissionError("You must be logged in")
    if getattr(actor, "role", None) != role:
        raise PermissionError(message)


def ensure_self(actor, user_id: str | None, message: str) -> str:
    """Return the actor id; a differing explicit id is rejected."""
    if user_id and str(user_id) != str(actor.id):
        raise PermissionError(message)
    return str(actor.id)


# ---------- actions ----------
@server_action("Failed to fetch users")
def get_users() -> list[UserOut]:
    rows = User.query.order_by(User.created_at.asc()).all()
    return [UserOut.model_validate(u) for u in rows]


@server_action("Failed to fetch user")
def get_user_by_id(user_id: str) -> Optional[UserOut]:
    user = db.session.get(User, str(user_id))
    return UserOut.model_validate(user) if user else None
