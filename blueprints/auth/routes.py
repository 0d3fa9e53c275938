# blueprints/auth/routes.py
from __future__ import annotations
from functools import wraps
from typing import Callable, Optional

from flask import (
    Blueprint, request, jsonify, session, redirect, url_for,
    render_template, abort, flash
)
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from pydantic import ValidationError

from extensions import csrf, login_manager
from models import Role, User
from .schemas import LoginIn, UserOut
from . import services as svc

bp = Blueprint("auth", __name__, template_folder="../../templates", static_folder="../../static")
api_bp = Blueprint("auth_api", __name__)

INVALID_CREDENTIALS = "Invalid email or password"

@login_manager.user_loader
def load_user(uid: str) -> Optional[User]:
    user = svc.restore_session(uid)
    if user is None:
        # stale id (user deleted): forget it instead of retrying on every request
        session.pop("_user_id", None)
        session.pop("_fresh", None)
        session["_remember"] = "clear"
    return user

# ---------- role decorators ----------
def role_required(role: Role) -> Callable:
    def decorator(fn: Callable):
        @wraps(fn)
        @login_required
        def wrapper(*args, **kwargs):
            if getattr(current_user, "role", None) != role:
                abort(403, description=f"This page is only available to {role.value.lower()}s")
            return fn(*args, **kwargs)
        return wrapper
    return decorator

teacher_required = role_required(Role.TEACHER)
student_required = role_required(Role.STUDENT)

# ---------- 401 ----------
@login_manager.unauthorized_handler
def _unauth():
    if request.path.startswith("/api/"):
        return jsonify({"error": "unauthorized"}), 401
    flash(login_manager.login_message, login_manager.login_message_category)
    return redirect(url_for("auth.login", next=request.full_path if request.query_string else request.path))

def _safe_next(target: str | None) -> str | None:
    if not target or not target.startswith("/") or target.startswith("//"):
        return None
    return target

# ---------- SSR: login / logout ----------
@bp.route("/Login", methods=["GET", "POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("dashboard.index"))

    email = ""
    if request.method == "POST":
        email = (request.form.get("email") or "").strip()
        password = request.form.get("password") or ""
        if not email or not password:
            flash("Please enter both email and password", "danger")
        else:
            user = svc.authenticate(email, password)
            if user is None:
                flash(INVALID_CREDENTIALS, "danger")
            else:
                login_user(user, remember=True)
                flash(f"Welcome, {user.name or user.email}!", "success")
                return redirect(_safe_next(request.args.get("next")) or url_for("dashboard.index"))

    return render_template("auth/login.html", email=email)

@bp.post("/logout")
@login_required
def logout():
    logout_user()
    flash("You have been logged out", "info")
    return redirect(url_for("auth.login"))

# ---------- API ----------
@api_bp.post("/login")
@csrf.exempt
def api_login():
    try:
        payload = LoginIn.model_validate(request.get_json(silent=True) or request.form.to_dict() or {})
    except ValidationError:
        return jsonify({"user": None}), 400
    user = svc.authenticate(payload.email or "", payload.password or "")
    if user is None:
        return jsonify({"user": None}), 401
    login_user(user, remember=True)
    return jsonify({"user": UserOut.model_validate(user).model_dump(mode="json")})

@api_bp.get("/users")
@login_required
def api_users():
    res = svc.get_users()
    if not res.success:
        return jsonify({"users": []}), res.http_status
    return jsonify({"users": [u.model_dump(mode="json") for u in res.data]})

@api_bp.get("/user/<user_id>")
def api_user(user_id: str):
    res = svc.get_user_by_id(user_id)
    if not res.success:
        return jsonify({"user": None}), res.http_status
    if res.data is None:
        return jsonify({"user": None}), 404
    return jsonify({"user": res.data.model_dump(mode="json")})

@api_bp.get("/csrf")
def api_csrf():
    return jsonify({"csrf_token": generate_csrf()})

@api_bp.post("/logout")
@csrf.exempt
@login_required
def api_logout():
    logout_user()
    return jsonify({"ok": True})
