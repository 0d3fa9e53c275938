from __future__ import annotations
import json, logging
from datetime import UTC, datetime
from time import perf_counter

from flask import g, jsonify, redirect, render_template, request, url_for
from flask_login import current_user
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

from . import bp                 # используем bp из __init__.py
from .filters import register_filters

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("event", "path", "method", "status", "duration_ms", "user_id"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _attach_json_handler(logger: logging.Logger) -> None:
    has_json = any(
        isinstance(h, logging.StreamHandler)
        and isinstance(getattr(h, "formatter", None), JSONFormatter)
        for h in logger.handlers
    )
    if not has_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

def _setup_structured_logging(app):
    _attach_json_handler(app.logger)
    # сервисы пишут в собственные логгеры под blueprints.*
    _attach_json_handler(logging.getLogger("blueprints"))

@bp.before_app_request
def _start_timer():
    g._req_start = perf_counter()

@bp.after_app_request
def _revalidate_and_log(response: Response):
    paths = getattr(g, "revalidated_paths", None)
    if paths:
        response.headers["X-Revalidate"] = ", ".join(paths)
    try:
        duration_ms = int((perf_counter() - g._req_start) * 1000)
    except AttributeError:
        duration_ms = None
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
        "user_id": current_user.get_id() if current_user.is_authenticated else None,
    }
    logging.getLogger("blueprints.core").info("request handled", extra=extra)
    return response

@bp.app_errorhandler(403)
@bp.app_errorhandler(404)
def _http_error(e: HTTPException):
    if request.path.startswith("/api/"):
        return jsonify({"success": False, "error": e.description or e.name}), e.code
    return render_template(f"errors/{e.code}.html", message=e.description), e.code

@bp.record_once
def _on_register(state):
    app = state.app
    _setup_structured_logging(app)
    register_filters(app)

@bp.get("/")
@bp.get("/Index")
def home():
    if current_user.is_authenticated:
        return redirect(url_for("dashboard.index"))
    return render_template("core/index.html")

@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z"),
    })
