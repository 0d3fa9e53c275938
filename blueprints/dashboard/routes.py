# blueprints/dashboard/routes.py
from __future__ import annotations

from flask import Blueprint, current_app, flash, render_template
from flask_login import current_user, login_required

from . import services as svc

bp = Blueprint("dashboard", __name__)


@bp.get("/Dashboard")
@login_required
def index():
    data = svc.dashboard_for(current_user, limit=current_app.config.get("DASHBOARD_CARD_LIMIT", 5))
    for err in data.errors:
        flash(err, "danger")
    return render_template("dashboard/index.html", data=data)
