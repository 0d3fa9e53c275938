from __future__ import annotations
import os
from importlib import import_module
from flask import Flask
from config import config_map
from extensions import csrf, db, migrate, login_manager
from sqlalchemy import inspect

def _seed_from_config(app):
    if not app.config.get("SEED_TEST_DATA"):
        return
    with app.app_context():
        # таблица users может ещё не быть создана (alembic upgrade и т.п.)
        if not inspect(db.engine).has_table("users"):
            return

        from models import Role, User  # локальный импорт, чтобы избежать циклов
        created = 0
        for u in app.config.get("DEFAULT_USERS", []):
            if User.query.filter_by(email=u["email"]).first():
                continue
            user = User(email=u["email"], name=u.get("name"), role=Role(u["role"]))
            user.set_password(u["password"])
            db.session.add(user)
            created += 1
        if created:
            db.session.commit()
            app.logger.info("seeded %d default users", created)

def register_blueprints(app: Flask) -> None:
    # Жёстко импортируем модуль с маршрутами core перед взятием bp
    import_module("blueprints.core.routes")
    from blueprints.core import bp as core_bp
    from blueprints.auth.routes import bp as auth_bp, api_bp as auth_api_bp
    from blueprints.dashboard.routes import bp as dashboard_bp
    from blueprints.assignments.routes import bp as assignments_bp, api_bp as assignments_api_bp
    from blueprints.schedules.routes import bp as schedules_bp, api_bp as schedules_api_bp
    from blueprints.leave.routes import bp as leave_bp, api_bp as leave_api_bp

    # страницы без префикса: '/', '/Login', '/Dashboard', ...
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(assignments_bp)
    app.register_blueprint(schedules_bp)
    app.register_blueprint(leave_bp)
    app.register_blueprint(auth_api_bp, url_prefix="/api")
    app.register_blueprint(assignments_api_bp, url_prefix="/api/v1")
    app.register_blueprint(schedules_api_bp, url_prefix="/api/v1")
    app.register_blueprint(leave_api_bp, url_prefix="/api/v1")

def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    # pytest: всегда in-memory, чтобы тесты не трогали app.db
    if os.environ.get("PYTEST_CURRENT_TEST"):
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {"connect_args": {"check_same_thread": False}})

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    register_blueprints(app)
    _seed_from_config(app)
    return app

if __name__ == "__main__":
    create_app().run()
