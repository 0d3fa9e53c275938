from __future__ import annotations
import pytest

from app import create_app
from extensions import db
from models import Role, User

@pytest.fixture()
def client_app():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        t = User(id="t1", name="John Smith", email="john@example.com", role=Role.TEACHER)
        t.set_password("teachpass")
        s = User(id="s1", name="Alice Johnson", email="alice@example.com", role=Role.STUDENT)
        s.set_password("studpass")
        db.session.add_all([t, s])
        db.session.commit()
    yield app
    with app.app_context():
        db.drop_all()

@pytest.fixture()
def client(client_app):
    return client_app.test_client()

def _login(client, email, password):
    return client.post("/api/login", json={"email": email, "password": password})

def test_api_login_success_sets_session(client):
    r = _login(client, "john@example.com", "teachpass")
    assert r.status_code == 200
    user = r.get_json()["user"]
    assert user["id"] == "t1" and user["role"] == "TEACHER"
    assert "password_hash" not in user

    r2 = client.get("/Dashboard")
    assert r2.status_code == 200

def test_api_login_unknown_email(client):
    r = _login(client, "nobody@example.com", "whatever")
    assert r.status_code == 401
    assert r.get_json() == {"user": None}
    # no session: protected page redirects to login
    r2 = client.get("/Dashboard")
    assert r2.status_code == 302
    assert "/Login" in r2.headers["Location"]

def test_api_login_wrong_password(client):
    r = _login(client, "john@example.com", "nope")
    assert r.status_code == 401

def test_api_login_email_case_insensitive(client):
    r = _login(client, "John@Example.com", "teachpass")
    assert r.status_code == 200

def test_api_login_rejects_malformed_body(client):
    r = client.post("/api/login", json={"email": ["x"], "password": 1})
    assert r.status_code == 400
    assert r.get_json() == {"user": None}

def test_email_only_login_when_passwords_disabled(client_app, client):
    client_app.config["AUTH_REQUIRE_PASSWORD"] = False
    r = _login(client, "alice@example.com", "")
    assert r.status_code == 200
    assert r.get_json()["user"]["role"] == "STUDENT"

def test_api_user_lookup(client):
    r = client.get("/api/user/s1")
    assert r.status_code == 200
    assert r.get_json()["user"]["email"] == "alice@example.com"

    r = client.get("/api/user/missing")
    assert r.status_code == 404
    assert r.get_json() == {"user": None}

def test_login_page_requires_both_fields(client):
    r = client.post("/Login", data={"email": "john@example.com", "password": ""}, follow_redirects=True)
    assert r.status_code == 200
    assert b"Please enter both email and password" in r.data

def test_login_page_invalid_credentials(client):
    r = client.post("/Login", data={"email": "x@example.com", "password": "y"})
    assert r.status_code == 200
    assert b"Invalid email or password" in r.data

def test_login_page_success_redirects_to_dashboard(client):
    r = client.post("/Login", data={"email": "alice@example.com", "password": "studpass"})
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/Dashboard")
    r2 = client.get("/Dashboard")
    assert b"Welcome, Alice Johnson!" in r2.data

def test_login_page_ignores_external_next(client):
    r = client.post("/Login?next=//evil.example.com", data={"email": "alice@example.com", "password": "studpass"})
    assert r.headers["Location"].endswith("/Dashboard")

def test_logout(client):
    _login(client, "john@example.com", "teachpass")
    r = client.post("/logout")
    assert r.status_code == 302
    r2 = client.get("/Dashboard")
    assert r2.status_code == 302

def test_api_logout(client):
    _login(client, "john@example.com", "teachpass")
    r = client.post("/api/logout")
    assert r.get_json() == {"ok": True}
    assert client.get("/api/v1/assignments").status_code == 401

def test_stale_session_is_dropped(client_app, client):
    _login(client, "alice@example.com", "studpass")
    with client_app.app_context():
        db.session.delete(db.session.get(User, "s1"))
        db.session.commit()
    r = client.get("/Dashboard")
    assert r.status_code == 302
    assert "/Login" in r.headers["Location"]

def test_anonymous_api_gets_401_json(client):
    r = client.get("/api/v1/assignments")
    assert r.status_code == 401
    assert r.get_json() == {"error": "unauthorized"}

def test_wrong_role_page_is_403(client):
    _login(client, "alice@example.com", "studpass")
    r = client.get("/CreateAssignment")
    assert r.status_code == 403

def test_authenticated_index_redirects_to_dashboard(client):
    _login(client, "alice@example.com", "studpass")
    r = client.get("/")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/Dashboard")

def test_csrf_token_endpoint(client):
    r = client.get("/api/csrf")
    assert r.status_code == 200
    assert r.get_json()["csrf_token"]

def test_user_actions(client_app):
    from blueprints.auth import services as svc
    with client_app.app_context():
        res = svc.get_users()
        assert res.success
        assert {u.id for u in res.data} == {"t1", "s1"}
        assert svc.get_user_by_id("t1").data.role.value == "TEACHER"
        assert svc.get_user_by_id("zzz").data is None

def test_api_users_list(client):
    assert client.get("/api/users").status_code == 401
    _login(client, "alice@example.com", "studpass")
    r = client.get("/api/users")
    assert r.status_code == 200
    assert {u["email"] for u in r.get_json()["users"]} == {"john@example.com", "alice@example.com"}
