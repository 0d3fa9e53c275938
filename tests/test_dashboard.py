from __future__ import annotations
from datetime import date, datetime, timedelta

import pytest

from app import create_app
from extensions import db
from models import Assignment, LeaveRequest, LeaveStatus, Role, Schedule, Submission, User
from blueprints.dashboard.services import dashboard_for, pending_assignments

@pytest.fixture()
def app():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        users = [
            User(id="t1", name="John Smith", email="john@example.com", role=Role.TEACHER),
            User(id="s1", name="Alice Johnson", email="alice@example.com", role=Role.STUDENT),
        ]
        for u in users:
            u.set_password("pass")
        db.session.add_all(users)
        for i in range(7):
            db.session.add(Assignment(id=f"a{i}", title=f"Assignment {i}", description="d",
                                      due_date=date(2025, 1, 1) + timedelta(days=i), teacher_id="t1"))
            db.session.add(Schedule(id=f"sch{i}", title=f"Class {i}", description="d",
                                    start_time=datetime(2025, 1, 1, 9) + timedelta(days=i),
                                    end_time=datetime(2025, 1, 1, 10) + timedelta(days=i), teacher_id="t1"))
        db.session.add(Submission(id="sub0", content="w", student_id="s1", assignment_id="a0", grade="A"))
        db.session.add(Submission(id="sub1", content="w", student_id="s1", assignment_id="a1"))
        db.session.add(LeaveRequest(id="lr1", reason="Trip", start_date=date(2025, 2, 1), end_date=date(2025, 2, 2),
                                    student_id="s1"))
        db.session.add(LeaveRequest(id="lr2", reason="Old", start_date=date(2024, 2, 1), end_date=date(2024, 2, 2),
                                    student_id="s1", status=LeaveStatus.REJECTED))
        db.session.commit()
    yield app
    with app.app_context():
        db.drop_all()

@pytest.fixture()
def client(app):
    return app.test_client()

def _login(client, email):
    r = client.post("/api/login", json={"email": email, "password": "pass"})
    assert r.status_code == 200

def test_pending_excludes_submitted(app):
    with app.app_context():
        data = dashboard_for(db.session.get(User, "s1"), limit=10)
    ids = [a.id for a in data.assignments]
    assert "a0" not in ids and "a1" not in ids
    assert ids == ["a2", "a3", "a4", "a5", "a6"]

def test_cards_capped_at_limit(app):
    with app.app_context():
        student = dashboard_for(db.session.get(User, "s1"))
        teacher = dashboard_for(db.session.get(User, "t1"))
    assert len(student.assignments) == 5
    assert len(student.schedules) == 5
    assert len(teacher.assignments) == 5
    assert len(teacher.schedules) == 5
    assert [lr.id for lr in teacher.leave_requests] == ["lr1"]
    assert {s.id for s in student.submissions} == {"sub0", "sub1"}
    assert not student.errors and not teacher.errors

def test_pending_assignments_keeps_order():
    class A:
        def __init__(self, id):
            self.id = id
    class S:
        def __init__(self, assignment_id):
            self.assignment_id = assignment_id
    out = pending_assignments([A("x"), A("y"), A("z")], [S("y")])
    assert [a.id for a in out] == ["x", "z"]

def test_student_dashboard_page(client):
    _login(client, "alice@example.com")
    r = client.get("/Dashboard")
    assert r.status_code == 200
    assert b"Pending Assignments" in r.data
    assert b"Assignment 2" in r.data
    assert b"Pending review" in r.data
    assert b"My Leave Requests" in r.data

def test_teacher_dashboard_page(client):
    _login(client, "john@example.com")
    r = client.get("/Dashboard")
    assert r.status_code == 200
    assert b"My Assignments" in r.data
    assert b"Pending Leave Requests" in r.data
    assert b"Alice Johnson" in r.data
    assert b"Assignment 6" not in r.data
