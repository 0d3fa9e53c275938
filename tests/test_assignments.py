from __future__ import annotations
from datetime import date, datetime

import pytest

from app import create_app
from extensions import db
from models import Assignment, Role, Submission, User
from blueprints.assignments import services as svc

@pytest.fixture()
def app():
    app = create_app("test")
    with app.app_context():
        db.create_all()
        users = [
            User(id="t1", name="John Smith", email="john@example.com", role=Role.TEACHER),
            User(id="t2", name="Emma Davis", email="emma@example.com", role=Role.TEACHER),
            User(id="s1", name="Alice Johnson", email="alice@example.com", role=Role.STUDENT),
            User(id="s2", name="Bob Wilson", email="bob@example.com", role=Role.STUDENT),
        ]
        for u in users:
            u.set_password("pass")
        db.session.add_all(users)
        db.session.add_all([
            Assignment(id="a1", title="Introduction to React", description="components",
                       due_date=date(2023, 4, 15), teacher_id="t1"),
            Assignment(id="a2", title="Advanced CSS Techniques", description="grid",
                       due_date=date(2023, 4, 20), teacher_id="t2"),
        ])
        db.session.commit()
    yield app
    with app.app_context():
        db.drop_all()

@pytest.fixture()
def ctx(app):
    with app.app_context():
        yield

@pytest.fixture()
def client(app):
    return app.test_client()

def _user(uid):
    return db.session.get(User, uid)

def _login(client, email):
    r = client.post("/api/login", json={"email": email, "password": "pass"})
    assert r.status_code == 200

# ---------- services ----------
def test_create_assignment_scenario(ctx):
    res = svc.create_assignment(_user("t1"), {
        "title": "Intro", "description": "desc", "due_date": "2025-01-01", "teacher_id": "t1",
    })
    assert res.success, res
    assert res.data.teacher_id == "t1"
    assert res.data.due_date == date(2025, 1, 1)

    mine = svc.get_assignments_by_teacher("t1")
    assert mine.success
    match = [a for a in mine.data if a.title == "Intro"]
    assert len(match) == 1 and match[0].due_date == date(2025, 1, 1)

def test_create_assignment_defaults_teacher_to_actor(ctx):
    res = svc.create_assignment(_user("t2"), {"title": "T", "description": "d", "due_date": "2025-02-01"})
    assert res.success
    assert res.data.teacher_id == "t2"
    assert res.data.teacher.name == "Emma Davis"

def test_create_assignment_accepts_iso_datetime(ctx):
    res = svc.create_assignment(_user("t1"), {
        "title": "T", "description": "d", "due_date": "2025-03-04T00:00:00.000Z",
    })
    assert res.success
    assert res.data.due_date == date(2025, 3, 4)

def test_create_assignment_due_date_uses_utc_day(ctx):
    # 21:00 at -03:00 is midnight of the next day in UTC
    res = svc.create_assignment(_user("t1"), {
        "title": "T", "description": "d", "due_date": "2025-03-04T21:00:00-03:00",
    })
    assert res.success
    assert res.data.due_date == date(2025, 3, 5)

@pytest.mark.parametrize("due", ["2025-03-04T23:30:00-05:00", "2025-03-04T10:15:00", "2025-03-04Tnoon"])
def test_create_assignment_rejects_time_of_day(ctx, due):
    res = svc.create_assignment(_user("t1"), {"title": "T", "description": "d", "due_date": due})
    assert res.kind == "validation"
    assert res.error == "Due date must be a date without a time of day"
    assert Assignment.query.count() == 2

@pytest.mark.parametrize("payload,message", [
    ({"title": "", "description": "d", "due_date": "2025-01-01"}, "Title is required"),
    ({"title": "T", "description": "  ", "due_date": "2025-01-01"}, "Description is required"),
    ({"title": "T", "description": "d"}, "Due date is required"),
])
def test_create_assignment_validation(ctx, payload, message):
    before = Assignment.query.count()
    res = svc.create_assignment(_user("t1"), payload)
    assert not res.success
    assert res.kind == "validation"
    assert res.error == message
    assert Assignment.query.count() == before

def test_create_assignment_policy(ctx):
    res = svc.create_assignment(_user("s1"), {"title": "T", "description": "d", "due_date": "2025-01-01"})
    assert res.kind == "forbidden"

    res = svc.create_assignment(_user("t1"), {
        "title": "T", "description": "d", "due_date": "2025-01-01", "teacher_id": "t2",
    })
    assert res.kind == "forbidden"
    assert Assignment.query.count() == 2

def test_get_assignments_ordered_by_due_date(ctx):
    svc.create_assignment(_user("t1"), {"title": "Early", "description": "d", "due_date": "2020-01-01"})
    res = svc.get_assignments()
    assert [a.title for a in res.data][0] == "Early"
    assert [a.id for a in res.data][1:] == ["a1", "a2"]

def test_get_assignment_by_id(ctx):
    assert svc.get_assignment_by_id("a1").data.title == "Introduction to React"
    missing = svc.get_assignment_by_id("nope")
    assert missing.success and missing.data is None

def test_create_submission_and_duplicate(ctx):
    res = svc.create_submission(_user("s1"), {"assignment_id": "a1", "content": "https://github.com/alice"})
    assert res.success
    assert res.data.student_id == "s1"
    assert res.data.grade is None
    assert res.data.assignment.title == "Introduction to React"

    again = svc.create_submission(_user("s1"), {"assignment_id": "a1", "content": "second try"})
    assert not again.success
    assert again.kind == "validation"
    assert again.error == "You have already submitted this assignment"
    assert Submission.query.filter_by(student_id="s1", assignment_id="a1").count() == 1

def test_create_submission_policy_and_lookup(ctx):
    assert svc.create_submission(_user("t1"), {"assignment_id": "a1", "content": "x"}).kind == "forbidden"
    assert svc.create_submission(_user("s1"), {
        "assignment_id": "a1", "content": "x", "student_id": "s2",
    }).kind == "forbidden"
    res = svc.create_submission(_user("s1"), {"assignment_id": "missing", "content": "x"})
    assert res.kind == "not_found"
    assert res.error == "Assignment not found"
    assert svc.create_submission(_user("s1"), {"assignment_id": "a1", "content": ""}).error == "Content is required"

def test_grade_submission(ctx):
    sub = svc.create_submission(_user("s1"), {"assignment_id": "a1", "content": "work"}).data

    res = svc.update_submission(_user("t1"), sub.id, {"grade": "A", "feedback": "Excellent"})
    assert res.success
    assert (res.data.grade, res.data.feedback) == ("A", "Excellent")

    res = svc.update_submission(_user("t1"), sub.id, {"grade": "B", "feedback": ""})
    assert res.data.grade == "B"
    assert res.data.feedback is None

def test_grade_submission_rules(ctx):
    sub = svc.create_submission(_user("s1"), {"assignment_id": "a1", "content": "work"}).data

    assert svc.update_submission(_user("t2"), sub.id, {"grade": "A"}).kind == "forbidden"
    assert svc.update_submission(_user("s1"), sub.id, {"grade": "A"}).kind == "forbidden"
    assert svc.update_submission(_user("t1"), sub.id, {"grade": " "}).error == "Grade is required"
    assert svc.update_submission(_user("t1"), "nope", {"grade": "A"}).kind == "not_found"
    assert db.session.get(Submission, sub.id).grade is None

def test_submissions_by_assignment_newest_first(ctx):
    db.session.add_all([
        Submission(id="x1", content="old", student_id="s1", assignment_id="a1", submission_date=datetime(2023, 4, 1)),
        Submission(id="x2", content="new", student_id="s2", assignment_id="a1", submission_date=datetime(2023, 4, 2)),
    ])
    db.session.commit()
    res = svc.get_submissions_by_assignment("a1")
    assert [s.id for s in res.data] == ["x2", "x1"]
    assert res.data[0].student.name == "Bob Wilson"
    assert [s.id for s in svc.get_submissions_by_student("s1").data] == ["x1"]

def test_submission_status_labels(ctx):
    assert svc.submission_status(None) == "Not Submitted"
    sub = svc.create_submission(_user("s1"), {"assignment_id": "a1", "content": "w"}).data
    assert svc.submission_status(sub) == "Submitted"
    graded = svc.update_submission(_user("t1"), sub.id, {"grade": "A"}).data
    assert svc.submission_status(graded) == "Graded: A"

# ---------- API ----------
def test_api_create_assignment(client):
    _login(client, "john@example.com")
    r = client.post("/api/v1/assignments", json={"title": "Intro", "description": "desc", "due_date": "2025-01-01"})
    assert r.status_code == 201
    body = r.get_json()
    assert body["success"] is True
    assert body["data"]["teacher_id"] == "t1"
    assert body["data"]["due_date"] == "2025-01-01"
    assert "/Assignments" in r.headers["X-Revalidate"]

    r = client.get("/api/v1/assignments?teacher_id=t1")
    assert "Intro" in [a["title"] for a in r.get_json()["data"]]

def test_api_create_assignment_errors(client):
    _login(client, "john@example.com")
    r = client.post("/api/v1/assignments", json={"description": "d", "due_date": "2025-01-01"})
    assert r.status_code == 400
    assert r.get_json() == {"success": False, "error": "Title is required"}
    assert "X-Revalidate" not in r.headers

    client.post("/api/logout")
    _login(client, "alice@example.com")
    r = client.post("/api/v1/assignments", json={"title": "T", "description": "d", "due_date": "2025-01-01"})
    assert r.status_code == 403

def test_api_rejects_non_string_fields(client):
    _login(client, "john.com")
    r = client.post("/api/v1/assignments", json={"title": {"x": 1}, "description": ["a", "b"], "due_date": "2025-03-04"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "Title is required"

    r = client.post("/api/v1/assignments", json={"title": "T", "description": 5, "due_date": "2025-03-04"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "Description is required"

    r = client.post("/api/v1/assignments", json={"title": "T", "description": "d", "due_date": "2025-03-04", "teacher_id": 7})
    assert r.status_code == 400

    r = client.get("/api/v1/assignments?teacher_id=t1")
    assert [a["id"] for a in r.get_json()["data"]] == ["a1"]

def test_api_get_missing_assignment(client):
    _login(client, "alice@example.com")
    r = client.get("/api/v1/assignments/nope")
    assert r.status_code == 404
    assert r.get_json()["error"] == "Assignment not found"

def test_api_submit_and_grade(client):
    _login(client, "alice@example.com")
    r = client.post("/api/v1/assignments/a1/submissions", json={"content": "my work"})
    assert r.status_code == 201
    sub_id = r.get_json()["data"]["id"]
    assert "/AssignmentDetail/a1" in r.headers["X-Revalidate"]

    r = client.post("/api/v1/assignments/a1/submissions", json={"content": "again"})
    assert r.status_code == 400

    client.post("/api/logout")
    _login(client, "john@example.com")
    r = client.patch(f"/api/v1/submissions/{sub_id}", json={"grade": "A", "feedback": "Nice"})
    assert r.status_code == 200
    assert r.get_json()["data"]["grade"] == "A"

    r = client.get("/api/v1/students/s1/submissions")
    assert r.get_json()["data"][0]["feedback"] == "Nice"
    r = client.get("/api/v1/assignments/a1/submissions")
    assert [s["id"] for s in r.get_json()["data"]] == [sub_id]

# ---------- pages ----------
def test_student_assignments_page_shows_status(client, app):
    with app.app_context():
        db.session.add(Submission(id="x1", content="w", student_id="s1", assignment_id="a1", grade="A"))
        db.session.commit()
    _login(client, "alice@example.com")
    r = client.get("/Assignments")
    assert r.status_code == 200
    assert b"Graded: A" in r.data
    assert b"Not Submitted" in r.data

def test_teacher_assignments_page_lists_own_only(client):
    _login(client, "john@example.com")
    r = client.get("/Assignments")
    assert b"Introduction to React" in r.data
    assert b"Advanced CSS Techniques" not in r.data
    assert b"New Assignment" in r.data

def test_create_assignment_form(client):
    _login(client, "john@example.com")
    r = client.post("/CreateAssignment", data={"title": "", "description": "d", "due_date": "2025-01-01"})
    assert r.status_code == 200
    assert b"Title is required" in r.data

    r = client.post("/CreateAssignment", data={"title": "Form", "description": "d", "due_date": "2025-01-01"},
                    follow_redirects=True)
    assert b"Assignment created successfully" in r.data
    assert b"Form" in r.data

def test_detail_missing_assignment(client):
    _login(client, "alice@example.com")
    r = client.get("/AssignmentDetail/nope")
    assert r.status_code == 404
    assert b"Assignment not found" in r.data

def test_detail_submit_and_grade_flow(client, app):
    _login(client, "alice@example.com")
    r = client.get("/AssignmentDetail/a1")
    assert b"Submit Assignment" in r.data
    r = client.post("/AssignmentDetail/a1/submit", data={"content": "done"}, follow_redirects=True)
    assert b"Assignment submitted successfully" in r.data
    r = client.get("/AssignmentDetail/a1")
    assert b"Your Submission" in r.data and b"Pending review" in r.data

    client.post("/logout")
    _login(client, "john@example.com")
    with app.app_context():
        sub_id = Submission.query.filter_by(assignment_id="a1").one().id
    r = client.post(f"/AssignmentDetail/a1/grade/{sub_id}", data={"grade": "A", "feedback": ""},
                    follow_redirects=True)
    assert b"Submission graded successfully" in r.data
    assert b'value="A"' in r.data
