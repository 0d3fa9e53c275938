"""
Idempotent seed-скрипт.
Запуск:
  python seed.py --reset               # дропнуть и пересоздать БД + демо-данные
  python seed.py --ensure-demo-users   # только демо-аккаунты из DevConfig.DEFAULT_USERS
  python seed.py                       # мягкое наполнение недостающих данных (idempotent)
"""
from datetime import date, datetime
import argparse

from app import create_app
from config import DevConfig
from extensions import db
from models import Assignment, LeaveRequest, LeaveStatus, Role, Schedule, Submission, User

DEMO_PASSWORD = "password"

USERS = [
    dict(id="t1", name="John Smith", email="john@example.com", role=Role.TEACHER, created_at=datetime(2023, 1, 1)),
    dict(id="t2", name="Emma Davis", email="emma@example.com", role=Role.TEACHER, created_at=datetime(2023, 1, 2)),
    dict(id="s1", name="Alice Johnson", email="alice@example.com", role=Role.STUDENT, created_at=datetime(2023, 1, 3)),
    dict(id="s2", name="Bob Wilson", email="bob@example.com", role=Role.STUDENT, created_at=datetime(2023, 1, 4)),
    dict(id="s3", name="Charlie Brown", email="charlie@example.com", role=Role.STUDENT, created_at=datetime(2023, 1, 5)),
]

ASSIGNMENTS = [
    dict(id="a1", title="Introduction to React",
         description="Create a simple React application with components, props, and state.",
         due_date=date(2023, 4, 15), teacher_id="t1", created_at=datetime(2023, 4, 1)),
    dict(id="a2", title="Advanced CSS Techniques",
         description="Implement responsive design using CSS Grid and Flexbox.",
         due_date=date(2023, 4, 20), teacher_id="t2", created_at=datetime(2023, 4, 5)),
]

SUBMISSIONS = [
    dict(id="sub1", assignment_id="a1", student_id="s1", content="https://github.com/alice/react-project",
         submission_date=datetime(2023, 4, 14), grade="A",
         feedback="Excellent work! You've demonstrated a good understanding of React components."),
    dict(id="sub2", assignment_id="a1", student_id="s2", content="https://github.com/bob/react-assignment",
         submission_date=datetime(2023, 4, 15), grade="B",
         feedback="Good job! Consider implementing error handling in your components."),
    dict(id="sub3", assignment_id="a2", student_id="s1", content="https://codepen.io/alice/css-project",
         submission_date=datetime(2023, 4, 18)),
]

SCHEDULES = [
    dict(id="sch1", title="Web Development Basics", description="Introduction to HTML, CSS, and JavaScript",
         start_time=datetime(2023, 4, 10, 9), end_time=datetime(2023, 4, 10, 11), teacher_id="t1"),
    dict(id="sch2", title="React Workshop", description="Hands-on session with React hooks and context",
         start_time=datetime(2023, 4, 12, 13), end_time=datetime(2023, 4, 12, 16), teacher_id="t1"),
    dict(id="sch3", title="CSS Masterclass", description="Advanced CSS techniques and animations",
         start_time=datetime(2023, 4, 14, 10), end_time=datetime(2023, 4, 14, 12), teacher_id="t2"),
]

LEAVE_REQUESTS = [
    dict(id="lr1", reason="Family event", start_date=date(2023, 4, 22), end_date=date(2023, 4, 23),
         status=LeaveStatus.APPROVED, student_id="s1", decided_by_id="t1", created_at=datetime(2023, 4, 15)),
    dict(id="lr2", reason="Medical appointment", start_date=date(2023, 4, 25), end_date=date(2023, 4, 25),
         status=LeaveStatus.PENDING, student_id="s2", created_at=datetime(2023, 4, 18)),
]

# ---- вспомогательные утилиты ----
def get_or_create(model, id, **fields):
    """Идемпотентное создание по первичному ключу."""
    inst = db.session.get(model, id)
    if inst:
        return inst, False
    inst = model(id=id, **fields)
    db.session.add(inst)
    db.session.flush()
    return inst, True

# ---- сиды ----
def seed_users():
    created = 0
    for row in USERS:
        data = dict(row)
        data.setdefault("updated_at", data.get("created_at"))
        user, new = get_or_create(User, **data)
        if new:
            user.set_password(DEMO_PASSWORD)
            created += 1
    db.session.commit()
    return created

def seed_records():
    created = 0
    for model, rows in ((Assignment, ASSIGNMENTS), (Submission, SUBMISSIONS),
                        (Schedule, SCHEDULES), (LeaveRequest, LEAVE_REQUESTS)):
        for row in rows:
            _, new = get_or_create(model, **row)
            created += int(new)
    db.session.commit()
    return created

def ensure_demo_users():
    created = 0
    for u in DevConfig.DEFAULT_USERS:
        if User.query.filter_by(email=u["email"]).first():
            continue
        user = User(name=u["name"], email=u["email"], role=Role(u["role"]))
        user.set_password(u["password"])
        db.session.add(user)
        created += 1
    db.session.commit()
    return created

# ---- main ----
def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="drop + create + full seed (demo)")
    parser.add_argument("--ensure-demo-users", action="store_true", help="create only the demo accounts")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.reset:
            db.drop_all()
            db.create_all()
            seed_users()
            seed_records()
            ensure_demo_users()
            print("[seed] reset+seed complete")
            return

        if args.ensure_demo_users:
            created = ensure_demo_users()
            print(f"[seed] demo users created: {created}")
            return

        # режим по умолчанию: мягкое наполнение недостающих данных
        db.create_all()
        users = seed_users()
        records = seed_records()
        print(f"[seed] soft seed complete: {users} users, {records} records")

if __name__ == "__main__":
    main()
