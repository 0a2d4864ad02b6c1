"""
Seed demo accounts for local development.

    python -m scripts.seed_users
"""
from app.database import init_db, session_scope
from app.models.user import User, UserRole
from app.services import user_service

DEMO_USERS = [
    ("admin@example.com", "Admin123!", UserRole.ADMIN, "Amira", "Saleh"),
    ("hr@example.com", "HumanRes123!", UserRole.HR, "Hadi", "Nasser"),
    ("employee@example.com", "Employee123!", UserRole.EMPLOYEE, "Lina", "Khoury"),
]


def seed(db):
    for email, password, role, first_name, last_name in DEMO_USERS:
        # Skip existing accounts so the script can be re-run
        if db.query(User).filter(User.email == email).first():
            print(f"User {email} already exists. Skipping.")
            continue
        user = user_service.create_user(
            db, email=email, password=password, role=role, first_name=first_name, last_name=last_name
        )
        print(f"Created {role.value} -> {email} ({user.employee_id})")


if __name__ == "__main__":
    init_db()
    with session_scope() as db:
        seed(db)
