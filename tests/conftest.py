import pytest
import os

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from app.core.config import settings
from app.database import Base, build_engine, get_db
from app.main import app
from app.models.user import UserRole
from app.services import auth as auth_service
from app.services import user_service
from fastapi.testclient import TestClient

PASSWORD = "Password123!"


@pytest.fixture(scope="function")
def db_session():
    """A fresh in-memory database per test; StaticPool keeps one shared connection."""
    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def make_user(db_session):
    """Factory for users with the shared test password."""
    def _make_user(email, role=UserRole.EMPLOYEE, **profile):
        return user_service.create_user(db_session, email=email, password=PASSWORD, role=role, **profile)
    return _make_user


@pytest.fixture(scope="function")
def employee(make_user):
    return make_user("jane@acme.com", first_name="Jane", last_name="Doe")


@pytest.fixture(scope="function")
def other_employee(make_user):
    return make_user("omar@acme.com", first_name="Omar", last_name="Haddad")


@pytest.fixture(scope="function")
def hr_user(make_user):
    return make_user("hr@acme.com", role=UserRole.HR, first_name="Hana", last_name="Rahal")


@pytest.fixture(scope="function")
def admin_user(make_user):
    return make_user("admin@acme.com", role=UserRole.ADMIN, first_name="System", last_name="Admin")


@pytest.fixture(scope="function")
def client(db_session):
    """TestClient wired to the per-test session. Lifespan is not run, so no bootstrap admin."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    c.close()
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def login_as(client):
    """Put a valid session cookie for ``user`` on the client."""
    def _login_as(user):
        client.cookies.set(settings.auth_cookie_name, auth_service.create_session_token(user))
        return client
    return _login_as
