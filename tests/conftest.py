"""Pytest configuration and fixtures.

Each test gets its own SQLite file database built from the ORM metadata; the
app's `get_db` is overridden to use it, the way the request-logging and job
tests always shared state between the app and the test body.
"""

import os
import sys

# Settings are read on import, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("ENABLE_REQUEST_LOGGING", "false")
os.environ.setdefault("ENABLE_OUTBOUND_LOGGING", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Ensure project root is on sys.path for 'app' imports
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db.base_class import Base
from app.db import base as models_import  # noqa: F401 - ensure models are imported
from app.db.models.user import User
from app.db.models.job import Job
from app.db.models.job_application import JobApplication
from app.api.dependencies.auth import get_current_principal
from app.api.dependencies.database import get_db
from app.core.security import Principal
from app.razorpay.client import DevMockGateway, get_payment_gateway

TEST_KEY_ID = "rzp_test_key"
TEST_KEY_SECRET = "rzp_test_secret"


@pytest.fixture()
def engine(tmp_path):
    db_path = tmp_path / "marketplace.db"
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def gateway():
    return DevMockGateway(key_id=TEST_KEY_ID, key_secret=TEST_KEY_SECRET)


@pytest.fixture()
def app(session_factory, gateway):
    from main import app

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield app
    app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def act_as(app):
    """Make every following request run as `user` (a User row or None for anonymous)."""
    def _act_as(user):
        if user is None:
            app.dependency_overrides.pop(get_current_principal, None)
            return
        principal = Principal(id=user.id, role=user.role, username=user.username)
        app.dependency_overrides[get_current_principal] = lambda: principal
    return _act_as


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make_user(role="worker", username=None, **fields):
        counter["n"] += 1
        user = User(
            username=username or f"{role}{counter['n']}",
            hashed_password="not-a-real-hash",
            role=role,
            full_name=fields.pop("full_name", f"{role.title()} {counter['n']}"),
            phone=fields.pop("phone", "9876543210"),
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_job(db):
    def _make_job(employer, status="open", wage=800, wage_type="daily", headcount=1, assigned_worker=None, **fields):
        job = Job(
            employer_id=employer.id,
            title=fields.pop("title", "Brick work for boundary wall"),
            description=fields.pop("description", "Two days of masonry work"),
            work_type=fields.pop("work_type", "mason"),
            location=fields.pop("location", "Andheri East, Mumbai"),
            wage=wage,
            wage_type=wage_type,
            headcount=headcount,
            status=status,
            assigned_worker_id=assigned_worker.id if assigned_worker else None,
            **fields,
        )
        db.add(job)
        db.commit()
        db.refresh(job)
        return job

    return _make_job


@pytest.fixture()
def make_application(db):
    def _make_application(job, worker, status="pending", message=None):
        application = JobApplication(job_id=job.id, worker_id=worker.id, status=status, message=message)
        db.add(application)
        db.commit()
        db.refresh(application)
        return application

    return _make_application


@pytest.fixture()
def fetch(session_factory):
    """Read a row through a fresh session so assertions never see cached state."""
    def _fetch(model, id):
        with session_factory() as session:
            row = session.get(model, id)
            if row is not None:
                session.expunge(row)
            return row
    return _fetch
