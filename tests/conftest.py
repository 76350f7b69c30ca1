"""
Shared fixtures: an in-memory database per test, a TestClient bound to it,
a fake AI provider, and factories for users, jobs and applications.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.auth_dependency import get_db
from app.core.security import hash_password, create_user_token
from app.db.base import Base
from app.db import models  # noqa: F401  registers every model on Base.metadata
from app.db.models.application import Application, ApplicationStatus
from app.db.models.job import Job, JobStatus
from app.db.models.user import User
from app.llm.provider import LLMProvider, LLMResponse
from app.llm.router import get_llm_provider
from app.services.common import utcnow

TEST_PASSWORD = "testpass123"


class FakeProvider(LLMProvider):
    """Replays canned replies in order, or raises ``error`` on every call."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    def chat(self, messages, model, temperature=0.7, max_tokens=None, **kwargs):
        self.calls.append({"messages": messages, "model": model})
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.replies.pop(0), model=model)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Database session fixture."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_provider] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fake_llm():
    """Factory installing a FakeProvider as the app's AI provider."""
    def install(replies=None, error=None) -> FakeProvider:
        provider = FakeProvider(replies=replies, error=error)
        app.dependency_overrides[get_llm_provider] = lambda: provider
        return provider
    yield install
    app.dependency_overrides.pop(get_llm_provider, None)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def create(role="student", email=None, is_approved=True, is_active=True, **fields) -> User:
        counter["n"] += 1
        user = User(
            name=fields.pop("name", f"{role.title()} {counter['n']}"),
            email=email or f"{role}{counter['n']}@college.edu",
            password_hash=hash_password(TEST_PASSWORD),
            role=role,
            is_approved=is_approved,
            is_active=is_active,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return create


@pytest.fixture
def auth_headers():
    def headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_user_token(user)}"}
    return headers


@pytest.fixture
def make_job(db):
    def create(recruiter: User, **overrides) -> Job:
        values = {
            "title": "Backend Engineer",
            "company": "Acme Systems",
            "description": "Build and run Python services",
            "requirements": ["B.Tech"],
            "skills": ["python", "sql"],
            "location": "Bengaluru",
            "job_type": "full-time",
            "salary_min": 600000,
            "salary_max": 900000,
            "application_deadline": utcnow() + timedelta(days=30),
            "status": JobStatus.ACTIVE.value,
            "is_approved": True,
            "applications_count": 0,
        }
        values.update(overrides)
        job = Job(recruiter_id=recruiter.id, **values)
        db.add(job)
        db.commit()
        db.refresh(job)
        return job
    return create


@pytest.fixture
def make_application(db):
    def create(job: Job, student: User, status=ApplicationStatus.PENDING, **fields) -> Application:
        application = Application(
            job_id=job.id,
            student_id=student.id,
            status=status.value if isinstance(status, ApplicationStatus) else status,
            applied_at=utcnow(),
            **fields,
        )
        db.add(application)
        job.applications_count = (job.applications_count or 0) + 1
        db.commit()
        db.refresh(application)
        return application
    return create
