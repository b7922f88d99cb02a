"""
Pytest fixtures for the HeyHR backend.

Every test gets its own SQLite file and its own app instance; the
TestClient is entered as a context manager so the lifespan (table
creation and the notification dispatcher) runs.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.session import Database
from app.main import create_app

PASSWORD = "s3cret-pass"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'heyhr-test.db'}",
        NOTIFICATION_WORKERS=1,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def database(settings):
    database = Database(settings.DATABASE_URL)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    """A plain session for service and crud tests."""
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def dispatcher():
    """Stand-in dispatcher recording submitted tasks."""
    mock_dispatcher = MagicMock()
    mock_dispatcher.submit.return_value = True
    return mock_dispatcher


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    """FastAPI test client with the lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def drain(client, app):
    """Block until every queued notification task has run."""

    def _drain():
        client.portal.call(app.state.dispatcher.drain)

    return _drain


@pytest.fixture
def register(client):
    """Register a user and return ``(user, headers, body)``."""

    def _register(email: str, role: str = "CANDIDATE", password: str = PASSWORD, **extra):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password, "role": role, **extra},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        headers = {"Authorization": f"Bearer {body['access_token']}"}
        return body["user"], headers, body

    return _register


@pytest.fixture
def recruiter(register):
    user, headers, _ = register("recruiter@example.com", role="RECRUITER", name="Sarah Chen")
    return {"user": user, "headers": headers}


@pytest.fixture
def other_recruiter(register):
    user, headers, _ = register("other.recruiter@example.com", role="RECRUITER")
    return {"user": user, "headers": headers}


@pytest.fixture
def candidate(register):
    user, headers, _ = register("john.doe@example.com", name="John Doe")
    return {"user": user, "headers": headers}


@pytest.fixture
def job_payload():
    return {
        "title": "Backend Engineer",
        "company_name": "Acme Robotics",
        "location": "Remote",
        "remote_flexible": True,
        "job_type": "FULL_TIME",
        "salary": 120000,
        "skills_technical": [{"name": "Python", "weight": 80}],
        "status": "DRAFT",
    }


@pytest.fixture
def create_job(client, recruiter, job_payload):
    """Create a job for ``recruiter`` and return its JSON."""

    def _create_job(headers=None, **overrides):
        response = client.post(
            "/api/v1/recruiter/jobs",
            json={**job_payload, **overrides},
            headers=headers or recruiter["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()["job"]

    return _create_job


@pytest.fixture
def published_job(create_job):
    return create_job(status="PUBLISHED")
