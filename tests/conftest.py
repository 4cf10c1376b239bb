"""
Shared fixtures: an in-memory MongoDB (mongomock) behind the real app,
SMTP left unconfigured so mails are only logged.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from jobportal.core.config import get_settings
from jobportal.db.mongodb import COLLECTIONS, get_collection, init_mongo_indexes, reset_mongo_client

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    monkeypatch.setenv("SMTP_USER", "")
    monkeypatch.setenv("SMTP_PASSWORD", "")
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret")
    monkeypatch.setenv("DB_RETRY_DELAY", "0")
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("REQUIRE_EMAIL_VERIFICATION", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def mongo(settings_env):
    client = mongomock.MongoClient()
    reset_mongo_client(client)
    init_mongo_indexes()
    yield client
    reset_mongo_client()


@pytest.fixture
def app():
    from jobportal.main import app
    return app


@pytest.fixture
def make_client(app):
    """Each call returns a client with its own cookie jar."""
    clients = []

    def factory():
        client = TestClient(app)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()


def register(client, role, username, **overrides):
    payload = {
        "username": username,
        "password": PASSWORD,
        "first_name": "Ann",
        "last_name": "Lee",
        "role": role,
        "email": f"{username}@example.com",
    }
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


def login(client, username, password=PASSWORD, role=None):
    payload = {"username": username, "password": password}
    if role:
        payload["role"] = role
    return client.post("/api/auth/login", json=payload)


def signed_in(make_client, role, username, **overrides):
    client = make_client()
    assert register(client, role, username, **overrides).status_code == 201
    assert login(client, username).status_code == 200
    return client


def post_job(client, **overrides):
    payload = {
        "title": "Backend Engineer",
        "description": "Build APIs",
        "location": "Berlin",
        "type": "Full-time",
        "requirements": ["Python", " ", "MongoDB "],
    }
    payload.update(overrides)
    return client.post("/api/jobs", json=payload)


def user_doc(username, role="job-seeker"):
    name = COLLECTIONS["job_seekers"] if role == "job-seeker" else COLLECTIONS["employers"]
    return get_collection(name).find_one({"username": username})


@pytest.fixture
def seeker(make_client):
    return signed_in(make_client, "job-seeker", "seeker")


@pytest.fixture
def employer(make_client):
    return signed_in(make_client, "employer", "acme")


@pytest.fixture
def other_employer(make_client):
    return signed_in(make_client, "employer", "globex")


@pytest.fixture
def job(employer):
    response = post_job(employer)
    assert response.status_code == 201
    return response.json()
