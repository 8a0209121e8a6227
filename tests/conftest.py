import itertools
import os
from datetime import date, timedelta

import pytest

# Settings are read at import time, so they must be in place before any buffet import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402

from buffet.database import Base, SessionLocal, engine  # noqa: E402
from buffet.init_db import seed_admin  # noqa: E402
from buffet.main import app  # noqa: E402
from buffet.models import User  # noqa: E402
from buffet.rate_limiter import memory_cache  # noqa: E402
from buffet.security_utils import hash_password  # noqa: E402

ADMIN = {"username": "admin", "email": "admin@buffet.com", "password": "admin123"}
OPERATOR = {"username": "operator", "email": "operator@buffet.com", "password": "operator123"}


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    memory_cache.clear()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_user():
    session = SessionLocal()
    try:
        user = seed_admin(session, ADMIN["username"], ADMIN["email"], ADMIN["password"])
        return user.id
    finally:
        session.close()


@pytest.fixture
def operator_user():
    session = SessionLocal()
    try:
        user = User(
            username=OPERATOR["username"],
            email=OPERATOR["email"],
            password_hash=hash_password(OPERATOR["password"]),
            role="operator",
        )
        session.add(user)
        session.commit()
        return user.id
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_client(client, admin_user):
    """TestClient carrying an admin session cookie"""
    resp = client.post(
        "/api/auth/login", json={"username": ADMIN["username"], "password": ADMIN["password"]}
    )
    assert resp.status_code == 200, resp.text
    return client


@pytest.fixture
def operator_client(client, operator_user):
    resp = client.post(
        "/api/auth/login",
        json={"username": OPERATOR["username"], "password": OPERATOR["password"]},
    )
    assert resp.status_code == 200, resp.text
    return client


@pytest.fixture
def make_client(auth_client):
    def _make(**overrides):
        payload = {"name": "Maria Silva", "phone": "(11) 98765-4321", "email": None}
        payload.update(overrides)
        resp = auth_client.post("/api/clients", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_event(auth_client, make_client):
    """Factory; each default event lands on its own day so defaults never conflict"""
    days = itertools.count()

    def _make(client_id=None, **overrides):
        if client_id is None:
            client_id = make_client()["id"]
        day = date(2024, 6, 15) + timedelta(days=next(days))
        payload = {
            "clientId": client_id,
            "title": "Festa A",
            "date": f"{day.isoformat()}T00:00:00Z",
            "startTime": "14:00",
            "endTime": "18:00",
            "guestsCount": 50,
            "packageType": "basic",
            "totalValue": "2500.00",
            "status": "pending",
        }
        payload.update(overrides)
        resp = auth_client.post("/api/events", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_payment(auth_client, make_event):
    def _make(event_id=None, **overrides):
        if event_id is None:
            event_id = make_event()["id"]
        payload = {
            "eventId": event_id,
            "amount": "500.00",
            "paymentMethod": "pix",
            "status": "pending",
            "dueDate": "2024-06-01T00:00:00Z",
        }
        payload.update(overrides)
        resp = auth_client.post("/api/payments", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
