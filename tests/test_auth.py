from datetime import timedelta

from buffet.config import SESSION_COOKIE_NAME
from buffet.models import UserSession, utcnow

from .conftest import ADMIN


def test_auth_index_lists_endpoints(client):
    resp = client.get("/api/auth")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "online"
    assert "POST /api/auth/login" in body["endpoints"]


def test_login_sets_session_cookie(client, admin_user):
    resp = client.post(
        "/api/auth/login", json={"username": ADMIN["username"], "password": ADMIN["password"]}
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["username"] == "admin"
    assert resp.json()["user"]["role"] == "admin"
    assert SESSION_COOKIE_NAME in resp.cookies

    set_cookie = resp.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie


def test_login_rejects_wrong_password(client, admin_user):
    resp = client.post("/api/auth/login", json={"username": "admin", "password": "wrong-pass"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid credentials"


def test_login_unknown_user(client):
    resp = client.post("/api/auth/login", json={"username": "ghost", "password": "whatever"})
    assert resp.status_code == 401


def test_login_validates_payload(client):
    resp = client.post("/api/auth/login", json={"username": "ab", "password": "123"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid request body"
    fields = {d["field"] for d in body["details"]}
    assert fields == {"username", "password"}


def test_me_requires_session(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.json()["error"] == "Unauthorized"


def test_me_returns_current_user(auth_client):
    resp = auth_client.get("/api/auth/me")
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == ADMIN["email"]


def test_tampered_cookie_is_rejected(client, admin_user):
    resp = client.get("/api/auth/me", headers={"Cookie": f"{SESSION_COOKIE_NAME}=forged.value"})
    assert resp.status_code == 401


def test_logout_destroys_session(auth_client, db):
    assert db.query(UserSession).count() == 1

    resp = auth_client.post("/api/auth/logout")
    assert resp.status_code == 200

    db.expire_all()
    assert db.query(UserSession).count() == 0
    assert auth_client.get("/api/auth/me").status_code == 401


def test_expired_session_is_rejected_and_removed(auth_client, db):
    session = db.query(UserSession).one()
    session.expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    assert auth_client.get("/api/auth/me").status_code == 401

    db.expire_all()
    assert db.query(UserSession).count() == 0


def test_session_expiry_is_rolling(auth_client, db):
    session = db.query(UserSession).one()
    session.expires_at = utcnow() + timedelta(minutes=5)
    db.commit()

    assert auth_client.get("/api/auth/me").status_code == 200

    db.expire_all()
    assert db.query(UserSession).one().expires_at > utcnow() + timedelta(hours=23)


def test_no_content_responses_refresh_the_cookie(auth_client, make_payment):
    payment = make_payment()
    paths = [
        f"/api/payments/{payment['id']}",
        f"/api/events/{payment['eventId']}",
        f"/api/clients/{payment['client']['id']}",
    ]
    for path in paths:
        resp = auth_client.delete(path)
        assert resp.status_code == 204
        assert resp.content == b""
        assert f"{SESSION_COOKIE_NAME}=" in resp.headers.get("set-cookie", "")


def test_admin_creates_user(auth_client):
    resp = auth_client.post(
        "/api/auth/create-user",
        json={"username": "joana", "email": "Joana@Buffet.com", "password": "secret1"},
    )
    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["role"] == "operator"
    assert user["email"] == "joana@buffet.com"

    login = auth_client.post("/api/auth/login", json={"username": "joana", "password": "secret1"})
    assert login.status_code == 200


def test_create_user_rejects_duplicates(auth_client):
    resp = auth_client.post(
        "/api/auth/create-user",
        json={"username": "admin", "email": "other@buffet.com", "password": "secret1"},
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "Username already in use"

    resp = auth_client.post(
        "/api/auth/create-user",
        json={"username": "other", "email": ADMIN["email"], "password": "secret1"},
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "Email already in use"


def test_operator_cannot_manage_users(operator_client):
    resp = operator_client.get("/api/auth/users")
    assert resp.status_code == 403
    assert resp.json()["error"] == "Access denied"

    resp = operator_client.post(
        "/api/auth/create-user",
        json={"username": "sneaky", "email": "s@buffet.com", "password": "secret1"},
    )
    assert resp.status_code == 403


def test_admin_lists_users(auth_client, operator_user):
    resp = auth_client.get("/api/auth/users")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert {u["username"] for u in body["users"]} == {"admin", "operator"}
    assert all("password_hash" not in u for u in body["users"])


def test_entity_routes_require_login(client):
    for path in ("/api/clients", "/api/events", "/api/payments", "/api/cash-flow"):
        assert client.get(path).status_code == 401, path
