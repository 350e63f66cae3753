from firebase_admin import auth

from backend.app.core.config import settings
from backend.app.core.errors import handle_firebase_error


def test_session_sets_cookie(client, firestore_db, monkeypatch):
    monkeypatch.setattr(auth, "verify_id_token", lambda token: {"uid": "u1", "email": "u1@glampack.test"})
    monkeypatch.setattr(auth, "create_session_cookie", lambda token, expires_in: "session-cookie-value")

    response = client.post("/api/auth/session", json={"id_token": "token"})

    assert response.status_code == 200
    assert response.json()["data"] == {"uid": "u1", "email": "u1@glampack.test", "role": "viewer", "permissions": []}
    set_cookie = response.headers["set-cookie"]
    assert f"{settings.SESSION_COOKIE_NAME}=session-cookie-value" in set_cookie
    assert "HttpOnly" in set_cookie


def test_session_rejects_bad_token(client, monkeypatch):
    def reject(token):
        raise auth.InvalidIdTokenError("bad token")

    monkeypatch.setattr(auth, "verify_id_token", reject)
    response = client.post("/api/auth/session", json={"id_token": "token"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_bearer_token_authenticates_api_request(client, firestore_db, airtable, monkeypatch):
    monkeypatch.setattr(auth, "verify_id_token", lambda token: {"uid": "u2", "email": "u2@glampack.test"})
    response = client.get("/api/suppliers/", headers={"Authorization": "Bearer good"})
    assert response.status_code == 200
    assert "u2" in firestore_db.collections["users"]


def test_invalid_bearer_token_is_401(client, monkeypatch):
    def reject(token):
        raise auth.ExpiredIdTokenError("expired", cause=None)

    monkeypatch.setattr(auth, "verify_id_token", reject)
    response = client.get("/api/suppliers/", headers={"Authorization": "Bearer stale"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_session_cookie_authenticates_page(airtable, firestore_db, monkeypatch):
    from fastapi.testclient import TestClient
    from backend.app.main import app

    monkeypatch.setattr(auth, "verify_session_cookie", lambda cookie, check_revoked: {"uid": "u3", "email": "u3@glampack.test"})
    client = TestClient(app, cookies={settings.SESSION_COOKIE_NAME: "cookie"})

    response = client.get("/inventory/raw-materials", follow_redirects=False)
    assert response.status_code == 200
    assert "u3@glampack.test" in response.text


def test_logout_clears_cookie(client, login, monkeypatch):
    revoked = []
    monkeypatch.setattr(auth, "revoke_refresh_tokens", lambda uid: revoked.append(uid))
    user = login()

    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert revoked == [user.uid]
    assert f'{settings.SESSION_COOKIE_NAME}=""' in response.headers["set-cookie"]


def test_signup_creates_viewer(client, firestore_db, monkeypatch):
    class Created:
        uid = "fresh"

    monkeypatch.setattr(auth, "create_user", lambda email, password: Created())
    response = client.post(
        "/api/auth/signup",
        json={"email": "fresh@glampack.test", "password": "secret1", "confirm_password": "secret1"},
    )
    assert response.status_code == 201
    assert response.json()["data"]["role"] == "viewer"


def test_signup_password_mismatch(client):
    response = client.post(
        "/api/auth/signup",
        json={"email": "fresh@glampack.test", "password": "secret1", "confirm_password": "secret2"},
    )
    assert response.status_code == 422


def test_signup_existing_email(client, monkeypatch):
    def exists(email, password):
        raise auth.EmailAlreadyExistsError("exists", cause=None, http_response=None)

    monkeypatch.setattr(auth, "create_user", exists)
    response = client.post(
        "/api/auth/signup",
        json={"email": "taken@glampack.test", "password": "secret1", "confirm_password": "secret1"},
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "An account with this email already exists."


def test_status_for_anonymous_visitor(client, anonymous):
    assert client.get("/api/auth/status").json() == {"authenticated": False, "user": None}


def test_firebase_error_messages():
    assert handle_firebase_error(ValueError("Invalid password string")) == "Password should be at least 6 characters."
    assert handle_firebase_error(ValueError("Malformed email address")) == "Invalid email address."
    assert handle_firebase_error(auth.InvalidIdTokenError("bad")) == "Invalid or expired token"
