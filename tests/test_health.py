from backend.app.schemas.user import UserRole


def test_health_ok(client, login, airtable, firestore_db, monkeypatch):
    from backend.app.api import health

    monkeypatch.setattr(health, "get_airtable", lambda: airtable)
    login(UserRole.VIEWER)

    response = client.get("/api/health/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["firebase"]["ok"] is True
    assert body["airtable"]["ok"] is True


def test_health_degraded_without_stores(client, login, monkeypatch):
    from backend.app.api import health
    from backend.app.services.profiles import profile_store

    monkeypatch.setattr(profile_store, "db", None)
    login(UserRole.VIEWER)

    body = client.get("/api/health/").json()
    assert body["status"] == "degraded"
    assert "not initialized" in body["firebase"]["error"]
    assert body["airtable"]["ok"] is False


def test_health_requires_authentication(client):
    assert client.get("/api/health/").status_code == 401
