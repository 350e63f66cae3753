from datetime import datetime

import pytest
from firebase_admin import auth

from backend.app.schemas.user import UserRole
from backend.app.services.profiles import ProfileStore, ProfilesUnavailableError, profile_store


def seed_profile(firestore_db, uid, role="viewer", **extra):
    firestore_db.collection("users").document(uid).set(
        {"uid": uid, "email": f"{uid}@glampack.test", "role": role, "created_at": datetime(2024, 1, 1), **extra}
    )


def test_new_profile_gets_viewer_role(firestore_db):
    store = ProfileStore(firestore_db)
    profile = store.get_or_create("new-user", email="new@glampack.test")
    assert profile.role == UserRole.VIEWER
    assert firestore_db.collections["users"]["new-user"]["role"] == "viewer"


def test_existing_profile_keeps_role(firestore_db):
    seed_profile(firestore_db, "boss", role="admin")
    profile = ProfileStore(firestore_db).get_or_create("boss", email="boss@glampack.test")
    assert profile.role == UserRole.ADMIN


def test_unknown_stored_role_falls_back_to_viewer(firestore_db):
    seed_profile(firestore_db, "odd", role="overlord")
    assert ProfileStore(firestore_db).get("odd").role == UserRole.VIEWER


def test_profile_without_firestore_uses_default_role():
    store = ProfileStore()
    store.db = None
    profile = store.get_or_create("anyone", email="a@glampack.test")
    assert profile.role == UserRole.VIEWER


def test_get_my_profile_lists_role_permissions(client, login):
    login(UserRole.STAFF)
    response = client.get("/api/users/me")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "staff"
    assert "create_stock_movement" in data["role_permissions"]
    assert "delete_supplier" not in data["role_permissions"]


def test_update_my_profile(client, login, firestore_db):
    user = login(UserRole.VIEWER)
    seed_profile(firestore_db, user.uid)

    response = client.patch("/api/users/me", json={"display_name": "Ama", "role": "admin"})
    assert response.status_code == 200
    stored = firestore_db.collections["users"][user.uid]
    assert stored["display_name"] == "Ama"
    assert stored["role"] == "viewer"


def test_update_my_profile_requires_fields(client, login, firestore_db):
    login(UserRole.VIEWER)
    response = client.patch("/api/users/me", json={})
    assert response.status_code == 400
    assert response.json()["detail"] == "No valid fields to update"


def test_list_users_requires_permission(client, login, firestore_db):
    login(UserRole.MANAGER)
    assert client.get("/api/users/").status_code == 403


def test_admin_lists_users(client, login, firestore_db):
    login(UserRole.ADMIN)
    seed_profile(firestore_db, "a")
    seed_profile(firestore_db, "b", role="staff")

    response = client.get("/api/users/")
    assert response.status_code == 200
    assert {u["uid"]: u["role"] for u in response.json()} == {"a": "viewer", "b": "staff"}


def test_admin_changes_role(client, login, firestore_db):
    login(UserRole.ADMIN)
    seed_profile(firestore_db, "worker")

    response = client.put("/api/users/worker/role", json={"role": "staff"})
    assert response.status_code == 200
    assert response.json()["message"] == "User role updated to staff"
    assert firestore_db.collections["users"]["worker"]["role"] == "staff"


def test_role_change_for_missing_user(client, login, firestore_db):
    login(UserRole.ADMIN)
    assert client.put("/api/users/ghost/role", json={"role": "staff"}).status_code == 404


def test_admin_cannot_demote_self(client, login, firestore_db):
    user = login(UserRole.ADMIN)
    seed_profile(firestore_db, user.uid, role="admin")

    response = client.put(f"/api/users/{user.uid}/role", json={"role": "viewer"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot demote yourself"


def test_invalid_role_is_rejected(client, login, firestore_db):
    login(UserRole.ADMIN)
    seed_profile(firestore_db, "worker")
    assert client.put("/api/users/worker/role", json={"role": "owner"}).status_code == 422


def test_admin_deletes_user(client, login, firestore_db, monkeypatch):
    login(UserRole.ADMIN)
    seed_profile(firestore_db, "leaver")
    deleted = []
    monkeypatch.setattr(auth, "delete_user", lambda uid: deleted.append(uid))

    response = client.delete("/api/users/leaver")
    assert response.status_code == 200
    assert deleted == ["leaver"]
    assert "leaver" not in firestore_db.collections["users"]


def test_admin_cannot_delete_self(client, login, firestore_db):
    user = login(UserRole.ADMIN)
    response = client.delete(f"/api/users/{user.uid}")
    assert response.status_code == 400


def test_profile_store_without_firestore_raises_unavailable():
    store = ProfileStore()
    store.db = None
    with pytest.raises(ProfilesUnavailableError):
        store.list()
    with pytest.raises(ProfilesUnavailableError):
        store.get("anyone")


def test_user_management_without_firestore_is_503(client, login, monkeypatch):
    monkeypatch.setattr(profile_store, "db", None)
    login(UserRole.ADMIN)

    for response in (
        client.get("/api/users/"),
        client.patch("/api/users/me", json={"display_name": "Ama"}),
        client.put("/api/users/worker/role", json={"role": "staff"}),
        client.delete("/api/users/worker"),
    ):
        assert response.status_code == 503
        assert response.json()["detail"] == "User profiles are unavailable"
