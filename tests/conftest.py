from datetime import datetime
import itertools

import pytest
from fastapi.testclient import TestClient

from backend.app.core.airtable import AirtableError, get_airtable
from backend.app.core.auth import get_current_user, get_optional_user
from backend.app.main import app
from backend.app.schemas.user import UserProfile, UserRole
from backend.app.services.profiles import profile_store


class FakeAirtable:
    """In-memory stand-in for AirtableClient, keyed by table name."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self._ids = itertools.count(1)

    def seed(self, table_name, *field_sets):
        rows = self.tables.setdefault(table_name, [])
        for fields in field_sets:
            rows.append({"id": f"rec{next(self._ids)}", "createdTime": "2024-01-01T00:00:00.000Z", "fields": dict(fields)})
        return rows

    def _find(self, table_name, record_id):
        for record in self.tables.get(table_name, []):
            if record["id"] == record_id:
                return record
        raise AirtableError(404, "Airtable API error: 404 - NOT_FOUND")

    def list(self, table_name, filter_by_formula=None, sort=None, max_records=None, page_size=None, view=None):
        self.calls.append(("list", table_name, filter_by_formula))
        records = list(self.tables.get(table_name, []))
        if filter_by_formula:
            # Only {Warehouse} = '<name>' formulas are used by the API
            name = filter_by_formula.split("= '", 1)[1][:-1]
            records = [r for r in records if r["fields"].get("Warehouse") == name]
        return records[:max_records] if max_records else records

    def get(self, table_name, record_id):
        return self._find(table_name, record_id)

    def create(self, table_name, fields):
        self.calls.append(("create", table_name, fields))
        return self.seed(table_name, fields)[-1]

    def update(self, table_name, record_id, fields):
        self.calls.append(("update", table_name, record_id, fields))
        record = self._find(table_name, record_id)
        record["fields"].update(fields)
        return record

    def delete(self, table_name, record_id):
        self.calls.append(("delete", table_name, record_id))
        record = self._find(table_name, record_id)
        self.tables[table_name].remove(record)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, store, doc_id):
        self.store = store
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self.store.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self.store:
            self.store[self.id].update(data)
        else:
            self.store[self.id] = dict(data)

    def delete(self):
        self.store.pop(self.id, None)


class FakeCollection:
    def __init__(self, store):
        self.store = store
        self._limit = None

    def document(self, doc_id):
        return FakeDocument(self.store, doc_id)

    def limit(self, count):
        self._limit = count
        return self

    def stream(self):
        items = list(self.store.items())[: self._limit]
        return [FakeSnapshot(doc_id, data) for doc_id, data in items]


class FakeFirestore:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))


def make_user(role=UserRole.ADMIN, uid="user-1", permissions=None):
    return UserProfile(
        uid=uid,
        email=f"{uid}@glampack.test",
        role=role,
        created_at=datetime(2024, 1, 1),
        permissions=permissions or [],
    )


@pytest.fixture
def airtable():
    fake = FakeAirtable()
    app.dependency_overrides[get_airtable] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_airtable, None)


@pytest.fixture
def firestore_db(monkeypatch):
    fake = FakeFirestore()
    monkeypatch.setattr(profile_store, "db", fake)
    return fake


@pytest.fixture
def login():
    """Sign a user in for the test: login(role) returns the profile used for every request."""
    def _login(role=UserRole.ADMIN, uid="user-1", permissions=None):
        user = make_user(role, uid, permissions)
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_optional_user] = lambda: user
        return user

    yield _login
    app.dependency_overrides.pop(get_current_user, None)
    app.dependency_overrides.pop(get_optional_user, None)


@pytest.fixture
def anonymous():
    app.dependency_overrides[get_optional_user] = lambda: None
    yield
    app.dependency_overrides.pop(get_optional_user, None)


@pytest.fixture
def client():
    return TestClient(app)
