import os

# Settings are read once at import time, so the environment must be ready first
os.environ["JWT_SECRET"] = "test-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "development"
os.environ["GEMINI_API_KEY"] = ""

import copy
from itertools import count
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.assistant.routes import get_gemini_client

UNIQUE_KEYS = {"users": "email", "profiles": "user_id"}


class FakeQuery:
    """Just enough of the PostgREST builder for the services under test"""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.columns = None
        self.filters = []
        self.row_limit = None
        self.action = "select"
        self.payload = None

    def select(self, columns="*"):
        if columns.strip() != "*":
            self.columns = [c.strip() for c in columns.split(",")]
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def insert(self, row):
        self.action = "insert"
        self.payload = row
        return self

    def update(self, row):
        self.action = "update"
        self.payload = row
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def _project(self, row):
        if self.columns is None:
            return copy.deepcopy(row)
        return {c: copy.deepcopy(row.get(c)) for c in self.columns}

    def execute(self):
        if self.db.fail_with is not None:
            raise self.db.fail_with
        rows = self.db.tables.setdefault(self.table, [])

        if self.action == "insert":
            row = copy.deepcopy(self.payload)
            key = UNIQUE_KEYS.get(self.table)
            if key and any(r.get(key) == row.get(key) for r in rows):
                raise Exception("duplicate key value violates unique constraint (23505)")
            if self.table == "users":
                row["id"] = next(self.db.ids)
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])

        if self.action == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self.payload))
                    updated.append(copy.deepcopy(row))
            return SimpleNamespace(data=updated)

        matched = [self._project(r) for r in rows if self._matches(r)]
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        return SimpleNamespace(data=matched)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.ids = count(1)
        self.fail_with = None

    def table(self, name):
        return FakeQuery(self, name)


class FakeGemini:
    def __init__(self, reply="Stay hydrated and keep moving."):
        self.reply = reply
        self.prompts = []

    def generate(self, prompt, temperature=0.7):
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_supabase] = lambda: fake_db
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def gemini():
    fake = FakeGemini()
    app.dependency_overrides[get_gemini_client] = lambda: fake
    return fake


@pytest.fixture
def profile_payload():
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "age": 30,
        "gender": "female",
        "height": 170,
        "weight": 70,
        "goal": "strength",
        "level": "beginner",
        "place": "home",
        "equipment": ["dumbbells", "mat"],
        "injuries": {"knee": "old sprain"},
        "others": None,
        "days": 3,
        "session_time": 45,
        "able": True,
    }


@pytest.fixture
def register(client):
    def _register(name="Ada", email="a@b.com", password="x"):
        return client.post("/api/register", json={"name": name, "email": email, "password": password})
    return _register


@pytest.fixture
def logged_in(client, register):
    """Client holding a valid token cookie for a freshly registered user"""
    response = register()
    assert response.status_code == 201
    return client
