import os
# Keep plan generation in-process for API tests
os.environ.pop("TRAINING_PROGRAM_FUNCTION_URL", None)

import itertools
import pytest
from fastapi.testclient import TestClient

from api.main import app
from utils import db


# ---------------------------------------------------------------------------
# In-memory stand-in for the Supabase query builder
# ---------------------------------------------------------------------------

class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, store, table):
        self.store = store
        self.table_name = table
        self.operation = "select"
        self.payload = None
        self.filters = []
        self._order = None
        self._limit = None

    def select(self, columns="*"):
        self.operation = "select"
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def is_(self, column, value):
        if value == "null":
            self.filters.append(lambda row: row.get(column) is None)
        else:
            self.filters.append(lambda row: row.get(column) is value)
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self):
        if self.operation in self.store.failing:
            raise RuntimeError(f"{self.operation} on {self.table_name} failed")

        rows = self.store.tables.setdefault(self.table_name, [])

        if self.operation == "insert":
            row = dict(self.payload)
            row.setdefault("id", str(next(self.store.ids)))
            rows.append(row)
            return FakeResponse([dict(row)])

        matched = [row for row in rows if all(f(row) for f in self.filters)]

        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResponse([dict(row) for row in matched])

        if self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda row: row.get(column) or "", reverse=desc)
        if self._limit is not None:
            matched = matched[:self._limit]
        return FakeResponse([dict(row) for row in matched])


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failing = set()
        self.ids = itertools.count(1)

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, name):
        return self.tables.setdefault(name, [])

    def profile(self, user_id):
        for row in self.rows("profiles"):
            if row["id"] == user_id:
                return row
        return None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def make_assessment(**overrides):
    """Default form answers: every skill 3, consistency 2, newest bucket."""
    data = {
        "experience_months": 0,
        "frequency_per_week": 1,
        "serve_score": 3,
        "return_score": 3,
        "dink_score": 3,
        "drop_score": 3,
        "reset_score": 3,
        "volley_score": 3,
        "hand_speed_score": 3,
        "lob_score": 3,
        "speedup_score": 3,
        "positioning_score": 3,
        "anticipation_score": 3,
        "consistency_score": 2,
        "play_style": "Keep the ball in play",
    }
    data.update(overrides)
    return data


@pytest.fixture
def assessment_data():
    return make_assessment()


@pytest.fixture
def supabase(monkeypatch):
    fake = FakeSupabase()
    fake.rows("profiles").append({"id": "player-1", "self_assessment_complete": False})
    monkeypatch.setattr(db, "get_supabase_client", lambda: fake)
    return fake


@pytest.fixture
def client(supabase, monkeypatch):
    monkeypatch.delenv("TRAINING_PROGRAM_FUNCTION_URL", raising=False)
    with TestClient(app) as c:
        yield c
