from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient

import main


class FakeCursor:
    """Cursor that replays queued rows instead of talking to PostgreSQL.

    Each fetchone()/fetchall() pops the next entry of ``results``.
    ``errors`` maps the index of an execute() call to the exception it raises.
    """

    def __init__(self):
        self.results = []
        self.errors = {}
        self.rowcount = 1
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))
        exc = self.errors.get(len(self.executed) - 1)
        if exc is not None:
            raise exc

    def fetchone(self):
        return self.results.pop(0) if self.results else None

    def fetchall(self):
        return self.results.pop(0) if self.results else []


class FakeConnection:
    def __init__(self):
        self.cur = FakeCursor()
        self.committed = False
        self.rolled_back = False

    def cursor(self):
        return self.cur


@pytest.fixture
def db(monkeypatch):
    conn = FakeConnection()

    @contextmanager
    def fake_get_db():
        try:
            yield conn
            conn.committed = True
        except Exception:
            conn.rolled_back = True
            raise

    monkeypatch.setattr(main, "get_db", fake_get_db)
    monkeypatch.setattr(main, "init_db", lambda: None)
    return conn


@pytest.fixture
def client(db):
    return TestClient(main.app)


@pytest.fixture
def ranked_rows():
    """Ten players rated 10 down to 1."""
    return [
        {"id": f"p{skill}", "name": f"Player {skill:02d}", "skill": skill}
        for skill in range(10, 0, -1)
    ]
