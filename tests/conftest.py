import os
import tempfile

# Point the app at a throwaway SQLite file before db.py is imported.
_DB_PATH = os.path.join(tempfile.mkdtemp(prefix="mathly-tests-"), "mathly.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"

import pytest  # noqa: E402

import models  # noqa: E402,F401
from db import Base, engine  # noqa: E402
from division.store import SessionStore  # noqa: E402

Base.metadata.create_all(bind=engine)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


@pytest.fixture
def fake_clock(monkeypatch):
    clock = FakeClock()
    monkeypatch.setattr(SessionStore, "clock", staticmethod(clock))
    return clock


@pytest.fixture(autouse=True)
def _fresh_sessions(monkeypatch):
    monkeypatch.setattr(SessionStore, "_entries", {})
