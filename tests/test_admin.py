import pytest
from fastapi.testclient import TestClient

import deps.auth as auth
from main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def _admin(monkeypatch):
    monkeypatch.setattr(auth, "ADMIN_TOKEN", "secret")


def test_admin_purge_unauthorized():
    r = client.post("/admin/sessions/purge")
    assert r.status_code == 401


def test_admin_purge_ok(fake_clock):
    client.post("/division/sessions", json={"tier": "EASY"})
    client.post("/division/sessions", json={"tier": "EASY"})
    fake_clock.advance(5)

    r = client.get("/admin/sessions/count", headers={"x-admin-token": "secret"})
    assert r.json()["count"] == 2

    r = client.post("/admin/sessions/purge?max_idle_s=1", headers={"x-admin-token": "secret"})
    assert r.status_code == 200
    assert r.json() == {"ok": True, "purged": 2, "remaining": 0}
