import os
import tempfile
import uuid

import pytest

# Settings are read once and cached, so the environment has to be in place
# before anything from reality_bracket is imported.
_DB_DIR = tempfile.mkdtemp(prefix="reality_bracket_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["ADMIN_KEY"] = "test-admin-key"
os.environ["SECRET_KEY"] = "test-secret"

from fastapi.testclient import TestClient  # noqa: E402

from reality_bracket.main import app  # noqa: E402

ADMIN_KEY = os.environ["ADMIN_KEY"]


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


def register(client, admin=False, username=None):
    """Registers a fresh user and returns (user_id, auth headers)."""
    username = username or f"user_{uuid.uuid4().hex[:8]}"
    body = {
        "email": f"{username}@example.com",
        "username": username,
        "password": "Password001!!",
    }
    if admin:
        body["admin_key"] = ADMIN_KEY
    r = client.post("/api/auth/register", json=body)
    assert r.status_code == 200, r.text
    data = r.json()
    return data["user_id"], {"Authorization": f"Bearer {data['access_token']}"}


@pytest.fixture
def admin(client):
    return register(client, admin=True)


@pytest.fixture
def season(client, admin):
    """A fresh season with four contestants. Returns (season_id, {name: contestant_id})."""
    _, headers = admin
    number = uuid.uuid4().int % 1_000_000 + 100
    r = client.post("/api/seasons", json={"number": number, "name": f"Survivor {number}"}, headers=headers)
    assert r.status_code == 201, r.text
    season_id = r.json()["id"]

    names = ["Teeny", "Genevieve", "Rachel", "Sam"]
    r = client.post(
        f"/api/seasons/{season_id}/contestants/bulk",
        json={"contestants": [{"name": n} for n in names]},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return season_id, {c["name"]: c["id"] for c in r.json()}
