# tests/conftest.py
import asyncio
import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Must be configured before any presant module reads the settings
_DB_DIR = tempfile.mkdtemp(prefix="presant-tests-")
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["APP_ENV"] = "test"
os.environ.setdefault("APP_TIMEZONE", "UTC")

from presant.db.session import init_db  # noqa: E402
from presant.main import create_app  # noqa: E402


@pytest.fixture()
def client() -> TestClient:
    """
    TestClient over a freshly reset database.

    Each test gets a clean schema + empty tables.
    """
    asyncio.run(init_db())

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_master_event(client):
    def _make(title: str = "Weekly Choir Practice", **extra) -> dict:
        response = client.post("/master-events", json={"title": title, **extra})
        assert response.status_code == 201
        return response.json()

    return _make


@pytest.fixture()
def make_participant(client):
    def _make(name: str, phone_number: str = "0812000000", gender: str = "L", age: int = 30) -> dict:
        response = client.post(
            "/participants",
            json={"name": name, "phone_number": phone_number, "gender": gender, "age": age},
        )
        assert response.status_code == 201
        return response.json()

    return _make


@pytest.fixture()
def make_event_instance(client, make_master_event):
    def _make(start_date: str, **extra) -> dict:
        master_id = extra.pop("master_event_id", None) or make_master_event()["id"]
        payload = {"master_event_id": master_id, "start_date": start_date, **extra}
        response = client.post("/event-instances", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
