"""
Tests for the root, liveness and readiness endpoints.
"""
from vitals_tracker import __version__


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "Vitals Tracker API"
    assert data["version"] == __version__
    assert data["health"] == "/health"
    assert data["ready"] == "/ready"


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["timestamp"].endswith("Z")


def test_ready_endpoint(client):
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert [d["name"] for d in data["dependencies"]] == ["record_store"]
    assert data["dependencies"][0]["status"] == "ok"


def test_ready_reports_unavailable_database(client, monkeypatch):
    from vitals_tracker.core import dependencies as deps
    from vitals_tracker.core.config import settings

    class BrokenDatabase:
        def ping(self):
            raise OSError("no such file")

    monkeypatch.setattr(settings, "vitals_store_backend", "sqlite")
    monkeypatch.setattr(deps, "get_database", lambda: BrokenDatabase())

    response = client.get("/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    assert data["dependencies"][0]["status"] == "unavailable"
    assert "OSError" in data["dependencies"][0]["message"]
