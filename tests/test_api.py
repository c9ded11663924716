import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from campex.api import export_routes
from campex.connectors.activecampaign.client import ActiveCampaignAPIError
from campex.database import get_session
from campex.main import app
from campex.sinks import DatabaseSink

SUMMARY = {
    "totalFetched": 10,
    "totalKept": 4,
    "totalWithErrors": 1,
    "durationSeconds": 0.2,
    "timestamp": "2026-10-16T00:00:00+00:00",
    "testMode": True,
    "filterSettings": {
        "enabled": True,
        "status": {"enabled": True, "value": 5},
        "automation": {"enabled": True, "value": 0},
    },
}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def client(engine):
    def _session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["service"] == "campex"


def test_run_export_returns_summary(client, monkeypatch):
    captured = {}

    async def fake_export(config=None, **kwargs):
        captured["config"] = config
        return {"summary": SUMMARY, "campaigns": [{"id": str(i)} for i in range(4)]}

    monkeypatch.setattr(export_routes, "run_configured_export", fake_export)

    resp = client.post("/exports/run", json={"test_mode": False, "max_pages": 2, "filter_enabled": False})

    assert resp.status_code == 200
    body = resp.json()
    assert body["campaign_count"] == 4
    assert body["summary"]["totalKept"] == 4
    assert captured["config"].test_mode is False
    assert captured["config"].max_pages == 2
    assert captured["config"].filters.enabled is False


def test_run_export_maps_api_error_to_502(client, monkeypatch):
    async def failing_export(**kwargs):
        raise ActiveCampaignAPIError("HTTP error! status: 401", 401)

    monkeypatch.setattr(export_routes, "run_configured_export", failing_export)

    resp = client.post("/exports/run", json={})

    assert resp.status_code == 502
    assert "401" in resp.json()["detail"]


def test_list_and_get_archived_exports(client, engine):
    sink = DatabaseSink(engine)
    sink.persist({"summary": SUMMARY, "campaigns": [{"id": "1"}]})

    listing = client.get("/exports").json()
    assert listing["count"] == 1
    assert listing["results"][0]["total_fetched"] == 10

    detail = client.get(f"/exports/{sink.last_run_id}").json()
    assert detail["document"]["campaigns"] == [{"id": "1"}]

    assert client.get("/exports/999").status_code == 404
