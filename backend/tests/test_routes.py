"""Tests for the HTTP surface."""
import json
from datetime import datetime, timedelta

import httpx
import pytest

from opsboard.database import get_db, get_session_factory
from opsboard.dependencies import get_aggregator, get_coordinator, get_cron_secret
from opsboard.main import create_app
from opsboard.models import SystemEvent
from opsboard.services.aggregator import UptimeAggregator
from opsboard.services.coordinator import PassCoordinator
from opsboard.services.prober import ProbeOutcome
from opsboard.services.recorder import RecorderService
from opsboard.services.registry import SiteRegistry

from .helpers import FailingRegistry, StubProber

SECRET = "s3cret"
AUTH = {"Authorization": f"Bearer {SECRET}"}


@pytest.fixture
def prober():
    return StubProber({
        "up.example": ProbeOutcome(reached=True, status_code=200, elapsed_ms=120),
        "down.example": ProbeOutcome.unreached(10_000, "Request timeout"),
    })


@pytest.fixture
def app(session_factory, prober):
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_cron_secret] = lambda: SECRET
    app.dependency_overrides[get_coordinator] = lambda: PassCoordinator(
        registry=SiteRegistry(session_factory),
        prober=prober,
        recorder=RecorderService(session_factory),
    )
    return app


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestCronHealthCheck:
    """GET /api/cron/health-check"""

    async def test_missing_secret_is_rejected(self, client, add_site, prober):
        await add_site("a", "up.example")

        response = await client.get("/api/cron/health-check")

        assert response.status_code == 401
        assert prober.calls == []

    async def test_wrong_secret_is_rejected(self, client, prober):
        response = await client.get("/api/cron/health-check", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert prober.calls == []

    async def test_unconfigured_secret_rejects_everything(self, app, client):
        app.dependency_overrides[get_cron_secret] = lambda: None

        response = await client.get("/api/cron/health-check", headers={"Authorization": "Bearer "})

        assert response.status_code == 401

    async def test_runs_pass(self, client, add_site):
        await add_site("a", "up.example", name="Up")
        await add_site("b", "down.example", name="Down")

        response = await client.get("/api/cron/health-check", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Health checks completed"
        assert body["checks"] == 2
        assert body["timestamp"] is not None
        results = {r["domain"]: r for r in body["results"]}
        assert results["up.example"] == {
            "site": "Up",
            "domain": "up.example",
            "status": "healthy",
            "response_time_ms": 120,
            "status_code": 200,
        }
        assert results["down.example"]["status"] == "critical"
        assert results["down.example"]["status_code"] == 0

    async def test_no_sites(self, client):
        response = await client.get("/api/cron/health-check", headers=AUTH)

        assert response.status_code == 200
        assert response.json()["checks"] == 0
        assert response.json()["message"] == "No active sites to check"

    async def test_registry_failure_is_500(self, app, client, session_factory, prober):
        app.dependency_overrides[get_coordinator] = lambda: PassCoordinator(
            registry=FailingRegistry(),
            prober=prober,
            recorder=RecorderService(session_factory),
        )

        response = await client.get("/api/cron/health-check", headers=AUTH)

        assert response.status_code == 500
        assert response.json()["error"] == "Health check failed"
        assert "connection refused" in response.json()["message"]


class TestUptime:
    """GET /api/uptime"""

    async def test_uptime_per_site(self, client, add_site, add_check):
        now = datetime.utcnow()
        await add_site("a", "a.example", name="A")
        await add_site("b", "b.example", name="B")
        for i in range(3):
            await add_check("a", "healthy", now - timedelta(minutes=5 * i), response_time_ms=100 + i * 100)
        await add_check("a", "critical", now - timedelta(minutes=20), status_code=0)

        response = await client.get("/api/uptime")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["period"] == "last_24_hours"
        by_id = {d["site_id"]: d for d in body["data"]}
        assert by_id["a"]["uptime_percentage"] == 75.0
        assert by_id["a"]["total_checks"] == 4
        assert by_id["a"]["checks_in_window"] == 4
        assert by_id["a"]["healthy_checks"] == 3
        assert by_id["a"]["avg_response_time"] == 200
        assert by_id["a"]["status_badge"] == "healthy"
        assert by_id["b"]["uptime_percentage"] is None
        assert by_id["b"]["total_checks"] == 0
        assert by_id["b"]["status_badge"] == "unknown"


class TestHealth:
    """GET /api/health"""

    async def test_latest_status(self, client, add_site, add_check):
        now = datetime.utcnow()
        await add_site("a", "a.example", name="A")
        await add_site("b", "b.example", name="B")
        await add_check("a", "healthy", now - timedelta(minutes=10))
        await add_check("a", "warning", now - timedelta(minutes=5), status_code=404)

        response = await client.get("/api/health")

        assert response.status_code == 200
        by_id = {d["site_id"]: d for d in response.json()["data"]}
        assert by_id["a"]["health_status"] == "warning"
        assert by_id["a"]["status_code"] == 404
        assert by_id["a"]["status_badge"] == "warning"
        assert by_id["b"]["health_status"] == "unknown"
        assert by_id["b"]["last_check"] is None

    async def test_failed_lookup_is_unknown_for_that_site_only(self, app, client, session_factory, add_site, add_check):
        await add_site("a", "a.example", name="A")
        await add_site("b", "b.example", name="B")
        await add_check("b", "healthy", datetime.utcnow() - timedelta(minutes=5))

        class FlakyAggregator(UptimeAggregator):
            async def latest_observation(self, site_id):
                if site_id == "a":
                    raise RuntimeError("db hiccup")
                return await super().latest_observation(site_id)

        app.dependency_overrides[get_aggregator] = lambda: FlakyAggregator(session_factory)

        response = await client.get("/api/health")

        assert response.status_code == 200
        by_id = {d["site_id"]: d for d in response.json()["data"]}
        assert by_id["a"]["health_status"] == "unknown"
        assert by_id["a"]["status_badge"] == "unknown"
        assert by_id["a"]["last_check"] is None
        assert by_id["b"]["health_status"] == "healthy"
        assert by_id["b"]["status_badge"] == "healthy"


class TestEvents:
    """GET /api/events"""

    async def test_recent_events(self, client, session_factory):
        now = datetime.utcnow()
        async with session_factory() as session:
            session.add(SystemEvent(
                severity="critical",
                description="A is DOWN (a.example)",
                event_metadata=json.dumps({"status_code": 0, "response_time_ms": 10_000}),
                created_at=now - timedelta(minutes=3),
            ))
            session.add(SystemEvent(
                severity="critical",
                description="old",
                created_at=now - timedelta(hours=30),
            ))
            await session.commit()

        response = await client.get("/api/events")

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 1
        assert data[0]["description"] == "A is DOWN (a.example)"
        assert data[0]["metadata"] == {"status_code": 0, "response_time_ms": 10_000}
        assert data[0]["time_ago"] == "3 minutes ago"


async def test_liveness(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
