"""Shared fixtures: canned Statuspage documents, a fake upstream transport
and a recording notifier."""
from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from consumers.base import Notifier
from core.errors import DeliveryError

BASE_URL = "https://status.example.test/api/v2"

STATUS_DOC = {
    "page": {"id": "yh6f0r4529hb", "name": "Cloudflare"},
    "status": {"indicator": "minor", "description": "Minor Service Outage"},
    "components": [{"name": "should be ignored", "status": "major_outage"}],
}

COMPONENTS_DOC = {
    "components": [
        {"id": "c1", "name": "Seoul, South Korea - (ICN)", "status": "degraded_performance"},
        {"id": "c2", "name": "Tokyo, Japan - (NRT)", "status": "major_outage"},
        {"id": "c3", "name": "Busan", "description": "Korea edge", "status": "operational"},
        {"id": "c4", "name": "Dashboard", "status": "operational"},
    ]
}

INCIDENTS_DOC = {
    "incidents": [
        {
            "id": "inc1",
            "name": "Elevated errors in ICN",
            "status": "identified",
            "impact": "minor",
            "monitoring_at": None,
            "shortlink": "https://stspg.io/abc",
            "incident_updates": [
                {"status": "identified", "body": "Fix in progress.", "created_at": "2026-10-18T03:10:00.000Z"},
                {"status": "investigating", "body": "Looking into it.", "created_at": "2026-10-18T02:50:00.000Z"},
            ],
            "components": [{"name": "Seoul, South Korea - (ICN)"}, {"name": "Dashboard"}],
        }
    ]
}


class RecordingNotifier(Notifier):
    def __init__(self, fail: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.fail = fail

    async def send(self, payload: dict[str, Any]) -> None:
        if self.fail:
            raise DeliveryError(500, "Internal Server Error")
        self.sent.append(payload)


class FakeUpstream:
    """Route table for ``httpx.MockTransport``: path -> (status, json body)."""

    def __init__(self, routes: dict[str, tuple[int, Any]]) -> None:
        self.routes = dict(routes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v2")
        status, body = self.routes.get(path, (404, {"error": "not found"}))
        return httpx.Response(status, json=body)

    def hits(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(path))


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream({
        "/components.json": (200, COMPONENTS_DOC),
        "/status.json": (200, STATUS_DOC),
        "/incidents/unresolved.json": (200, INCIDENTS_DOC),
    })


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail=True)
