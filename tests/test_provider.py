from __future__ import annotations

import httpx
import pytest

from core.cache import ResponseCache
from core.errors import UpstreamFetchError
from providers.statuspage_provider import StatuspageProvider

BASE_URL = "https://status.example.test/api/v2"


def _provider(client: httpx.AsyncClient, cache: ResponseCache | None = None) -> StatuspageProvider:
    if cache is None:
        cache = ResponseCache(ttl=0)
    return StatuspageProvider(client=client, base_url=BASE_URL, cache=cache)


@pytest.mark.asyncio
async def test_components_snapshot_merges_both_documents(upstream, make_client) -> None:
    async with make_client(upstream) as client:
        snapshot = await _provider(client).fetch_components_snapshot()

    assert snapshot.description == "Minor Service Outage"
    assert snapshot.indicator == "minor"
    # components always come from the components listing
    assert [c.id for c in snapshot.components] == ["c1", "c2", "c3", "c4"]
    assert snapshot.components[2].description == "Korea edge"
    assert upstream.hits("/components.json") == 1
    assert upstream.hits("/status.json") == 1


@pytest.mark.asyncio
async def test_unresolved_incidents_are_parsed(upstream, make_client) -> None:
    async with make_client(upstream) as client:
        incidents = await _provider(client).fetch_unresolved_incidents()

    assert len(incidents) == 1
    incident = incidents[0]
    assert incident.name == "Elevated errors in ICN"
    assert incident.status == "identified"
    assert incident.impact == "minor"
    assert incident.monitoring is False
    assert [u.status for u in incident.updates] == ["identified", "investigating"]
    assert incident.components == ("Seoul, South Korea - (ICN)", "Dashboard")


@pytest.mark.asyncio
async def test_non_success_status_fails_with_endpoint_and_code(upstream, make_client) -> None:
    upstream.routes["/status.json"] = (503, {"error": "unavailable"})
    async with make_client(upstream) as client:
        with pytest.raises(UpstreamFetchError) as info:
            await _provider(client).fetch_components_snapshot()

    err = info.value
    assert err.status_code == 503
    assert err.endpoint == "status data"
    assert err.url == f"{BASE_URL}/status.json"
    assert "503" in str(err)
    assert "status data" in str(err)


@pytest.mark.asyncio
async def test_incidents_failure(upstream, make_client) -> None:
    upstream.routes["/incidents/unresolved.json"] = (500, {})
    async with make_client(upstream) as client:
        with pytest.raises(UpstreamFetchError, match="incidents data"):
            await _provider(client).fetch_unresolved_incidents()


@pytest.mark.asyncio
async def test_non_object_document_is_rejected(upstream, make_client) -> None:
    upstream.routes["/components.json"] = (200, [])
    async with make_client(upstream) as client:
        with pytest.raises(UpstreamFetchError) as info:
            await _provider(client).fetch_components_snapshot()

    assert info.value.endpoint == "components data"
    assert info.value.status_code == 200
    assert "unexpected JSON document" in str(info.value)


@pytest.mark.asyncio
async def test_transport_error_is_wrapped(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(UpstreamFetchError) as info:
            await _provider(client).fetch_unresolved_incidents()

    assert info.value.status_code is None
    assert "connection refused" in str(info.value)


@pytest.mark.asyncio
async def test_fresh_cache_skips_network(upstream, make_client) -> None:
    async with make_client(upstream) as client:
        provider = _provider(client, ResponseCache(ttl=60))
        await provider.fetch_components_snapshot()
        await provider.fetch_components_snapshot()

    assert upstream.hits("/components.json") == 1
    assert upstream.hits("/status.json") == 1


@pytest.mark.asyncio
async def test_stale_entry_is_revalidated_with_etag(make_client) -> None:
    now = [0.0]
    seen_headers: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_headers.append(request.headers.get("if-none-match"))
        if request.headers.get("if-none-match") == '"v1"':
            return httpx.Response(304)
        return httpx.Response(200, json={"incidents": []}, headers={"ETag": '"v1"'})

    cache = ResponseCache(ttl=60, clock=lambda: now[0])
    async with make_client(handler) as client:
        provider = _provider(client, cache)
        assert await provider.fetch_unresolved_incidents() == ()
        now[0] = 30.0
        await provider.fetch_unresolved_incidents()
        now[0] = 120.0
        assert await provider.fetch_unresolved_incidents() == ()

    assert seen_headers == [None, '"v1"']
    entry = cache.get(f"{BASE_URL}/incidents/unresolved.json")
    assert entry is not None and entry.stored_at == 120.0
