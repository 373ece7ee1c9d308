from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from core.cache import ResponseCache
from core.errors import UpstreamFetchError
from models.status import Incident, StatusSnapshot, parse_incidents
from providers.base import StatusProvider

DEFAULT_BASE_URL = "https://www.cloudflarestatus.com/api/v2"
DEFAULT_COMPONENTS_PATH = "/components.json"
DEFAULT_SUMMARY_PATH = "/status.json"
DEFAULT_INCIDENTS_PATH = "/incidents/unresolved.json"

log = logging.getLogger(__name__)


class StatuspageProvider(StatusProvider):
    """Provider adapter for an Atlassian Statuspage v2 JSON API.

    Every GET goes through a ``ResponseCache``: fresh entries skip the
    network, stale ones are revalidated with ``If-None-Match`` so an
    unchanged document costs a 304 instead of a full body.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        components_path: str = DEFAULT_COMPONENTS_PATH,
        summary_path: str = DEFAULT_SUMMARY_PATH,
        incidents_path: str = DEFAULT_INCIDENTS_PATH,
        cache: ResponseCache | None = None,
        name: str = "Cloudflare",
    ) -> None:
        super().__init__(client)
        self._base_url = base_url.rstrip("/")
        self._components_path = components_path
        self._summary_path = summary_path
        self._incidents_path = incidents_path
        self._cache = cache if cache is not None else ResponseCache()
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def fetch_components_snapshot(self) -> StatusSnapshot:
        components_doc, status_doc = await asyncio.gather(
            self._get_json(self._url(self._components_path), "components data"),
            self._get_json(self._url(self._summary_path), "status data"),
        )
        snapshot = StatusSnapshot.from_documents(status_doc, components_doc)
        log.debug(
            "[%s] Snapshot: %r with %d component(s)",
            self.name,
            snapshot.description,
            len(snapshot.components),
        )
        return snapshot

    async def fetch_unresolved_incidents(self) -> tuple[Incident, ...]:
        doc = await self._get_json(self._url(self._incidents_path), "incidents data")
        incidents = parse_incidents(doc)
        log.debug("[%s] %d unresolved incident(s)", self.name, len(incidents))
        return incidents

    async def _get_json(self, url: str, label: str) -> Any:
        cached = self._cache.get(url)
        if cached is not None and self._cache.is_fresh(cached):
            log.debug("[%s] Cache hit for %s", self.name, url)
            return cached.body

        headers: dict[str, str] = {}
        if cached is not None and cached.etag:
            headers["If-None-Match"] = cached.etag

        try:
            resp = await self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            log.error("[%s] HTTP error fetching %s: %s", self.name, label, exc)
            raise UpstreamFetchError(
                label, reason=str(exc) or type(exc).__name__, url=url
            ) from exc

        if resp.status_code == 304 and cached is not None:
            log.debug("[%s] %s not modified", self.name, url)
            return self._cache.touch(url)

        if not resp.is_success:
            log.warning(
                "[%s] Unexpected status %d for %s", self.name, resp.status_code, label
            )
            raise UpstreamFetchError(label, resp.status_code, resp.reason_phrase, url=url)

        try:
            body = resp.json()
        except ValueError as exc:
            raise UpstreamFetchError(
                label, resp.status_code, "invalid JSON body", url=url
            ) from exc

        if not isinstance(body, dict):
            log.warning("[%s] Unexpected document shape for %s", self.name, label)
            raise UpstreamFetchError(
                label, resp.status_code, "unexpected JSON document", url=url
            )

        self._cache.store(url, body, resp.headers.get("etag"))
        return body
