from __future__ import annotations

from abc import ABC, abstractmethod

import httpx

from models.status import Incident, StatusSnapshot


class StatusProvider(ABC):
    """Abstract base for status-page API clients.

    Each concrete provider fetches its own upstream documents and
    normalizes them into ``StatusSnapshot`` / ``Incident`` values.

    A shared ``httpx.AsyncClient`` is injected at construction time so
    that the provider and the notifier reuse one connection pool.

    Both fetch methods raise ``UpstreamFetchError`` on any failed request;
    they never return partial or empty data in its place.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name (e.g. 'Cloudflare')."""

    @abstractmethod
    async def fetch_components_snapshot(self) -> StatusSnapshot:
        """Fetch overall status and the full (unfiltered) component list."""

    @abstractmethod
    async def fetch_unresolved_incidents(self) -> tuple[Incident, ...]:
        """Fetch incidents the upstream still reports as unresolved."""
