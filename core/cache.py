from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_CACHE_TTL = 60


@dataclass
class CachedResponse:
    body: Any
    etag: str | None
    stored_at: float


class ResponseCache:
    """In-memory read-through cache for upstream JSON documents, keyed by URL.

    Entries younger than ``ttl`` seconds are served without touching the
    network.  Stale entries are kept so their ETag can be sent back as
    ``If-None-Match``; a 304 then refreshes the entry via ``touch()``.

    A ``ttl`` of zero or less disables caching entirely.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CachedResponse] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def get(self, url: str) -> CachedResponse | None:
        if not self.enabled:
            return None
        return self._entries.get(url)

    def is_fresh(self, entry: CachedResponse) -> bool:
        return self._clock() - entry.stored_at < self._ttl

    def store(self, url: str, body: Any, etag: str | None = None) -> None:
        if not self.enabled:
            return
        self._entries[url] = CachedResponse(body=body, etag=etag, stored_at=self._clock())

    def touch(self, url: str) -> Any:
        """Mark a revalidated entry fresh again and return its body."""
        entry = self._entries[url]
        entry.stored_at = self._clock()
        return entry.body

    def clear(self) -> None:
        self._entries.clear()

    @property
    def size(self) -> int:
        return len(self._entries)
