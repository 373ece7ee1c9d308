from __future__ import annotations


class MonitorError(Exception):
    """Base class for failures the HTTP surface reports as a 500."""


class UpstreamFetchError(MonitorError):
    """A status API request failed (non-success response or transport error).

    Fails the enclosing check as a whole; no partial data is returned.
    """

    def __init__(
        self,
        endpoint: str,
        status_code: int | None = None,
        reason: str = "",
        url: str | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        self.reason = reason
        self.url = url
        if status_code is None:
            detail = reason or "request failed"
        else:
            detail = f"{status_code} {reason}".strip()
        where = f"{endpoint} ({url})" if url else endpoint
        super().__init__(f"Failed to fetch {where}: {detail}")


class DeliveryError(MonitorError):
    """The chat webhook rejected or never received a notification."""

    def __init__(self, status_code: int | None = None, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        if status_code is None:
            detail = reason or "request failed"
        else:
            detail = f"{status_code} {reason}".strip()
        super().__init__(f"Failed to send notification: {detail}")
