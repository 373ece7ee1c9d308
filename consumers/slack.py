from __future__ import annotations

import logging
from typing import Any

import httpx

from consumers.base import Notifier
from core.errors import DeliveryError

log = logging.getLogger(__name__)


class SlackWebhookNotifier(Notifier):
    """Posts Block Kit payloads to a Slack incoming webhook.

    The webhook URL is a secret; it is handed in at construction time and
    never logged.  One attempt per payload, no retries.
    """

    def __init__(self, client: httpx.AsyncClient, webhook_url: str) -> None:
        if not webhook_url:
            raise ValueError("webhook_url must not be empty")
        self._client = client
        self._webhook_url = webhook_url

    async def send(self, payload: dict[str, Any]) -> None:
        try:
            resp = await self._client.post(self._webhook_url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log.error("Slack webhook request failed: %s", type(exc).__name__)
            raise DeliveryError(reason=type(exc).__name__) from exc

        if not resp.is_success:
            log.warning("Slack webhook returned %d", resp.status_code)
            raise DeliveryError(resp.status_code, resp.reason_phrase)

        log.info("Sent %r to Slack", payload.get("text"))
