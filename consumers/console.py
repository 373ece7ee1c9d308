from __future__ import annotations

import json
import logging
from typing import Any

from consumers.base import Notifier

log = logging.getLogger(__name__)


class ConsoleNotifier(Notifier):
    """Dry-run notifier that prints payloads to stdout.

    Used when no webhook URL is configured, so the pipeline still runs end
    to end on a developer machine.
    """

    async def send(self, payload: dict[str, Any]) -> None:
        log.info("Dry run, printing %r instead of posting", payload.get("text"))
        print(json.dumps(payload, indent=2, ensure_ascii=False), flush=True)
