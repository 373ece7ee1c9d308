from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Notifier(ABC):
    """Delivery endpoint for rendered notification payloads.

    The monitor calls ``send()`` once per notify-worthy check.  A failed
    delivery must raise ``DeliveryError``; the monitor logs it and records
    it on the check result, it never aborts the check.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def send(self, payload: dict[str, Any]) -> None:
        """Deliver one payload.  Subclasses implement this."""
