from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one check run.

    ``status`` describes the fetch portion only. Delivery problems are
    reported separately through ``notified`` and ``delivery_error`` so a
    failed webhook call never turns a successful fetch into a failure.
    """

    check: str
    message: str
    has_issues: bool
    notified: bool
    data: dict[str, Any]
    delivery_error: str | None = None
    incidents_count: int | None = None
    status: str = "success"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "status": self.status,
            "check": self.check,
            "message": self.message,
            "has_issues": self.has_issues,
            "notified": self.notified,
        }
        if self.incidents_count is not None:
            out["incidents_count"] = self.incidents_count
        if self.delivery_error is not None:
            out["delivery_error"] = self.delivery_error
        out["data"] = self.data
        return out
