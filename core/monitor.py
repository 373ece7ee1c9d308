from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Callable

from consumers.base import Notifier
from core.classifier import has_actionable_component_issue, has_unresolved_incidents
from core.errors import DeliveryError
from core.filter import DEFAULT_KEYWORDS, filter_by_keywords
from core.formatter import (
    COMPONENTS,
    DEFAULT_REGION,
    INCIDENTS,
    format_message,
)
from models.result import CheckResult
from providers.base import StatusProvider

CHECKS = (COMPONENTS, INCIDENTS)

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatusMonitor:
    """Runs the fetch -> filter -> classify -> format -> deliver pipeline.

    Each call is independent and stateless: nothing from a previous run is
    consulted.  Fetch failures propagate to the caller with no notification
    attempted.  Delivery failures are caught here, logged, and reported on
    the returned ``CheckResult``.

    Notification policy: a check notifies only when its data is actionable.
    With ``heartbeat=True`` the components check notifies on every run
    instead; incidents stay gated on a non-empty unresolved list.
    """

    def __init__(
        self,
        provider: StatusProvider,
        notifier: Notifier,
        keywords: Iterable[str] = DEFAULT_KEYWORDS,
        region: str = DEFAULT_REGION,
        heartbeat: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._provider = provider
        self._notifier = notifier
        self._keywords = tuple(kw.lower() for kw in keywords)
        self._region = region
        self._heartbeat = heartbeat
        self._clock = clock

    @property
    def keywords(self) -> tuple[str, ...]:
        return self._keywords

    async def check_components(self) -> CheckResult:
        snapshot = await self._provider.fetch_components_snapshot()
        relevant = filter_by_keywords(snapshot, self._keywords)
        has_issues = has_actionable_component_issue(relevant.components)

        log.info(
            "%s components: %d of %d relevant, issues=%s",
            self._region,
            len(relevant.components),
            len(snapshot.components),
            has_issues,
        )

        notified, delivery_error = False, None
        if has_issues or self._heartbeat:
            payload = format_message(
                COMPONENTS,
                relevant,
                provider=self._provider.name,
                region=self._region,
                now=self._clock(),
            )
            notified, delivery_error = await self._deliver(COMPONENTS, payload)

        return CheckResult(
            check=COMPONENTS,
            message=f"{self._region} components status checked",
            has_issues=has_issues,
            notified=notified,
            delivery_error=delivery_error,
            data=relevant.to_dict(),
        )

    async def check_incidents(self) -> CheckResult:
        incidents = await self._provider.fetch_unresolved_incidents()
        has_issues = has_unresolved_incidents(incidents)
        log.info("%d unresolved incident(s)", len(incidents))

        notified, delivery_error = False, None
        if has_issues:
            payload = format_message(
                INCIDENTS, incidents, provider=self._provider.name, now=self._clock()
            )
            notified, delivery_error = await self._deliver(INCIDENTS, payload)

        return CheckResult(
            check=INCIDENTS,
            message="Unresolved incidents checked",
            has_issues=has_issues,
            notified=notified,
            delivery_error=delivery_error,
            incidents_count=len(incidents),
            data={"incidents": [i.to_dict() for i in incidents]},
        )

    async def run_check(self, name: str) -> CheckResult:
        if name == COMPONENTS:
            return await self.check_components()
        if name == INCIDENTS:
            return await self.check_incidents()
        raise ValueError(f"Unknown check: {name}")

    async def run_checks(self, names: Iterable[str]) -> dict[str, CheckResult | BaseException]:
        """Run several checks concurrently.

        A failing check never cancels the others; its exception is returned
        in place of a result.
        """
        names = list(names)
        for name in names:
            if name not in CHECKS:
                raise ValueError(f"Unknown check: {name}")
        outcomes = await asyncio.gather(
            *(self.run_check(n) for n in names), return_exceptions=True
        )
        return dict(zip(names, outcomes))

    async def _deliver(self, kind: str, payload: dict[str, Any]) -> tuple[bool, str | None]:
        try:
            await self._notifier.send(payload)
        except DeliveryError as exc:
            log.error("Delivery of %s notification via %s failed: %s", kind, self._notifier.name, exc)
            return False, str(exc)
        return True, None
