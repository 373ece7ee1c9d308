from __future__ import annotations

import logging
from collections.abc import Mapping

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from core.monitor import CHECKS, StatusMonitor

log = logging.getLogger(__name__)

DEFAULT_SCHEDULES = {
    "components": "0 */6 * * *",
    "incidents": "0 * * * *",
}


def group_by_cron(schedules: Mapping[str, str]) -> dict[str, tuple[str, ...]]:
    """Invert ``{check: cron}`` into ``{cron: (checks...)}``.

    Checks that share an expression end up on one job, so a single firing
    runs all of them.  Insertion order of ``schedules`` is kept.
    """
    grouped: dict[str, list[str]] = {}
    for check, expression in schedules.items():
        if check not in CHECKS:
            raise ValueError(f"Unknown check: {check}")
        grouped.setdefault(" ".join(expression.split()), []).append(check)
    return {cron: tuple(checks) for cron, checks in grouped.items()}


class Scheduler:
    """Cron-driven trigger for the status checks.

    Wraps an APScheduler ``AsyncIOScheduler`` with one job per distinct
    cron expression.  On firing, the job runs every check bound to that
    expression.  This is the only place errors are swallowed: a failed
    check is logged and the schedule carries on.
    """

    def __init__(
        self,
        monitor: StatusMonitor,
        schedules: Mapping[str, str] = DEFAULT_SCHEDULES,
        timezone: str = "UTC",
    ) -> None:
        self._monitor = monitor
        self._jobs = group_by_cron(schedules)
        self._timezone = timezone
        self._scheduler = AsyncIOScheduler(timezone=timezone)

    @property
    def jobs(self) -> dict[str, tuple[str, ...]]:
        return dict(self._jobs)

    def checks_for(self, cron: str) -> tuple[str, ...]:
        """Which checks a firing of ``cron`` should run."""
        return self._jobs.get(" ".join(cron.split()), ())

    async def fire(self, cron: str) -> None:
        checks = self.checks_for(cron)
        if not checks:
            log.warning("No checks bound to cron %r", cron)
            return

        log.info("Cron %r fired, running %s", cron, ", ".join(checks))
        outcomes = await self._monitor.run_checks(checks)
        for check, outcome in outcomes.items():
            if isinstance(outcome, BaseException):
                log.error(
                    "Scheduled %s check failed: %s",
                    check,
                    outcome,
                    exc_info=(type(outcome), outcome, outcome.__traceback__),
                )
            else:
                log.info(
                    "Scheduled %s check done (issues=%s, notified=%s)",
                    check,
                    outcome.has_issues,
                    outcome.notified,
                )

    def start(self) -> None:
        for cron, checks in self._jobs.items():
            self._scheduler.add_job(
                self.fire,
                trigger=CronTrigger.from_crontab(cron, timezone=self._timezone),
                args=(cron,),
                id=f"check-{'-'.join(checks)}",
                name=f"{', '.join(checks)} check",
                coalesce=True,
                max_instances=1,
            )
            log.info("Scheduled %s on %r", ", ".join(checks), cron)
        self._scheduler.start()

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            log.info("Scheduler stopped")
