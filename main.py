"""Status Monitor -- entry point.

Wires the check pipeline:

    Trigger (cron job or manual HTTP call)
        -> StatuspageProvider (fetch + merge, read-through cache)
        -> keyword filter / issue classifier
        -> Block Kit formatter
        -> notifier (Slack webhook, or stdout when no URL is configured)

A shared httpx.AsyncClient is injected into the provider and the notifier.

Usage:
    python main.py serve                 # scheduler + HTTP server
    python main.py check components      # one-shot check, JSON to stdout
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

import httpx
import uvicorn
from dotenv import load_dotenv

from api.app import create_app
from config import Settings
from consumers.base import Notifier
from consumers.console import ConsoleNotifier
from consumers.slack import SlackWebhookNotifier
from core.cache import ResponseCache
from core.errors import MonitorError
from core.monitor import CHECKS, StatusMonitor
from core.scheduler import Scheduler
from providers.statuspage_provider import StatuspageProvider

log = logging.getLogger("status-monitor")


def build_monitor(settings: Settings, client: httpx.AsyncClient) -> StatusMonitor:
    provider = StatuspageProvider(
        client=client,
        base_url=settings.base_url,
        components_path=settings.components_path,
        summary_path=settings.summary_path,
        incidents_path=settings.incidents_path,
        cache=ResponseCache(ttl=settings.cache_ttl),
        name=settings.provider_name,
    )

    notifier: Notifier
    if settings.webhook_url:
        notifier = SlackWebhookNotifier(client=client, webhook_url=settings.webhook_url)
    else:
        log.warning("%s is not set, notifications go to stdout", settings.webhook_env_key)
        notifier = ConsoleNotifier()

    return StatusMonitor(
        provider=provider,
        notifier=notifier,
        keywords=settings.keywords,
        region=settings.region_label,
        heartbeat=settings.heartbeat,
    )


async def serve(settings: Settings) -> None:
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        monitor = build_monitor(settings, client)
        scheduler = Scheduler(
            monitor,
            schedules=settings.schedules,
            timezone=settings.scheduler_timezone,
        )
        app = create_app(monitor, title=f"{settings.provider_name} Status Monitor")
        server = uvicorn.Server(uvicorn.Config(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        ))

        scheduler.start()
        try:
            await server.serve()
        finally:
            scheduler.shutdown()


async def check_once(settings: Settings, which: str) -> int:
    names = CHECKS if which == "all" else (which,)
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        monitor = build_monitor(settings, client)
        outcomes = await monitor.run_checks(names)

    exit_code = 0
    report: dict[str, object] = {}
    for name, outcome in outcomes.items():
        if isinstance(outcome, MonitorError):
            log.error("%s check failed: %s", name, outcome)
            report[name] = {"error": "Failed to process request", "message": str(outcome)}
            exit_code = 1
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            report[name] = outcome.to_dict()

    print(json.dumps(report, indent=2, ensure_ascii=False))
    return exit_code


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Relay status-page changes to a chat webhook.")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="run the cron scheduler and the HTTP trigger surface")
    check = sub.add_parser("check", help="run a check once and print the result")
    check.add_argument("which", choices=[*CHECKS, "all"])
    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "serve"
    return args


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    args = parse_args(argv)
    try:
        if args.command == "check":
            sys.exit(asyncio.run(check_once(settings, args.which)))
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        print("\nShutting down.")


if __name__ == "__main__":
    main()
