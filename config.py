from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    s = str(raw).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return bool(default)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return int(default)
    try:
        return int(str(raw).strip())
    except ValueError:
        return int(default)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return float(default)
    try:
        return float(str(raw).strip())
    except ValueError:
        return float(default)


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return str(default)
    s = str(raw).strip()
    return s if s else str(default)


def _env_csv(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    out: list[str] = []
    for part in str(raw).split(","):
        item = part.strip().lower()
        if item:
            out.append(item)
    return tuple(out)


@dataclass(frozen=True)
class Settings:
    # Upstream Statuspage API
    base_url: str = field(
        default_factory=lambda: _env_str("STATUS_API_BASE_URL", "https://www.cloudflarestatus.com/api/v2")
    )
    components_path: str = field(default_factory=lambda: _env_str("STATUS_COMPONENTS_PATH", "/components.json"))
    summary_path: str = field(default_factory=lambda: _env_str("STATUS_SUMMARY_PATH", "/status.json"))
    incidents_path: str = field(
        default_factory=lambda: _env_str("STATUS_INCIDENTS_PATH", "/incidents/unresolved.json")
    )
    provider_name: str = field(default_factory=lambda: _env_str("STATUS_PROVIDER_NAME", "Cloudflare"))
    cache_ttl: int = field(default_factory=lambda: _env_int("STATUS_CACHE_TTL", 60))
    http_timeout: float = field(default_factory=lambda: _env_float("HTTP_TIMEOUT", 30.0))

    # Relevance filter
    keywords: tuple[str, ...] = field(
        default_factory=lambda: _env_csv("STATUS_KEYWORDS", ("icn", "seoul", "korea", "south korea"))
    )
    region_label: str = field(default_factory=lambda: _env_str("STATUS_REGION_LABEL", "ICN (Seoul)"))

    # Delivery. The URL itself is a secret read from the variable named by
    # WEBHOOK_ENV_KEY; an empty value means dry-run to stdout.
    webhook_env_key: str = field(default_factory=lambda: _env_str("WEBHOOK_ENV_KEY", "SLACK_WEBHOOK_URL"))
    webhook_url: str | None = field(default=None, repr=False)
    heartbeat: bool = field(default_factory=lambda: _env_bool("NOTIFY_HEARTBEAT", False))

    # Schedules (5-field crontab)
    components_cron: str = field(default_factory=lambda: _env_str("COMPONENTS_CRON", "0 */6 * * *"))
    incidents_cron: str = field(default_factory=lambda: _env_str("INCIDENTS_CRON", "0 * * * *"))
    scheduler_timezone: str = field(default_factory=lambda: _env_str("SCHEDULER_TIMEZONE", "UTC"))

    # HTTP server
    host: str = field(default_factory=lambda: _env_str("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 8787))
    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO").upper())

    def __post_init__(self) -> None:
        if self.webhook_url is None:
            object.__setattr__(self, "webhook_url", os.getenv(self.webhook_env_key, "").strip())

    @property
    def schedules(self) -> dict[str, str]:
        return {"components": self.components_cron, "incidents": self.incidents_cron}
