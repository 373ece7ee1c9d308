"""Slack Block Kit rendering for component and incident notifications.

Both renderers are pure: the only non-deterministic input is the clock,
and it can be pinned by passing ``now``.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from models.status import OPERATIONAL, Incident, IncidentUpdate, StatusSnapshot

COMPONENTS = "components"
INCIDENTS = "incidents"

DEFAULT_PROVIDER = "Cloudflare"
DEFAULT_REGION = "ICN (Seoul)"
MAX_TIMELINE_UPDATES = 3
# Slack rejects messages with more blocks than this.
MAX_BLOCKS = 50
# Room kept for the overflow note and the footer.
_RESERVED_BLOCKS = 2

GLYPH_OK = "✅"
GLYPH_WARNING = "⚠️"
GLYPH_ERROR = "❌"

INCIDENT_STATUS_GLYPHS = {
    "investigating": "\U0001f50d",
    "identified": "\U0001f50e",
    "monitoring": "\U0001f440",
    "resolved": GLYPH_OK,
    "postmortem": "\U0001f4dd",
}
DEFAULT_INCIDENT_GLYPH = GLYPH_WARNING

log = logging.getLogger(__name__)


def _now_iso(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def _section(text: str) -> dict[str, Any]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def _context(text: str) -> dict[str, Any]:
    return {"type": "context", "elements": [{"type": "mrkdwn", "text": text}]}


def _header(text: str) -> dict[str, Any]:
    return {"type": "header", "text": {"type": "plain_text", "text": text, "emoji": True}}


def _divider() -> dict[str, Any]:
    return {"type": "divider"}


def component_glyph(status: str) -> str:
    if status == OPERATIONAL:
        return GLYPH_OK
    if status == "degraded_performance":
        return GLYPH_WARNING
    return GLYPH_ERROR


def humanize_status(status: str) -> str:
    """'degraded_performance' -> 'degraded performance'."""
    return status.replace("_", " ") if status else "unknown"


def incident_glyph(status: str | None) -> str:
    if not status:
        return DEFAULT_INCIDENT_GLYPH
    return INCIDENT_STATUS_GLYPHS.get(status.lower(), DEFAULT_INCIDENT_GLYPH)


def format_update_time(raw: str | None) -> str:
    """Render an upstream ISO 8601 timestamp as 'YYYY-MM-DD HH:MM UTC'.

    Values that do not parse are shown as-is.
    """
    if not raw:
        return "unknown"
    try:
        ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        log.debug("Unparseable update timestamp %r", raw)
        return raw
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def format_components_message(
    snapshot: StatusSnapshot,
    *,
    provider: str = DEFAULT_PROVIDER,
    region: str = DEFAULT_REGION,
    now: datetime | None = None,
) -> dict[str, Any]:
    title = f"{provider} {region} Status Update"
    blocks: list[dict[str, Any]] = [
        _header(f"\U0001f310 {title}"),
        _divider(),
        _section(f"*Overall Status:* {snapshot.description or 'Unknown'}"),
    ]

    if snapshot.components:
        blocks.append(_section(f"*{region} Components:*"))
        room = MAX_BLOCKS - _RESERVED_BLOCKS - len(blocks)
        shown = snapshot.components[:room]
        for component in shown:
            blocks.append(_section(
                f"{component_glyph(component.status)} *{component.name}*: "
                f"{humanize_status(component.status)}"
            ))
        hidden = len(snapshot.components) - len(shown)
        if hidden > 0:
            log.warning("Dropping %d component(s) to stay within %d blocks", hidden, MAX_BLOCKS)
            blocks.append(_context(f"_{hidden} more components not shown_"))
    else:
        blocks.append(_section("_No relevant components found_"))

    blocks.append(_context(f"Last updated: {_now_iso(now)}"))
    return {"blocks": blocks, "text": title}


def _timeline_blocks(updates: Sequence[IncidentUpdate]) -> list[dict[str, Any]]:
    shown = updates[:MAX_TIMELINE_UPDATES]
    blocks = [_section("*Incident Timeline:*")]
    for idx, update in enumerate(shown):
        label = "*Latest Update:*" if idx == 0 else f"*Update {len(shown) - idx}:*"
        tag = f" [{update.status}]" if update.status else ""
        blocks.append(_section(f"{label}{tag}\n{update.body}"))
        blocks.append(_context(f"Updated: {format_update_time(update.created_at)}"))

    hidden = len(updates) - len(shown)
    if hidden > 0:
        blocks.append(_context(f"_{hidden} more updates not shown_"))
    return blocks


def _incident_blocks(incident: Incident) -> list[dict[str, Any]]:
    lines = [
        f"{incident_glyph(incident.status)} *{incident.name}*",
        f"*Status:* {incident.status or 'Unknown'}",
    ]
    if incident.impact:
        lines.append(f"*Impact: {incident.impact}*")
    if incident.monitoring:
        lines.append("\U0001f50d Being monitored")

    blocks = [_section("\n".join(lines))]
    if incident.updates:
        blocks.extend(_timeline_blocks(incident.updates))
    if incident.components:
        blocks.append(_section(f"*Affected Components:* {', '.join(incident.components)}"))
    blocks.append(_divider())
    return blocks


def format_incidents_message(
    incidents: Sequence[Incident],
    *,
    provider: str = DEFAULT_PROVIDER,
    now: datetime | None = None,
) -> dict[str, Any]:
    title = f"{provider} Incident Alert"
    blocks: list[dict[str, Any]] = [_header(f"\U0001f6a8 {title}"), _divider()]

    if incidents:
        limit = MAX_BLOCKS - _RESERVED_BLOCKS
        shown = 0
        for incident in incidents:
            chunk = _incident_blocks(incident)
            if len(blocks) + len(chunk) > limit:
                break
            blocks.extend(chunk)
            shown += 1
        hidden = len(incidents) - shown
        if hidden > 0:
            log.warning("Dropping %d incident(s) to stay within %d blocks", hidden, MAX_BLOCKS)
            blocks.append(_context(f"_{hidden} more incidents not shown_"))
    else:
        blocks.append(_section("_No active incidents reported_"))

    blocks.append(_context(f"Last checked: {_now_iso(now)}"))
    return {"blocks": blocks, "text": title}


def format_message(kind: str, data: Any, **kwargs: Any) -> dict[str, Any]:
    """Dispatch to the renderer for ``kind``.

    An unknown kind is a programming error and raises ``ValueError``.
    """
    if kind == COMPONENTS:
        return format_components_message(data, **kwargs)
    if kind == INCIDENTS:
        return format_incidents_message(data, **kwargs)
    raise ValueError(f"Unknown notification type: {kind}")
