from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

OPERATIONAL = "operational"


@dataclass(frozen=True)
class Component:
    """A named subsystem of the monitored provider.

    ``status`` is kept as the raw upstream token (``operational``,
    ``degraded_performance``, ``partial_outage``, ``major_outage``, ...).
    Tokens this code does not know about are passed through unchanged.
    """

    name: str
    status: str
    description: str | None = None
    id: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Component:
        return cls(
            name=raw.get("name") or "",
            status=raw.get("status") or "",
            description=raw.get("description"),
            id=raw.get("id"),
        )


@dataclass(frozen=True)
class StatusSnapshot:
    """Point-in-time view of overall status plus the component list.

    Fields:
        description: Overall status text ("All Systems Operational").
        indicator:   Upstream severity indicator ("none", "minor", ...).
        components:  Components in upstream order.
    """

    description: str | None
    components: tuple[Component, ...] = ()
    indicator: str | None = None

    @classmethod
    def from_documents(
        cls,
        status_doc: dict[str, Any],
        components_doc: dict[str, Any],
    ) -> StatusSnapshot:
        """Shallow merge: overall status from the status document, the
        component list always from the components listing."""
        status = status_doc.get("status") or {}
        components = components_doc.get("components") or []
        return cls(
            description=status.get("description"),
            indicator=status.get("indicator"),
            components=tuple(Component.from_dict(c) for c in components),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": {
                "description": self.description,
                "indicator": self.indicator,
            },
            "components": [asdict(c) for c in self.components],
        }


@dataclass(frozen=True)
class IncidentUpdate:
    status: str
    body: str
    created_at: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> IncidentUpdate:
        return cls(
            status=raw.get("status") or "",
            body=raw.get("body") or "",
            created_at=raw.get("created_at"),
        )


@dataclass(frozen=True)
class Incident:
    """A reported disruption with its lifecycle status and timeline.

    ``updates`` keeps upstream order, which is newest first.
    ``components`` holds affected component names only.
    """

    name: str
    status: str
    impact: str | None = None
    monitoring: bool = False
    updates: tuple[IncidentUpdate, ...] = ()
    components: tuple[str, ...] = ()
    id: str | None = None
    shortlink: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Incident:
        return cls(
            name=raw.get("name") or "Unknown incident",
            status=raw.get("status") or "",
            impact=raw.get("impact") or None,
            monitoring=bool(raw.get("monitoring") or raw.get("monitoring_at")),
            updates=tuple(
                IncidentUpdate.from_dict(u) for u in raw.get("incident_updates") or []
            ),
            components=tuple(
                c.get("name") or "" for c in raw.get("components") or []
            ),
            id=raw.get("id"),
            shortlink=raw.get("shortlink"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "impact": self.impact,
            "monitoring": self.monitoring,
            "shortlink": self.shortlink,
            "incident_updates": [asdict(u) for u in self.updates],
            "components": [{"name": n} for n in self.components],
        }


def parse_incidents(doc: dict[str, Any]) -> tuple[Incident, ...]:
    """Parse an ``incidents/unresolved.json`` document."""
    return tuple(Incident.from_dict(i) for i in doc.get("incidents") or [])
