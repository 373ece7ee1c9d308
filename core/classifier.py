from __future__ import annotations

from collections.abc import Sequence

from models.status import OPERATIONAL, Component, Incident


def has_actionable_component_issue(components: Sequence[Component]) -> bool:
    # Unknown tokens count as issues.
    return any(c.status != OPERATIONAL for c in components)


def has_unresolved_incidents(incidents: Sequence[Incident]) -> bool:
    # The upstream listing is already restricted to unresolved incidents.
    return len(incidents) > 0
