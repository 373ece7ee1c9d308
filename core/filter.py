from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from models.status import Component, StatusSnapshot

DEFAULT_KEYWORDS = ("icn", "seoul", "korea", "south korea")


def component_matches(component: Component, keywords: Iterable[str]) -> bool:
    """True if any keyword occurs in the component's name or description."""
    name = component.name.lower()
    description = (component.description or "").lower()
    return any(kw in name or kw in description for kw in keywords)


def filter_by_keywords(snapshot: StatusSnapshot, keywords: Iterable[str]) -> StatusSnapshot:
    """Return a new snapshot holding only components relevant to ``keywords``.

    Matching is a case-insensitive substring test.  Relative order is
    preserved and ``snapshot`` itself is left untouched, so callers may keep
    using the unfiltered view.
    """
    lowered = tuple(kw.lower() for kw in keywords if kw)
    kept = tuple(c for c in snapshot.components if component_matches(c, lowered))
    return dataclasses.replace(snapshot, components=kept)
