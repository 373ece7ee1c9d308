from __future__ import annotations

import dataclasses

import pytest

from models.result import CheckResult
from models.status import Component, Incident, StatusSnapshot, parse_incidents


def test_status_document_components_are_overridden_by_listing() -> None:
    snapshot = StatusSnapshot.from_documents(
        {"status": {"description": "Partial Outage"}, "components": [{"name": "old", "status": "x"}]},
        {"components": [{"name": "new", "status": "operational"}]},
    )
    assert [c.name for c in snapshot.components] == ["new"]


def test_missing_fields_do_not_error() -> None:
    snapshot = StatusSnapshot.from_documents({}, {"components": [{"status": "operational"}]})
    assert snapshot.description is None
    assert snapshot.components == (Component(name="", status="operational"),)


def test_snapshot_is_immutable() -> None:
    snapshot = StatusSnapshot("ok", (Component("ICN", "operational"),))
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.description = "changed"  # type: ignore[misc]


def test_incident_monitoring_flag() -> None:
    assert Incident.from_dict({"name": "a", "monitoring_at": "2026-10-18T00:00:00Z"}).monitoring is True
    assert Incident.from_dict({"name": "a", "monitoring": True}).monitoring is True
    assert Incident.from_dict({"name": "a", "monitoring_at": None}).monitoring is False


def test_parse_incidents_handles_empty_and_missing() -> None:
    assert parse_incidents({}) == ()
    assert parse_incidents({"incidents": []}) == ()
    incident = parse_incidents({"incidents": [{}]})[0]
    assert incident.name == "Unknown incident"
    assert incident.updates == ()
    assert incident.components == ()


def test_incident_to_dict_round_trips_component_names() -> None:
    incident = Incident.from_dict({"name": "a", "status": "identified", "components": [{"name": "ICN"}]})
    assert incident.to_dict()["components"] == [{"name": "ICN"}]


def test_check_result_to_dict() -> None:
    result = CheckResult(
        check="incidents",
        message="Unresolved incidents checked",
        has_issues=False,
        notified=False,
        data={"incidents": []},
        incidents_count=0,
    )
    assert result.to_dict() == {
        "status": "success",
        "check": "incidents",
        "message": "Unresolved incidents checked",
        "has_issues": False,
        "notified": False,
        "incidents_count": 0,
        "data": {"incidents": []},
    }
