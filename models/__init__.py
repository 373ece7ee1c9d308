from models.result import CheckResult
from models.status import Component, Incident, IncidentUpdate, StatusSnapshot

__all__ = ["CheckResult", "Component", "Incident", "IncidentUpdate", "StatusSnapshot"]
