"""Incident model, ingestion and settings."""

from core.models import Incident, Severity, RiskLevel, AnomalyKind
from core.normalize import normalize_incident, normalize_incidents

__all__ = [
    "Incident",
    "Severity",
    "RiskLevel",
    "AnomalyKind",
    "normalize_incident",
    "normalize_incidents",
]
