"""Pytest fixtures for crime analytics tests."""

from datetime import datetime, timedelta, timezone

import pytest

from core.models import Incident, Severity

# Wednesday
NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time so recency and trend windows are deterministic."""
    return NOW


@pytest.fixture
def make_incident():
    """Factory for incidents; defaults to a medium theft in Fort District an hour before NOW."""
    def _make(
        lat=18.95,
        lng=72.83,
        crime_type="theft",
        severity="medium",
        zone="Fort District",
        occurred_at=None,
        incident_id=None,
    ):
        return Incident(
            latitude=lat,
            longitude=lng,
            crime_type=crime_type,
            severity=Severity(severity),
            zone=zone,
            occurred_at=occurred_at or NOW - timedelta(hours=1),
            incident_id=incident_id,
        )
    return _make


@pytest.fixture
def city_scenario(make_incident):
    """
    45 high-severity assaults packed within ~0.6 km in Zone A, plus 5 low-severity thefts
    in Zone B, each more than 5 km from every other incident.
    """
    incidents = []
    for k in range(45):
        incidents.append(make_incident(
            lat=18.95 + (k % 9) * 0.0005,
            lng=72.83 + (k // 9) * 0.0005,
            crime_type="assault",
            severity="high",
            zone="Zone A",
            occurred_at=NOW - timedelta(hours=k + 1),
            incident_id=f"a{k}",
        ))
    for k in range(5):
        incidents.append(make_incident(
            lat=19.10 + k * 0.05,
            lng=72.90,
            crime_type="theft",
            severity="low",
            zone="Zone B",
            occurred_at=NOW - timedelta(hours=100 + k),
            incident_id=f"b{k}",
        ))
    return incidents


@pytest.fixture
def app_client():
    """FastAPI TestClient. Clears in-memory incidents before each use."""
    from fastapi.testclient import TestClient
    import api.main as main_module
    main_module.incidents.clear()
    return TestClient(main_module.app)
