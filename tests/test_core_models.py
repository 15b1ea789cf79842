"""Tests for the incident model and result types."""

import dataclasses
import math
from datetime import datetime, timedelta, timezone

import pytest

from analytics.classifier import classify_crimes
from core.models import (
    SEVERITY_WEIGHTS,
    Anomaly,
    AnomalyKind,
    Incident,
    RiskLevel,
    RiskZone,
    Severity,
    severity_distribution,
)


class TestIncident:
    def test_frozen(self, make_incident):
        incident = make_incident()
        with pytest.raises(dataclasses.FrozenInstanceError):
            incident.zone = "elsewhere"

    def test_coerces_severity_and_timezone(self):
        incident = Incident(18.9, 72.8, "theft", "high", "Fort", datetime(2025, 1, 1, 8, 0))
        assert incident.severity is Severity.HIGH
        assert incident.occurred_at.tzinfo == timezone.utc

    def test_aware_timestamp_converted_to_utc(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        incident = Incident(18.9, 72.8, "theft", "low", "Fort", datetime(2025, 1, 1, 13, 30, tzinfo=ist))
        assert incident.occurred_at == datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert incident.occurred_at.utcoffset() == timedelta(0)

    def test_severity_weights(self):
        assert [s.weight for s in (Severity.HIGH, Severity.MEDIUM, Severity.LOW)] == [3, 2, 1]

    @pytest.mark.parametrize("lat,lng,valid", [
        ("18.95", "72.83", True),
        (None, 72.83, False),
        (18.95, "east", False),
        (True, 72.83, False),
    ])
    def test_coordinates_coerced_to_float(self, make_incident, lat, lng, valid):
        incident = make_incident(lat=lat, lng=lng)
        assert isinstance(incident.latitude, float)
        assert isinstance(incident.longitude, float)
        assert incident.has_coords is valid

    def test_missing_coordinates_still_counted_in_aggregates(self, make_incident):
        result = classify_crimes([make_incident(), make_incident(lat=None)])
        assert result.clusters[0].count == 2
        assert result.clusters[0].spatial_dispersion == 0.0

    def test_severity_weights_read_only(self):
        with pytest.raises(TypeError):
            SEVERITY_WEIGHTS[Severity.LOW] = 5

    def test_to_dict_without_coordinates(self, make_incident):
        d = make_incident(lat=math.nan, incident_id="x1").to_dict()
        assert d["lat"] is None and d["lng"] is None
        assert d["id"] == "x1"
        assert d["timestamp"].endswith("+00:00")

    def test_severity_distribution(self, make_incident):
        incidents = [make_incident(severity=s) for s in ("high", "high", "low")]
        assert severity_distribution(incidents) == {"high": 2, "medium": 0, "low": 1}


class TestRiskZone:
    @pytest.mark.parametrize("raw,clamped", [(-5, 0.0), (42.5, 42.5), (130, 100.0)])
    def test_score_clamped(self, raw, clamped):
        assert RiskZone(name="Z", score=raw, incident_count=1, trend_percent=0, trend_direction="down").score == clamped

    @pytest.mark.parametrize("percent,text", [(12.5, "+12.5%"), (0, "0%"), (-40.0, "-40%")])
    def test_trend_text(self, percent, text):
        zone = RiskZone(name="Z", score=1, incident_count=1, trend_percent=percent, trend_direction="up")
        assert zone.trend == text
        assert zone.to_dict()["trend"] == text


class TestAnomaly:
    def test_to_dict(self, make_incident):
        anomaly = Anomaly(
            kind=AnomalyKind.TEMPORAL_ANOMALY,
            severity=RiskLevel.MEDIUM,
            score=60.0,
            description="late night",
            affected_incidents=[make_incident(), make_incident()],
            confidence=100,
            recommendation="patrol",
        )
        d = anomaly.to_dict()
        assert d["type"] == "temporal_anomaly"
        assert d["severity"] == "medium"
        assert d["affected_count"] == 2
        assert len(d["affected_incidents"]) == 2
