"""Tests for environment-driven settings."""

from core import settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("HOTSPOT_EPS_KM", "HOTSPOT_MIN_POINTS", "RISK_ZONE_LIMIT", "ANOMALY_LIMIT", "HIGH_RISK_SCORE"):
            monkeypatch.delenv(name, raising=False)
        assert settings.hotspot_eps_km() == 1.5
        assert settings.hotspot_min_points() == 3
        assert settings.risk_zone_limit() == 10
        assert settings.anomaly_limit() == 20
        assert settings.high_risk_score() == 80.0

    def test_override(self, monkeypatch):
        monkeypatch.setenv("HOTSPOT_EPS_KM", "0.75")
        monkeypatch.setenv("DASHBOARD_ZONE_LIMIT", " 5 ")
        assert settings.hotspot_eps_km() == 0.75
        assert settings.dashboard_zone_limit() == 5

    def test_invalid_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("HOTSPOT_MIN_POINTS", "many")
        monkeypatch.setenv("DEMO_SEED", "")
        assert settings.hotspot_min_points() == 3
        assert settings.demo_seed() == 42

    def test_clamped(self, monkeypatch):
        monkeypatch.setenv("HIGH_RISK_SCORE", "250")
        monkeypatch.setenv("ANOMALY_LIMIT", "0")
        assert settings.high_risk_score() == 100.0
        assert settings.anomaly_limit() == 1
