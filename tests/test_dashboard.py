"""Tests for dashboard composition, end to end over a small city."""

from datetime import datetime, timedelta, timezone

from analytics.dashboard import build_dashboard, calculate_metrics, weekly_trend
from analytics.risk import calculate_risk_zones
from clustering.hotspots import detect_hotspots
from core.demo import generate_demo_incidents

MONDAY = datetime(2025, 1, 13, 9, 0, tzinfo=timezone.utc)


class TestWeeklyTrend:
    def test_monday_first_headline_types(self, make_incident):
        incidents = [
            make_incident(crime_type="Theft", occurred_at=MONDAY),
            make_incident(crime_type="theft", occurred_at=MONDAY),
            make_incident(crime_type="burglary", occurred_at=MONDAY + timedelta(days=6)),
            make_incident(crime_type="fraud", occurred_at=MONDAY),
        ]
        points = weekly_trend(incidents)
        assert [p.day for p in points] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert points[0].theft == 2
        assert points[6].burglary == 1
        assert sum(p.theft + p.assault + p.vandalism + p.burglary for p in points) == 3


class TestMetrics:
    def test_metric_cards(self, city_scenario, now):
        zones = calculate_risk_zones(city_scenario, now=now)
        hotspots = detect_hotspots(city_scenario)
        metrics = calculate_metrics(city_scenario, zones, hotspots, [], now)
        by_title = {m.title: m for m in metrics}
        assert by_title["Total Incidents"].value == "50"
        assert by_title["Total Incidents"].subtext == "+100% vs last week"
        assert by_title["Crime Rate Change"].value == "+100%"
        assert by_title["High-Risk Zones"].value == "1"
        assert by_title["Active Hotspots"].value == "1"
        assert by_title["Active Hotspots"].subtext == "0 critical anomalies"

    def test_falling_rate(self, make_incident, now):
        incidents = [make_incident(occurred_at=now - timedelta(days=10)) for _ in range(4)]
        incidents.append(make_incident(occurred_at=now - timedelta(days=1)))
        metrics = calculate_metrics(incidents, [], [], [], now)
        assert metrics[1].value == "-75%"
        assert metrics[1].trend == "down"


class TestBuildDashboard:
    def test_city_scenario(self, city_scenario, now):
        dashboard = build_dashboard(city_scenario, now=now)

        assert [z.name for z in dashboard.risk_zones] == ["Zone A", "Zone B"]
        assert dashboard.risk_zones[0].rank == 1
        assert round(dashboard.risk_zones[0].score) == 87
        assert round(dashboard.risk_zones[1].score) == 27

        assert len(dashboard.hotspots) == 1
        hotspot = dashboard.hotspots[0]
        assert hotspot.member_count == 45
        assert hotspot.intensity == 95
        assert {i.zone for i in hotspot.incidents} == {"Zone A"}

        assert len(dashboard.anomalies) == 20
        assert all(a.affected_incidents[0].zone == "Zone A" for a in dashboard.anomalies)

        assert [c.crime_type for c in dashboard.classification.clusters] == ["assault", "theft"]
        assert dashboard.trend_analysis.prediction is not None
        assert len(dashboard.incidents) == 50

    def test_zone_limit(self, city_scenario, now):
        dashboard = build_dashboard(city_scenario, now=now, dashboard_zone_limit=1)
        assert [z.name for z in dashboard.risk_zones] == ["Zone A"]

    def test_to_dict_is_plain(self, city_scenario, now):
        d = build_dashboard(city_scenario, now=now).to_dict()
        assert set(d) == {
            "metrics", "risk_zones", "trend", "hotspots", "anomalies",
            "classification", "trend_analysis", "incidents",
        }
        assert d["hotspots"][0]["incident_count"] == 45
        assert d["risk_zones"][0]["name"] == "Zone A"

    def test_empty(self, now):
        dashboard = build_dashboard([], now=now)
        assert dashboard.risk_zones == []
        assert dashboard.hotspots == []
        assert dashboard.anomalies == []
        assert dashboard.metrics[0].value == "0"

    def test_demo_data(self, now):
        incidents = generate_demo_incidents(seed=7, now=now)
        assert len(incidents) == 174
        assert incidents == generate_demo_incidents(seed=7, now=now)
        dashboard = build_dashboard(incidents, now=now)
        assert dashboard.risk_zones
        assert all(now - timedelta(days=14) <= i.occurred_at <= now for i in incidents)
