"""Tests for density-based hotspot detection."""

import math
from datetime import timedelta

import pytest

from clustering.hotspots import detect_hotspots


def _ids(cluster):
    return {i.incident_id for i in cluster.incidents}


class TestDetectHotspots:
    def test_identical_location_forms_one_cluster(self, make_incident):
        severities = ["high", "high", "low", "low", "low"]
        incidents = [make_incident(severity=s, incident_id=str(n)) for n, s in enumerate(severities)]
        clusters = detect_hotspots(incidents)
        assert len(clusters) == 1
        c = clusters[0]
        assert c.member_count == 5
        assert c.radius_km == 0.0
        assert c.severity_distribution == {"high": 2, "medium": 0, "low": 3}
        # density 5/50*50 = 5, severity 2/5*50 = 20
        assert c.intensity == 25
        assert c.rank == 1

    def test_min_points_identical_incidents_cluster(self, make_incident):
        clusters = detect_hotspots([make_incident() for _ in range(3)], min_points=3)
        assert len(clusters) == 1
        assert clusters[0].member_count == 3

    def test_fewer_than_min_points_is_empty(self, make_incident):
        assert detect_hotspots([make_incident(), make_incident()]) == []
        assert detect_hotspots([]) == []

    def test_isolated_incidents_are_noise(self, make_incident):
        incidents = [make_incident(lat=18.0 + n * 0.5) for n in range(6)]
        assert detect_hotspots(incidents) == []

    def test_all_high_intensity_caps(self, make_incident):
        incidents = [make_incident(severity="high") for _ in range(60)]
        clusters = detect_hotspots(incidents)
        assert clusters[0].intensity == 100

    def test_sorted_by_size_and_ranked(self, make_incident):
        small = [make_incident(lat=18.95, incident_id=f"s{n}") for n in range(3)]
        big = [make_incident(lat=19.20, incident_id=f"b{n}") for n in range(6)]
        clusters = detect_hotspots(small + big)
        assert [c.member_count for c in clusters] == [6, 3]
        assert [c.rank for c in clusters] == [1, 2]
        assert clusters[0].center[0] == pytest.approx(19.20)

    def test_chain_is_density_reachable(self, make_incident):
        # points 1 km apart along a meridian: each neighbours the next within 1.5 km
        step = 1.0 / 111.19
        incidents = [make_incident(lat=18.9 + n * step, incident_id=str(n)) for n in range(8)]
        clusters = detect_hotspots(incidents)
        assert len(clusters) == 1
        assert clusters[0].member_count == 8
        assert clusters[0].radius_km > 1.0

    def test_membership_invariant_under_permutation(self, make_incident, now):
        group_a = [make_incident(lat=18.95 + n * 0.001, incident_id=f"a{n}") for n in range(5)]
        group_b = [make_incident(lat=19.30 + n * 0.001, incident_id=f"b{n}") for n in range(4)]
        noise = [make_incident(lat=20.0, incident_id="noise")]
        forward = detect_hotspots(group_a + noise + group_b)
        backward = detect_hotspots(list(reversed(group_a + noise + group_b)))
        assert sorted(map(sorted, map(_ids, forward))) == sorted(map(sorted, map(_ids, backward)))
        assert all("noise" not in _ids(c) for c in forward)

    def test_invalid_coordinates_are_skipped(self, make_incident):
        incidents = [make_incident() for _ in range(4)] + [make_incident(lat=math.nan), make_incident(lng=math.nan)]
        clusters = detect_hotspots(incidents)
        assert len(clusters) == 1
        assert clusters[0].member_count == 4

    def test_idempotent(self, make_incident, now):
        incidents = [make_incident(lat=18.95 + n * 0.002, occurred_at=now - timedelta(hours=n)) for n in range(10)]
        first = [c.to_dict() for c in detect_hotspots(incidents)]
        second = [c.to_dict() for c in detect_hotspots(incidents)]
        assert first == second

    def test_none_and_numeric_string_coordinates(self, make_incident):
        strings = [make_incident(lat="18.95", lng="72.83") for _ in range(3)]
        missing = [make_incident(lat=None), make_incident(lng=None)]
        clusters = detect_hotspots(strings + missing)
        assert len(clusters) == 1
        assert clusters[0].member_count == 3
        assert clusters[0].center == (pytest.approx(18.95), pytest.approx(72.83))
