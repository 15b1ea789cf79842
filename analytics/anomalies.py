"""
Anomaly detection: five independent z-score style detectors over one incident batch.

- volume: hourly incident counts far above the hourly mean
- severity: zones whose mean severity sits well above "medium"
- geographic: incidents with more than 10 others within 1 km
- temporal: late-night (22:00-05:00) day/hour buckets with more than 3 incidents
- crime type: drug/robbery/assault types whose count is far above the per-type mean
Results are merged, sorted by score (stable) and truncated.
"""

import logging
from types import MappingProxyType

from clustering.geo_proximity import neighbour_indices, spatial_incidents
from core.models import Anomaly, AnomalyKind, RiskLevel
from core.settings import DEFAULT_ANOMALY_LIMIT as DEFAULT_LIMIT
from core.stats import mean, round_half_up, sample_stddev, z_to_confidence

logger = logging.getLogger("crime_api.analytics.anomalies")

MIN_INCIDENTS = 5

VOLUME_MIN_BUCKETS = 5
VOLUME_Z = 2.0
SEVERITY_BASELINE = 2.0
SEVERITY_MIN_STDDEV = 0.5
SEVERITY_Z = 1.5
GEO_RADIUS_KM = 1.0
GEO_MIN_NEIGHBOURS = 10
GEO_AFFECTED_NEIGHBOURS = 5
NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 5
TEMPORAL_MIN_COUNT = 3
CRIME_TYPE_Z = 2.0
WATCHED_CRIME_TYPES = ("drug", "robbery", "assault")
AFFECTED_SAMPLE = 5

# Advisory text per anomaly kind. Built once, read-only.
RECOMMENDATIONS = MappingProxyType({
    AnomalyKind.VOLUME_SPIKE: "Increase patrol presence and investigation focus during peak hours",
    AnomalyKind.SEVERITY_SPIKE: "Deploy specialized units and increase investigative resources",
    AnomalyKind.GEOGRAPHIC_CLUSTER: "Investigate underlying cause of cluster (gang activity, event, etc.)",
    AnomalyKind.TEMPORAL_ANOMALY: "Increase nighttime patrol and surveillance in affected areas",
    AnomalyKind.CRIME_TYPE_SPIKE: "Launch targeted investigation into {crime_type} incidents. Consider organized crime involvement.",
})


def _hour_bucket(incident) -> int:
    """Whole hours since the UNIX epoch."""
    return int(incident.occurred_at.timestamp() // 3600)


def _z(value: float, avg: float, sd: float) -> float:
    return 0.0 if sd == 0 else (value - avg) / sd


def detect_volume_anomalies(incidents) -> list[Anomaly]:
    buckets: dict[int, list] = {}
    for incident in incidents:
        buckets.setdefault(_hour_bucket(incident), []).append(incident)
    counts = [len(v) for v in buckets.values()]
    if len(counts) < VOLUME_MIN_BUCKETS:
        return []

    avg = mean(counts)
    sd = sample_stddev(counts)
    out = []
    for members in buckets.values():
        z = _z(len(members), avg, sd)
        if z > VOLUME_Z:
            out.append(Anomaly(
                kind=AnomalyKind.VOLUME_SPIKE,
                severity=RiskLevel.HIGH,
                score=min(100.0, z * 20),
                description=f"Unusual spike in incidents: {len(members)} incidents vs average {int(round_half_up(avg))}",
                affected_incidents=members,
                confidence=z_to_confidence(z),
                recommendation=RECOMMENDATIONS[AnomalyKind.VOLUME_SPIKE],
            ))
    return out


def detect_severity_anomalies(incidents) -> list[Anomaly]:
    zones: dict[str, list] = {}
    for incident in incidents:
        zones.setdefault(incident.zone, []).append(incident)

    out = []
    for zone, members in zones.items():
        weights = [i.severity.weight for i in members]
        avg = mean(weights)
        if avg <= SEVERITY_BASELINE:
            continue
        z = (avg - SEVERITY_BASELINE) / max(sample_stddev(weights), SEVERITY_MIN_STDDEV)
        if z > SEVERITY_Z:
            out.append(Anomaly(
                kind=AnomalyKind.SEVERITY_SPIKE,
                severity=RiskLevel.CRITICAL,
                score=min(100.0, z * 25),
                description=f"{zone} shows unusually high crime severity (avg: {avg:.2f}/3)",
                affected_incidents=members,
                confidence=z_to_confidence(z),
                recommendation=RECOMMENDATIONS[AnomalyKind.SEVERITY_SPIKE],
            ))
    return out


def detect_geographic_anomalies(incidents) -> list[Anomaly]:
    """One anomaly per incident with more than 10 others strictly within 1 km. O(n^2)."""
    points = spatial_incidents(incidents)
    neighbours = neighbour_indices(points, GEO_RADIUS_KM, strict=True)
    out = []
    for incident, near in zip(points, neighbours):
        if len(near) <= GEO_MIN_NEIGHBOURS:
            continue
        z = (len(near) - 5) / 3
        out.append(Anomaly(
            kind=AnomalyKind.GEOGRAPHIC_CLUSTER,
            severity=RiskLevel.HIGH,
            score=min(100.0, z * 15),
            description=f"Unusual crime cluster detected near {incident.zone} ({len(near)} incidents within 1km)",
            affected_incidents=[incident] + [points[j] for j in near[:GEO_AFFECTED_NEIGHBOURS]],
            confidence=z_to_confidence(z),
            recommendation=RECOMMENDATIONS[AnomalyKind.GEOGRAPHIC_CLUSTER],
        ))
    return out


def _is_night(hour: int) -> bool:
    return hour >= NIGHT_START_HOUR or hour < NIGHT_END_HOUR


def detect_temporal_anomalies(incidents) -> list[Anomaly]:
    slots: dict[tuple[int, int], list] = {}
    for incident in incidents:
        ts = incident.occurred_at
        slots.setdefault(((ts.weekday() + 1) % 7, ts.hour), []).append(incident)

    out = []
    for (_, hour), members in slots.items():
        count = len(members)
        if not _is_night(hour) or count <= TEMPORAL_MIN_COUNT:
            continue
        out.append(Anomaly(
            kind=AnomalyKind.TEMPORAL_ANOMALY,
            severity=RiskLevel.MEDIUM,
            score=min(100.0, count * 15),
            description=f"Unusual late-night crime activity: {count} incidents between {hour}:00-{(hour + 1) % 24}:00",
            affected_incidents=members,
            confidence=min(100, 75 + min(25, count * 10)),
            recommendation=RECOMMENDATIONS[AnomalyKind.TEMPORAL_ANOMALY],
        ))
    return out


def detect_crime_type_anomalies(incidents) -> list[Anomaly]:
    types: dict[str, list] = {}
    for incident in incidents:
        types.setdefault(incident.type_key, []).append(incident)
    counts = [len(v) for v in types.values()]
    avg = mean(counts)
    sd = sample_stddev(counts)

    out = []
    for crime_type, members in types.items():
        z = _z(len(members), avg, sd)
        if z <= CRIME_TYPE_Z or not any(w in crime_type for w in WATCHED_CRIME_TYPES):
            continue
        out.append(Anomaly(
            kind=AnomalyKind.CRIME_TYPE_SPIKE,
            severity=RiskLevel.HIGH,
            score=min(100.0, z * 20),
            description=f"Unusual spike in {crime_type}: {len(members)} incidents vs average {int(round_half_up(avg))}",
            affected_incidents=members[:AFFECTED_SAMPLE],
            confidence=z_to_confidence(z),
            recommendation=RECOMMENDATIONS[AnomalyKind.CRIME_TYPE_SPIKE].format(crime_type=crime_type),
        ))
    return out


DETECTORS = (
    detect_volume_anomalies,
    detect_severity_anomalies,
    detect_geographic_anomalies,
    detect_temporal_anomalies,
    detect_crime_type_anomalies,
)


def detect_anomalies(incidents, limit: int = DEFAULT_LIMIT) -> list[Anomaly]:
    """All detectors over the batch, highest score first, at most `limit`. Fewer than 5 incidents -> []."""
    incidents = list(incidents)
    if len(incidents) < MIN_INCIDENTS:
        return []

    anomalies = []
    for detector in DETECTORS:
        found = detector(incidents)
        if found:
            logger.debug("%s: %d anomalies", detector.__name__, len(found))
        anomalies.extend(found)
    anomalies.sort(key=lambda a: a.score, reverse=True)
    return anomalies[:limit]
