"""
Crime classification: per-type clusters (severity, dispersion, top zones, risk level) and
day-of-week trend analysis with a least-squares trend prediction.
"""

import logging
import math
from types import MappingProxyType

from core.models import (
    CrimeClassification,
    CrimeCluster,
    DayStats,
    RiskLevel,
    Severity,
    TrendAnalysis,
    TrendPrediction,
    severity_distribution,
)
from core.stats import mean, round_half_up, sample_stddev

logger = logging.getLogger("crime_api.analytics.classifier")

# Severity weight (0-10) per known crime type. Built once, read-only.
CRIME_SEVERITY_WEIGHTS = MappingProxyType({
    "drug-related": 9,
    "robbery": 9,
    "homicide": 10,
    "assault": 8,
    "burglary": 7,
    "theft": 5,
    "vandalism": 3,
    "fraud": 6,
    "cybercrime": 6,
    "kidnapping": 10,
})

# Fallback weight from the incident's own severity label when the type is unknown.
LABEL_SEVERITY_WEIGHTS = MappingProxyType({Severity.HIGH: 7, Severity.MEDIUM: 5, Severity.LOW: 3})

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# Empirical normalizers for planar (degree) dispersion
MAX_EXPECTED_STDDEV = 0.5
MAX_EXPECTED_MEAN = 0.3

RISK_THRESHOLDS = (
    (0.75, RiskLevel.CRITICAL),
    (0.5, RiskLevel.HIGH),
    (0.25, RiskLevel.MEDIUM),
)
STABLE_SLOPE = 0.5
TOP_CRIME_TYPES = 5


def day_index(dt) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (dt.weekday() + 1) % 7


def incident_weight(incident) -> int:
    return CRIME_SEVERITY_WEIGHTS.get(incident.type_key, LABEL_SEVERITY_WEIGHTS[incident.severity])


def spatial_dispersion(incidents) -> float:
    """0 (concentrated) .. 1 (dispersed), from planar offsets to the centroid in degrees."""
    points = [(i.latitude, i.longitude) for i in incidents if i.has_coords]
    if len(points) < 2:
        return 0.0
    center_lat = mean(p[0] for p in points)
    center_lng = mean(p[1] for p in points)
    distances = [math.hypot(lat - center_lat, lng - center_lng) for lat, lng in points]
    sd = sample_stddev(distances)
    avg = mean(distances)
    return min(1.0, (sd / MAX_EXPECTED_STDDEV) * 0.5 + (avg / MAX_EXPECTED_MEAN) * 0.5)


def top_zones(incidents, n: int = 3) -> list[tuple[str, int]]:
    counts: dict[str, int] = {}
    for i in incidents:
        counts[i.zone] = counts.get(i.zone, 0) + 1
    return sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:n]


def risk_level(weights: list, count: int) -> RiskLevel:
    combined = (mean(weights) / 10) * 0.6 + min(1.0, count / 100) * 0.4
    for threshold, level in RISK_THRESHOLDS:
        if combined >= threshold:
            return level
    return RiskLevel.LOW


def classify_crimes(incidents) -> CrimeClassification:
    """Group incidents by crime type (case-insensitive), most frequent first."""
    incidents = list(incidents)
    if not incidents:
        return CrimeClassification()

    groups: dict[str, list] = {}
    for incident in incidents:
        groups.setdefault(incident.type_key, []).append(incident)

    clusters = []
    for crime_type, members in groups.items():
        weights = [incident_weight(i) for i in members]
        clusters.append(CrimeCluster(
            crime_type=crime_type,
            count=len(members),
            percent_of_total=(len(members) / len(incidents)) * 100,
            avg_severity=round_half_up(mean(weights) / 10, 2),
            severity_distribution=severity_distribution(members),
            spatial_dispersion=spatial_dispersion(members),
            top_zones=top_zones(members),
            risk_level=risk_level(weights, len(members)),
        ))
    clusters.sort(key=lambda c: c.count, reverse=True)

    logger.debug("classifier: %d crime types from %d incidents", len(clusters), len(incidents))
    return CrimeClassification(
        clusters=clusters,
        crime_type_stats={c.crime_type: {"count": c.count, "avg_severity": c.avg_severity} for c in clusters},
        top_crime_types=[
            {"type": c.crime_type, "count": c.count, "percentage": c.percent_of_total}
            for c in clusters[:TOP_CRIME_TYPES]
        ],
    )


def peak_hours(incidents, n: int = 3) -> list[str]:
    counts: dict[int, int] = {}
    for i in incidents:
        counts[i.occurred_at.hour] = counts.get(i.occurred_at.hour, 0) + 1
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:n]
    return [f"{h}:00-{(h + 1) % 24}:00" for h, _ in ranked]


def predict_trend(counts: list) -> TrendPrediction:
    """Ordinary least squares of count against index; confidence is R^2 as a percentage."""
    n = len(counts)
    if n < 2:
        return TrendPrediction(trend="stable", confidence=0, expected_change=0)

    xs = list(range(n))
    x_mean = mean(xs)
    y_mean = mean(counts)
    numerator = sum((x - x_mean) * (y - y_mean) for x, y in zip(xs, counts))
    denominator = sum((x - x_mean) ** 2 for x in xs)
    slope = numerator / denominator if denominator else 0.0

    if abs(slope) < STABLE_SLOPE:
        trend = "stable"
    else:
        trend = "increasing" if slope > 0 else "decreasing"

    predictions = [y_mean + slope * (x - x_mean) for x in xs]
    ss_res = sum((y - p) ** 2 for y, p in zip(counts, predictions))
    ss_tot = sum((y - y_mean) ** 2 for y in counts)
    r_squared = 1 - ss_res / ss_tot if ss_tot else 0.0

    return TrendPrediction(
        trend=trend,
        confidence=int(round_half_up(r_squared * 100)),
        expected_change=round_half_up(slope, 1),
    )


def analyze_trend(incidents) -> TrendAnalysis:
    """Per-weekday stats (Sunday first), linear trend over the week, and seasonality (CV of daily counts)."""
    incidents = list(incidents)
    if not incidents:
        return TrendAnalysis(by_day={}, prediction=None, seasonality_factor=1.0)

    by_weekday: list[list] = [[] for _ in DAY_NAMES]
    for incident in incidents:
        by_weekday[day_index(incident.occurred_at)].append(incident)

    by_day = {}
    counts = []
    for name, members in zip(DAY_NAMES, by_weekday):
        counts.append(len(members))
        by_day[name] = DayStats(
            count=len(members),
            avg_severity=mean(i.severity.weight for i in members) if members else 0.0,
            peak_hours=peak_hours(members),
        )

    avg = mean(counts)
    seasonality = sample_stddev(counts) / avg if avg > 0 else 1.0
    return TrendAnalysis(
        by_day=by_day,
        prediction=predict_trend(counts),
        seasonality_factor=round_half_up(seasonality, 2),
    )
