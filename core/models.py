"""Incident input model and the derived analytic views (zones, hotspots, anomalies, classification)."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        """1/2/3 weighting used for mean-severity statistics."""
        return SEVERITY_WEIGHTS[self]


SEVERITY_WEIGHTS = MappingProxyType({Severity.HIGH: 3, Severity.MEDIUM: 2, Severity.LOW: 1})


def as_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_coordinate(value: Any) -> float:
    """Numeric coordinate or NaN; spatial operations filter NaN out."""
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


class RiskLevel(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnomalyKind(str, Enum):
    VOLUME_SPIKE = "volume_spike"
    SEVERITY_SPIKE = "severity_spike"
    GEOGRAPHIC_CLUSTER = "geographic_cluster"
    TEMPORAL_ANOMALY = "temporal_anomaly"
    CRIME_TYPE_SPIKE = "crime_type_spike"


@dataclass(frozen=True)
class Incident:
    latitude: float
    longitude: float
    crime_type: str
    severity: Severity
    zone: str
    occurred_at: datetime  # timezone-aware (UTC)
    incident_id: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        # frozen: coerce through object.__setattr__
        object.__setattr__(self, "latitude", to_coordinate(self.latitude))
        object.__setattr__(self, "longitude", to_coordinate(self.longitude))
        object.__setattr__(self, "severity", Severity(self.severity))
        object.__setattr__(self, "occurred_at", as_utc(self.occurred_at))

    @property
    def type_key(self) -> str:
        """Case-insensitive grouping key for crime_type."""
        return self.crime_type.strip().lower()

    @property
    def has_coords(self) -> bool:
        return math.isfinite(self.latitude) and math.isfinite(self.longitude)

    def to_dict(self):
        d = {
            "type": self.crime_type,
            "severity": self.severity.value,
            "zone": self.zone,
            "timestamp": self.occurred_at.isoformat(),
            "lat": round(self.latitude, 6) if self.has_coords else None,
            "lng": round(self.longitude, 6) if self.has_coords else None,
        }
        if self.incident_id is not None:
            d["id"] = self.incident_id
        if self.description is not None:
            d["description"] = self.description
        return d


def severity_distribution(incidents) -> dict[str, int]:
    """Counts of high/medium/low in a group of incidents."""
    counts = {s.value: 0 for s in Severity}
    for incident in incidents:
        counts[incident.severity.value] += 1
    return counts


@dataclass
class RiskZone:
    name: str
    score: float  # 0 - 100
    incident_count: int
    trend_percent: float
    trend_direction: str  # "up" | "down"
    top_crime_types: list = field(default_factory=list)
    time_ago: str = ""
    rank: int = 0

    def __post_init__(self):
        self.score = max(0.0, min(100.0, self.score))

    @property
    def trend(self) -> str:
        sign = "+" if self.trend_percent > 0 else ""
        return f"{sign}{self.trend_percent:g}%"

    def to_dict(self):
        return {
            "rank": self.rank,
            "name": self.name,
            "score": round(self.score, 1),
            "incidents": self.incident_count,
            "trend": self.trend,
            "trend_percent": self.trend_percent,
            "trend_direction": self.trend_direction,
            "time_ago": self.time_ago,
            "crime_types": list(self.top_crime_types),
        }


@dataclass
class HotspotCluster:
    center: tuple  # (lat, lng)
    incidents: list  # member Incidents, input order
    radius_km: float
    severity_distribution: dict
    intensity: int = 0  # 0 - 100
    rank: int = 0

    @property
    def member_count(self) -> int:
        return len(self.incidents)

    def to_dict(self):
        return {
            "rank": self.rank,
            "center": {"lat": round(self.center[0], 6), "lng": round(self.center[1], 6)},
            "incident_count": self.member_count,
            "radius_km": self.radius_km,
            "severity_distribution": dict(self.severity_distribution),
            "intensity": self.intensity,
            "incidents": [i.to_dict() for i in self.incidents],
        }


@dataclass
class Anomaly:
    kind: AnomalyKind
    severity: RiskLevel
    score: float  # 0 - 100
    description: str
    affected_incidents: list
    confidence: int  # 50 - 100
    recommendation: str

    def to_dict(self):
        return {
            "type": self.kind.value,
            "severity": self.severity.value,
            "score": round(self.score, 2),
            "description": self.description,
            "confidence": self.confidence,
            "recommendation": self.recommendation,
            "affected_count": len(self.affected_incidents),
            "affected_incidents": [i.to_dict() for i in self.affected_incidents],
        }


@dataclass
class CrimeCluster:
    crime_type: str
    count: int
    percent_of_total: float
    avg_severity: float  # 0 - 1
    severity_distribution: dict
    spatial_dispersion: float  # 0 = concentrated, 1 = dispersed
    top_zones: list  # [(zone, count), ...] up to 3
    risk_level: RiskLevel

    def to_dict(self):
        return {
            "crime_type": self.crime_type,
            "count": self.count,
            "percent_of_total": round(self.percent_of_total, 2),
            "avg_severity": self.avg_severity,
            "severity_distribution": dict(self.severity_distribution),
            "spatial_dispersion": round(self.spatial_dispersion, 4),
            "top_zones": [{"zone": z, "count": c} for z, c in self.top_zones],
            "risk_level": self.risk_level.value,
        }


@dataclass
class CrimeClassification:
    clusters: list = field(default_factory=list)
    crime_type_stats: dict = field(default_factory=dict)  # type -> {"count", "avg_severity"}
    top_crime_types: list = field(default_factory=list)  # [{"type", "count", "percentage"}]

    def to_dict(self):
        return {
            "clusters": [c.to_dict() for c in self.clusters],
            "crime_type_stats": {k: dict(v) for k, v in self.crime_type_stats.items()},
            "top_crime_types": [dict(t) for t in self.top_crime_types],
        }


@dataclass
class DayStats:
    count: int
    avg_severity: float
    peak_hours: list = field(default_factory=list)

    def to_dict(self):
        return {
            "count": self.count,
            "avg_severity": round(self.avg_severity, 4),
            "peak_hours": list(self.peak_hours),
        }


@dataclass
class TrendPrediction:
    trend: str  # "increasing" | "decreasing" | "stable"
    confidence: int  # R^2 * 100
    expected_change: float

    def to_dict(self):
        return {"trend": self.trend, "confidence": self.confidence, "expected_change": self.expected_change}


@dataclass
class TrendAnalysis:
    by_day: dict = field(default_factory=dict)  # day name -> DayStats, Sunday first
    prediction: Optional[TrendPrediction] = None
    seasonality_factor: float = 1.0

    def to_dict(self):
        return {
            "by_day": {day: s.to_dict() for day, s in self.by_day.items()},
            "prediction": self.prediction.to_dict() if self.prediction else None,
            "seasonality_factor": self.seasonality_factor,
        }


@dataclass
class Metric:
    title: str
    value: str
    subtext: str
    trend: Optional[str] = None  # "up" | "down"

    def to_dict(self):
        d = {"title": self.title, "value": self.value, "subtext": self.subtext}
        if self.trend is not None:
            d["trend"] = self.trend
        return d


@dataclass
class TrendPoint:
    day: str
    theft: int = 0
    assault: int = 0
    vandalism: int = 0
    burglary: int = 0

    def to_dict(self):
        return {
            "day": self.day,
            "theft": self.theft,
            "assault": self.assault,
            "vandalism": self.vandalism,
            "burglary": self.burglary,
        }
