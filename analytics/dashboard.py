"""Dashboard composition: summary metrics plus every analytic view over one incident batch."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from analytics.anomalies import detect_anomalies
from analytics.classifier import analyze_trend, classify_crimes
from analytics.risk import calculate_risk_zones, week_over_week
from clustering.hotspots import detect_hotspots
from core.models import (
    CrimeClassification,
    Metric,
    RiskLevel,
    TrendAnalysis,
    TrendPoint,
    as_utc,
)
from core.settings import (
    DEFAULT_ANOMALY_LIMIT,
    DEFAULT_DASHBOARD_ZONE_LIMIT,
    DEFAULT_EPS_KM,
    DEFAULT_HIGH_RISK_SCORE,
    DEFAULT_MIN_POINTS,
    DEFAULT_RISK_ZONE_LIMIT,
)

logger = logging.getLogger("crime_api.analytics.dashboard")

TREND_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
TREND_CRIME_TYPES = ("theft", "assault", "vandalism", "burglary")


@dataclass
class Dashboard:
    metrics: list = field(default_factory=list)
    risk_zones: list = field(default_factory=list)
    trend: list = field(default_factory=list)
    hotspots: list = field(default_factory=list)
    anomalies: list = field(default_factory=list)
    classification: CrimeClassification = field(default_factory=CrimeClassification)
    trend_analysis: TrendAnalysis = field(default_factory=TrendAnalysis)
    incidents: list = field(default_factory=list)

    def to_dict(self):
        return {
            "metrics": [m.to_dict() for m in self.metrics],
            "risk_zones": [z.to_dict() for z in self.risk_zones],
            "trend": [p.to_dict() for p in self.trend],
            "hotspots": [h.to_dict() for h in self.hotspots],
            "anomalies": [a.to_dict() for a in self.anomalies],
            "classification": self.classification.to_dict(),
            "trend_analysis": self.trend_analysis.to_dict(),
            "incidents": [i.to_dict() for i in self.incidents],
        }


def weekly_trend(incidents) -> list[TrendPoint]:
    """Counts of the four headline crime types per weekday, Monday first."""
    points = [TrendPoint(day=d) for d in TREND_DAYS]
    for incident in incidents:
        key = incident.type_key
        if key in TREND_CRIME_TYPES:
            point = points[incident.occurred_at.weekday()]
            setattr(point, key, getattr(point, key) + 1)
    return points


def _signed_percent(value: float) -> str:
    return f"{'+' if value > 0 else ''}{value:g}%"


def calculate_metrics(incidents, zones, hotspots, anomalies, now: datetime, high_risk_score: float = DEFAULT_HIGH_RISK_SCORE) -> list[Metric]:
    change = week_over_week([i.occurred_at for i in incidents], now)
    high_risk = sum(1 for z in zones if z.score >= high_risk_score)
    critical = sum(1 for a in anomalies if a.severity is RiskLevel.CRITICAL)
    return [
        Metric(
            title="Total Incidents",
            value=str(len(incidents)),
            subtext=f"{_signed_percent(change)} vs last week",
            trend="up" if change > 0 else "down",
        ),
        Metric(
            title="Crime Rate Change",
            value=_signed_percent(change),
            subtext="vs last week",
            trend="down" if change < 0 else "up",
        ),
        Metric(
            title="High-Risk Zones",
            value=str(high_risk),
            subtext=f"of {len(zones)} zones scored",
            trend="up" if high_risk else None,
        ),
        Metric(
            title="Active Hotspots",
            value=str(len(hotspots)),
            subtext=f"{critical} critical anomalies",
        ),
    ]


def build_dashboard(
    incidents,
    *,
    now: Optional[datetime] = None,
    eps_km: float = DEFAULT_EPS_KM,
    min_points: int = DEFAULT_MIN_POINTS,
    zone_limit: int = DEFAULT_RISK_ZONE_LIMIT,
    dashboard_zone_limit: int = DEFAULT_DASHBOARD_ZONE_LIMIT,
    anomaly_limit: int = DEFAULT_ANOMALY_LIMIT,
    high_risk_score: float = DEFAULT_HIGH_RISK_SCORE,
) -> Dashboard:
    """Run every analyzer over the same batch; analyzers share nothing but the input."""
    incidents = list(incidents)
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)

    zones = calculate_risk_zones(incidents, limit=zone_limit, now=now)
    hotspots = detect_hotspots(incidents, eps_km=eps_km, min_points=min_points)
    anomalies = detect_anomalies(incidents, limit=anomaly_limit)

    logger.info("dashboard built incidents=%d zones=%d hotspots=%d anomalies=%d",
                len(incidents), len(zones), len(hotspots), len(anomalies))
    return Dashboard(
        metrics=calculate_metrics(incidents, zones, hotspots, anomalies, now, high_risk_score=high_risk_score),
        risk_zones=zones[:dashboard_zone_limit],
        trend=weekly_trend(incidents),
        hotspots=hotspots,
        anomalies=anomalies,
        classification=classify_crimes(incidents),
        trend_analysis=analyze_trend(incidents),
        incidents=incidents,
    )
