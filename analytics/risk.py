"""
Zone risk scoring: weighted features per zone, week-over-week trend, ranked list.

Score (0-100) = severity (<= 40) + density (<= 30) + diversity (<= 15) + recency (<= 15):
- severity: share of high-severity incidents * 40
- density: zone share of all incidents * 100, capped at 30
- diversity: distinct crime types * 2, capped at 15
- recency: share of incidents in the last 7 days * 30, capped at 15
Ties in score keep the order in which zones were first seen.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.models import RiskZone, Severity, as_utc
from core.settings import DEFAULT_RISK_ZONE_LIMIT as DEFAULT_ZONE_LIMIT
from core.stats import round_half_up

logger = logging.getLogger("crime_api.analytics.risk")

RECENT_WINDOW = timedelta(days=7)


@dataclass
class _ZoneStats:
    incidents: list = field(default_factory=list)
    high: int = 0
    medium: int = 0
    low: int = 0
    crime_types: dict = field(default_factory=dict)  # type -> count, first-seen order
    timestamps: list = field(default_factory=list)

    def add(self, incident) -> None:
        self.incidents.append(incident)
        self.timestamps.append(incident.occurred_at)
        if incident.severity is Severity.HIGH:
            self.high += 1
        elif incident.severity is Severity.MEDIUM:
            self.medium += 1
        else:
            self.low += 1
        key = incident.type_key
        self.crime_types[key] = self.crime_types.get(key, 0) + 1


def format_time_ago(then: datetime, now: datetime) -> str:
    minutes = int((now - then).total_seconds() // 60)
    if minutes < 60:
        return f"{minutes} mins ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} hours ago"
    return f"{hours // 24} days ago"


def recency_score(timestamps: list, now: datetime) -> float:
    """0-15: share of timestamps no older than 7 days (future timestamps count as recent)."""
    if not timestamps:
        return 0.0
    recent = sum(1 for ts in timestamps if now - ts <= RECENT_WINDOW)
    return min(15.0, (recent / len(timestamps)) * 30)


def week_over_week(timestamps: list, now: datetime) -> float:
    """Percent change, last 7 days vs the 7 before; windows are inclusive at both ends."""
    if len(timestamps) < 2:
        return 0
    one_week_ago = now - RECENT_WINDOW
    two_weeks_ago = now - 2 * RECENT_WINDOW
    week1 = sum(1 for ts in timestamps if one_week_ago <= ts <= now)
    week2 = sum(1 for ts in timestamps if two_weeks_ago <= ts <= one_week_ago)
    if week2 == 0:
        return 100 if week1 > 0 else 0
    return round_half_up(((week1 - week2) / week2) * 100, 1)


def risk_score(stats: _ZoneStats, total_incidents: int, now: datetime) -> float:
    count = len(stats.incidents)
    if count == 0 or total_incidents == 0:
        return 0.0
    severity = min(40.0, (stats.high / count) * 40)
    density = min(30.0, (count / total_incidents) * 100)
    diversity = min(15.0, len(stats.crime_types) * 2)
    recency = recency_score(stats.timestamps, now)
    return max(0.0, min(100.0, severity + density + diversity + recency))


def calculate_risk_zones(incidents, limit: Optional[int] = DEFAULT_ZONE_LIMIT, now: Optional[datetime] = None) -> list[RiskZone]:
    """Rank zones by risk score (descending, dense 1-based rank) and return the top `limit`."""
    incidents = list(incidents)
    if not incidents:
        return []
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)

    zone_map: dict[str, _ZoneStats] = {}
    for incident in incidents:
        zone_map.setdefault(incident.zone, _ZoneStats()).add(incident)

    zones = []
    for name, stats in zone_map.items():
        trend = week_over_week(stats.timestamps, now)
        top_types = sorted(stats.crime_types.items(), key=lambda kv: kv[1], reverse=True)[:3]
        zones.append(RiskZone(
            name=name,
            score=risk_score(stats, len(incidents), now),
            incident_count=len(stats.incidents),
            trend_percent=trend,
            trend_direction="up" if trend > 0 else "down",
            top_crime_types=[t for t, _ in top_types],
            time_ago=format_time_ago(stats.timestamps[0], now),
        ))

    # stable sort: equal scores stay in first-seen zone order
    zones.sort(key=lambda z: z.score, reverse=True)
    for rank, zone in enumerate(zones, start=1):
        zone.rank = rank

    logger.debug("risk: %d zones scored from %d incidents", len(zones), len(incidents))
    return zones[:limit] if limit is not None else zones
