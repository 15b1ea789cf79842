"""Deterministic demo city data (Mumbai zones), used when no incidents have been ingested."""

import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.models import Incident, Severity
from core.normalize import normalize_incidents

# zone -> (base_lat, base_lng, spread_deg, count)
DEMO_ZONES = {
    "Fort District": (18.9547, 72.8290, 0.02, 45),
    "Marine Drive": (18.9432, 72.8236, 0.02, 28),
    "Eastern Suburbs": (19.0596, 72.8295, 0.025, 52),
    "Northern Suburbs": (19.1136, 72.8697, 0.025, 18),
    "Bandra-Worli": (19.0596, 72.8295, 0.02, 31),
}

DEMO_CRIME_TYPES = ("theft", "assault", "vandalism", "burglary", "robbery", "drug-related")
DEMO_SEVERITIES = (Severity.HIGH, Severity.MEDIUM, Severity.LOW)
DEMO_DAYS = 14


def generate_demo_raw(seed: int = 42, now: Optional[datetime] = None) -> list[dict]:
    """Raw records (as the store would hold them), spread over the last two weeks."""
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    records = []
    for zone, (base_lat, base_lng, spread, count) in DEMO_ZONES.items():
        for _ in range(count):
            occurred = now - timedelta(minutes=rng.randrange(DEMO_DAYS * 24 * 60))
            records.append({
                "id": f"incident_{len(records) + 1}",
                "lat": round(base_lat + (rng.random() - 0.5) * spread, 6),
                "lng": round(base_lng + (rng.random() - 0.5) * spread, 6),
                "type": rng.choice(DEMO_CRIME_TYPES),
                "severity": rng.choice(DEMO_SEVERITIES).value,
                "zone": zone,
                "timestamp": occurred.strftime("%Y-%m-%dT%H:%M:%SZ"),
            })
    return records


def generate_demo_incidents(seed: int = 42, now: Optional[datetime] = None) -> list[Incident]:
    now = now or datetime.now(timezone.utc)
    return normalize_incidents(generate_demo_raw(seed=seed, now=now), now=now)
