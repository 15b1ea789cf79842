"""Ingestion: turn raw incident records (store documents, API payloads) into Incident objects."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from core.models import Incident, Severity, as_utc, to_coordinate

logger = logging.getLogger("crime_api.core.normalize")


def _first(raw: dict, *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept datetime, ISO 8601 (with or without Z) or UNIX seconds/ms. Returns aware UTC or None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        if ts > 1e12:  # milliseconds
            ts /= 1000.0
        try:
            return datetime.fromtimestamp(ts, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    try:
        s = str(value).strip().replace("Z", "+00:00")
        return as_utc(datetime.fromisoformat(s))
    except ValueError:
        return None


def _parse_clock(value: Any) -> Optional[tuple[int, int, int]]:
    parts = str(value).strip().split(":")
    try:
        h = int(parts[0])
    except ValueError:
        return None
    nums = []
    for p in parts[1:3]:
        try:
            nums.append(int(p))
        except ValueError:
            nums.append(0)
    while len(nums) < 2:
        nums.append(0)
    if not (0 <= h < 24 and 0 <= nums[0] < 60 and 0 <= nums[1] < 60):
        return None
    return h, nums[0], nums[1]


def _resolve_timestamp(raw: dict, now: datetime) -> datetime:
    if raw.get("date"):
        day = parse_timestamp(raw["date"])
        if day is not None:
            clock = _parse_clock(raw["time"]) if isinstance(raw.get("time"), str) else None
            if clock is not None:
                day = day.replace(hour=clock[0], minute=clock[1], second=clock[2], microsecond=0)
            return day
    ts = parse_timestamp(_first(raw, "timestamp", "occurred_at"))
    return ts if ts is not None else now


def _resolve_severity(value: Any) -> Severity:
    try:
        return Severity(str(value).strip().lower())
    except ValueError:
        return Severity.LOW


def normalize_incident(raw: dict, now: Optional[datetime] = None) -> Incident:
    """
    Build an Incident from a raw record, accepting the aliases the data source uses:
    lat/latitude, lng/lon/long/longitude, type/crime_type, severity/level, zone/area/city,
    date (+ time) or timestamp. Missing timestamp defaults to now.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"incident record must be a mapping, got {type(raw).__name__}")
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)

    incident_id = _first(raw, "_id", "id")
    crime_type = _first(raw, "type", "crime_type")
    description = _first(raw, "crime_description", "description")
    return Incident(
        latitude=to_coordinate(_first(raw, "lat", "latitude")),
        longitude=to_coordinate(_first(raw, "lng", "lon", "long", "longitude")),
        crime_type=str(crime_type).strip() if crime_type is not None else "unknown",
        severity=_resolve_severity(_first(raw, "severity", "level") or "low"),
        zone=str(_first(raw, "zone", "area", "city") or "Unknown"),
        occurred_at=_resolve_timestamp(raw, now),
        incident_id=str(incident_id) if incident_id is not None else None,
        description=str(description) if description is not None else None,
    )


def normalize_incidents(raws, now: Optional[datetime] = None) -> list[Incident]:
    """Normalize a batch with one shared 'now' so defaulted timestamps agree."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    out = [normalize_incident(r, now=now) for r in raws]
    missing = sum(1 for i in out if not i.has_coords)
    if missing:
        logger.debug("normalized %d incidents, %d without usable coordinates", len(out), missing)
    return out
