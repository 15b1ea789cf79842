"""
Environment-driven settings for the API and scripts (a .env file is loaded at start-up).

- HOTSPOT_EPS_KM: neighbourhood radius for hotspot clustering (default 1.5).
- HOTSPOT_MIN_POINTS: neighbours needed to seed a hotspot (default 3).
- RISK_ZONE_LIMIT: size of the full ranked zone list (default 10).
- DASHBOARD_ZONE_LIMIT: zones shown on the dashboard (default 3).
- ANOMALY_LIMIT: max anomalies returned (default 20).
- HIGH_RISK_SCORE: zone score counted as high-risk (default 80).
- DEMO_SEED: seed for the demo incident set (default 42).
"""

import os

DEFAULT_EPS_KM = 1.5
DEFAULT_MIN_POINTS = 3
DEFAULT_RISK_ZONE_LIMIT = 10
DEFAULT_DASHBOARD_ZONE_LIMIT = 3
DEFAULT_ANOMALY_LIMIT = 20
DEFAULT_HIGH_RISK_SCORE = 80.0
DEFAULT_DEMO_SEED = 42


def _env_float(name: str, default: float, lo: float, hi: float) -> float:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return default
    try:
        return max(lo, min(hi, float(v.strip())))
    except ValueError:
        return default


def _env_int(name: str, default: int, lo: int, hi: int) -> int:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return default
    try:
        return max(lo, min(hi, int(v.strip())))
    except ValueError:
        return default


def hotspot_eps_km() -> float:
    return _env_float("HOTSPOT_EPS_KM", DEFAULT_EPS_KM, 0.01, 100.0)


def hotspot_min_points() -> int:
    return _env_int("HOTSPOT_MIN_POINTS", DEFAULT_MIN_POINTS, 1, 1000)


def risk_zone_limit() -> int:
    return _env_int("RISK_ZONE_LIMIT", DEFAULT_RISK_ZONE_LIMIT, 1, 1000)


def dashboard_zone_limit() -> int:
    return _env_int("DASHBOARD_ZONE_LIMIT", DEFAULT_DASHBOARD_ZONE_LIMIT, 1, 100)


def anomaly_limit() -> int:
    return _env_int("ANOMALY_LIMIT", DEFAULT_ANOMALY_LIMIT, 1, 1000)


def high_risk_score() -> float:
    return _env_float("HIGH_RISK_SCORE", DEFAULT_HIGH_RISK_SCORE, 0.0, 100.0)


def demo_seed() -> int:
    return _env_int("DEMO_SEED", DEFAULT_DEMO_SEED, 0, 2**31 - 1)
