"""Statistical analytics: zone risk, crime classification and trend, anomalies, dashboard."""

from analytics.risk import calculate_risk_zones
from analytics.classifier import classify_crimes, analyze_trend
from analytics.anomalies import detect_anomalies
from analytics.dashboard import build_dashboard

__all__ = [
    "calculate_risk_zones",
    "classify_crimes",
    "analyze_trend",
    "detect_anomalies",
    "build_dashboard",
]
