"""
FastAPI backend: ingest incident records, serve risk zones, hotspots, anomalies and trends.
Every response is a fresh batch computation over the ingested incidents; nothing computed is stored.
"""

import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from analytics.anomalies import detect_anomalies
from analytics.classifier import analyze_trend, classify_crimes
from analytics.dashboard import build_dashboard
from analytics.risk import calculate_risk_zones
from clustering.hotspots import detect_hotspots
from core import settings
from core.demo import generate_demo_incidents
from core.models import Incident
from core.normalize import normalize_incidents

load_dotenv(override=True)

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("crime_api")

# -----------------------------------------------------------------------------
# Store (in-memory raw incidents only)
# -----------------------------------------------------------------------------
incidents: list[Incident] = []


def _working_set() -> tuple[list[Incident], str]:
    """Ingested incidents, or the demo city set when nothing has been ingested yet."""
    if incidents:
        return list(incidents), "store"
    logger.info("no incidents ingested; serving demo set")
    return generate_demo_incidents(seed=settings.demo_seed()), "demo"


app = FastAPI(title="Crime Analytics API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------------------------------------------------------
# Request/response models
# -----------------------------------------------------------------------------
class IngestRequest(BaseModel):
    incidents: list[dict]


class IngestResponse(BaseModel):
    ingested: int
    total: int
    without_coordinates: int


NO_CACHE_HEADERS = {"Cache-Control": "no-store, no-cache, must-revalidate", "Pragma": "no-cache"}


def _respond(content: dict, source: Optional[str] = None) -> JSONResponse:
    if source is not None:
        content = {"source": source, **content}
    return JSONResponse(content=content, headers=NO_CACHE_HEADERS)


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------
@app.post("/incidents", response_model=IngestResponse)
def ingest_incidents(body: IngestRequest):
    """Normalize and append raw incident records (aliases like latitude/area/crime_type accepted)."""
    if not body.incidents:
        logger.warning("ingest rejected: empty incident list")
        return JSONResponse(
            status_code=400,
            content={"detail": "incidents is required and cannot be empty"},
            headers=NO_CACHE_HEADERS,
        )
    batch = normalize_incidents(body.incidents)
    incidents.extend(batch)
    missing = sum(1 for i in batch if not i.has_coords)
    logger.info("ingested count=%d total=%d without_coordinates=%d", len(batch), len(incidents), missing)
    return _respond(IngestResponse(ingested=len(batch), total=len(incidents), without_coordinates=missing).model_dump())


@app.get("/incidents")
def list_incidents():
    return _respond({"count": len(incidents), "incidents": [i.to_dict() for i in incidents]})


@app.get("/dashboard")
def get_dashboard():
    """Metrics, top zones, weekday trend, hotspots, anomalies, classification and trend analysis."""
    data, source = _working_set()
    dashboard = build_dashboard(
        data,
        eps_km=settings.hotspot_eps_km(),
        min_points=settings.hotspot_min_points(),
        zone_limit=settings.risk_zone_limit(),
        dashboard_zone_limit=settings.dashboard_zone_limit(),
        anomaly_limit=settings.anomaly_limit(),
        high_risk_score=settings.high_risk_score(),
    )
    return _respond(dashboard.to_dict(), source)


@app.get("/risk-zones")
def get_risk_zones(limit: Optional[int] = Query(default=None, ge=1, le=1000)):
    data, source = _working_set()
    zones = calculate_risk_zones(data, limit=limit or settings.risk_zone_limit())
    return _respond({"risk_zones": [z.to_dict() for z in zones]}, source)


@app.get("/hotspots")
def get_hotspots(
    eps_km: Optional[float] = Query(default=None, gt=0, le=100),
    min_points: Optional[int] = Query(default=None, ge=1, le=1000),
):
    data, source = _working_set()
    clusters = detect_hotspots(
        data,
        eps_km=eps_km if eps_km is not None else settings.hotspot_eps_km(),
        min_points=min_points if min_points is not None else settings.hotspot_min_points(),
    )
    return _respond({"hotspots": [c.to_dict() for c in clusters]}, source)


@app.get("/anomalies")
def get_anomalies():
    data, source = _working_set()
    found = detect_anomalies(data, limit=settings.anomaly_limit())
    return _respond({"anomalies": [a.to_dict() for a in found]}, source)


@app.get("/classification")
def get_classification():
    data, source = _working_set()
    return _respond(classify_crimes(data).to_dict(), source)


@app.get("/trend")
def get_trend():
    data, source = _working_set()
    return _respond(analyze_trend(data).to_dict(), source)


@app.get("/health")
def health():
    return _respond({"status": "ok", "incidents": len(incidents)})
