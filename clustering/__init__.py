"""Spatial analytics: haversine distance and density-based hotspot clustering."""

from clustering.geo_proximity import haversine_km, spatial_incidents
from clustering.hotspots import detect_hotspots

__all__ = [
    "haversine_km",
    "spatial_incidents",
    "detect_hotspots",
]
