"""Great-circle distance between incidents, and the coordinate-validity filter for spatial work."""

import logging
import math

logger = logging.getLogger("crime_api.clustering.geo_proximity")

# Earth radius in kilometres
EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in kilometres between two (lat, lng) points. NaN in, NaN out."""
    a = math.radians(lat2 - lat1)
    b = math.radians(lng2 - lng1)
    x = math.sin(a / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(b / 2) ** 2
    c = 2 * math.atan2(math.sqrt(x), math.sqrt(1 - x))
    return EARTH_RADIUS_KM * c


def incident_distance_km(a, b) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def has_valid_coords(incident) -> bool:
    return incident.has_coords


def spatial_incidents(incidents) -> list:
    """Incidents usable for distance computations, in input order."""
    usable = [i for i in incidents if has_valid_coords(i)]
    dropped = len(incidents) - len(usable)
    if dropped:
        logger.debug("skipping %d incidents without valid coordinates", dropped)
    return usable


def neighbour_indices(points: list, radius_km: float, *, strict: bool = False) -> list[list[int]]:
    """
    For each point, indices of the other points within radius_km (<= radius, or < when strict).
    O(n^2) pairwise haversine; each pair is computed once.
    """
    n = len(points)
    out: list[list[int]] = [[] for _ in range(n)]
    for i in range(n):
        p = points[i]
        for j in range(i + 1, n):
            d = incident_distance_km(p, points[j])
            if d < radius_km or (not strict and d == radius_km):
                out[i].append(j)
                out[j].append(i)
    return out
