"""
Hotspot detection: density-based (DBSCAN-style) clustering of incidents by haversine distance.

An incident whose eps_km neighbourhood (itself included) holds at least min_points incidents is a
core point and seeds a cluster, which grows breadth-first through every incident
density-reachable from it. Incidents outside any cluster are noise and are not reported. Cost is O(n^2) pairwise distances.
"""

import logging
from collections import deque

from clustering.geo_proximity import haversine_km, neighbour_indices, spatial_incidents
from core.models import HotspotCluster, Severity, severity_distribution
from core.settings import DEFAULT_EPS_KM, DEFAULT_MIN_POINTS
from core.stats import mean, round_half_up

logger = logging.getLogger("crime_api.clustering.hotspots")

# member count at which the density half of intensity saturates
INTENSITY_FULL_DENSITY = 50


def _is_core(idx: int, neighbours: list[list[int]], min_points: int) -> bool:
    return len(neighbours[idx]) + 1 >= min_points


def _expand(seed: int, neighbours: list[list[int]], labels: list, visited: list[bool], cluster_id: int, min_points: int) -> list[int]:
    members = [seed]
    labels[seed] = cluster_id
    queue = deque(neighbours[seed])
    while queue:
        idx = queue.popleft()
        if labels[idx] is None:
            # includes incidents earlier visited as noise: they join as border points
            labels[idx] = cluster_id
            members.append(idx)
        if visited[idx]:
            continue
        visited[idx] = True
        if _is_core(idx, neighbours, min_points):
            queue.extend(neighbours[idx])
    return sorted(members)


def _intensity(member_count: int, high_count: int) -> int:
    if member_count == 0:
        return 0
    density_score = min(50.0, (member_count / INTENSITY_FULL_DENSITY) * 50)
    severity_score = (high_count / member_count) * 50
    return int(round_half_up(min(100.0, density_score + severity_score)))


def _build_cluster(members: list) -> HotspotCluster:
    center_lat = mean(i.latitude for i in members)
    center_lng = mean(i.longitude for i in members)
    radius = mean(haversine_km(i.latitude, i.longitude, center_lat, center_lng) for i in members)
    dist = severity_distribution(members)
    return HotspotCluster(
        center=(center_lat, center_lng),
        incidents=members,
        radius_km=round_half_up(radius, 1),
        severity_distribution=dist,
        intensity=_intensity(len(members), dist[Severity.HIGH.value]),
    )


def detect_hotspots(incidents, eps_km: float = DEFAULT_EPS_KM, min_points: int = DEFAULT_MIN_POINTS) -> list[HotspotCluster]:
    """
    Cluster incidents into hotspots, largest first, ranked 1..k.
    Incidents without valid coordinates are ignored; fewer than min_points usable incidents -> [].
    Follows the DBSCAN min_samples convention: a core point counts itself toward min_points, and
    an incident first seen as noise still joins a later cluster as a border point.
    """
    points = spatial_incidents(list(incidents))
    if len(points) < min_points:
        return []

    neighbours = neighbour_indices(points, eps_km)
    labels: list = [None] * len(points)
    visited = [False] * len(points)
    groups: list[list[int]] = []

    for idx in range(len(points)):
        if visited[idx]:
            continue
        visited[idx] = True
        if not _is_core(idx, neighbours, min_points):
            continue
        groups.append(_expand(idx, neighbours, labels, visited, len(groups), min_points))

    clusters = [_build_cluster([points[i] for i in g]) for g in groups]
    clusters.sort(key=lambda c: c.member_count, reverse=True)
    for rank, cluster in enumerate(clusters, start=1):
        cluster.rank = rank

    logger.debug("hotspots: %d clusters from %d incidents (eps=%.2fkm, min_points=%d)",
                 len(clusters), len(points), eps_km, min_points)
    return clusters
