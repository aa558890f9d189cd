# path: archroute-api/app/utils/geo.py

from __future__ import annotations

from typing import Sequence, Tuple
import math

EARTH_RADIUS_M = 6371000.0


def haversine_m(a_lat: float, a_lon: float, b_lat: float, b_lon: float) -> float:
    # Spherical earth; good enough for fallback routing and proximity tiers.
    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    dphi = math.radians(b_lat - a_lat)
    dlmb = math.radians(b_lon - a_lon)

    s = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    s = min(1.0, s)
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(s), math.sqrt(1 - s))


def polyline_length_m(points_lonlat: Sequence[Sequence[float]]) -> float:
    total = 0.0
    for i in range(1, len(points_lonlat)):
        a_lon, a_lat = points_lonlat[i - 1][0], points_lonlat[i - 1][1]
        b_lon, b_lat = points_lonlat[i][0], points_lonlat[i][1]
        total += haversine_m(a_lat, a_lon, b_lat, b_lon)
    return total


def point_in_bounds(lat: float, lon: float, bounds) -> bool:
    """Inclusive test against an object exposing north/south/east/west."""
    return bounds.south <= lat <= bounds.north and bounds.west <= lon <= bounds.east


def first_point_latlon(coords: Sequence[Sequence[float]]) -> Tuple[float, float] | None:
    if not coords:
        return None
    lon, lat = coords[0][0], coords[0][1]
    return float(lat), float(lon)
