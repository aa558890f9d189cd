# path: archroute-api/app/services/route_optimizer.py

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, TypeVar

from app.models.route_models import OptimizedRoute, RouteOptions, Waypoint
from app.services.directions_client import DirectionsClient
from app.utils.geo import haversine_m

logger = logging.getLogger(__name__)

REORDER_MIN_POINTS = 4
REORDER_MAX_POINTS = 8
OPTIMIZE_MAX_POINTS = 12

P = TypeVar("P")


def greedy_reorder(points: Sequence[P], lat_of=lambda p: p.lat, lon_of=lambda p: p.lon) -> List[P]:
    """Keep the first and last points; sort the interior by distance from the start.

    Single pass, not a travelling-salesman solve. Ties keep their input order.
    """
    points = list(points)
    if len(points) < 3:
        return points

    start, end = points[0], points[-1]
    s_lat, s_lon = lat_of(start), lon_of(start)
    middle = sorted(points[1:-1], key=lambda p: haversine_m(s_lat, s_lon, lat_of(p), lon_of(p)))
    return [start, *middle, end]


def should_reorder(count: int) -> bool:
    if count > OPTIMIZE_MAX_POINTS:
        return False
    return REORDER_MIN_POINTS <= count <= REORDER_MAX_POINTS


async def optimize_route(
    waypoints: Sequence[Waypoint],
    options: Optional[RouteOptions] = None,
    client: Optional[DirectionsClient] = None,
) -> OptimizedRoute:
    client = client or DirectionsClient()
    points = list(waypoints)

    if should_reorder(len(points)):
        ordered = greedy_reorder(points)
        logger.debug("Greedy reorder applied to %d waypoints", len(points))
    else:
        ordered = points
        if len(points) > OPTIMIZE_MAX_POINTS:
            logger.info("Skipping reorder for %d waypoints (limit %d)", len(points), OPTIMIZE_MAX_POINTS)

    route = await client.build_route(ordered, options)
    return OptimizedRoute(optimized_points=ordered, route=route, reordered=ordered != points)
