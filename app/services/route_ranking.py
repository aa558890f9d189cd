# path: archroute-api/app/services/route_ranking.py
"""Pick and order persisted routes for a city map.

The pool arrives already restricted to visible/published routes. Ranking is
pure and in-memory: preference and viewport filters first, then a relevance
score built on the stored priority, then a stable descending sort.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from app.models.map_models import (
    MapBounds,
    MapFilterOptions,
    PersistedRoute,
    ScoredRoute,
    UserPreferences,
)
from app.utils.geo import first_point_latlon, haversine_m, point_in_bounds

logger = logging.getLogger(__name__)

ROUTE_PRIORITIES = {
    "featured": 50,
    "corporate": 30,
    "editorial": 25,
    "institutional": 20,
    "user": 15,
    "ai_generated": 5,
}

# (upper bound in km, bonus); first match wins
PROXIMITY_TIERS: Tuple[Tuple[float, int], ...] = (
    (1.0, 20),
    (3.0, 15),
    (5.0, 10),
    (10.0, 5),
)
PREFERRED_MODE_BONUS = 10
FEATURED_BONUS = 30


def default_priority_score(source: str, visibility: str = "private") -> int:
    if visibility == "featured":
        return ROUTE_PRIORITIES["featured"]
    return ROUTE_PRIORITIES.get(source, ROUTE_PRIORITIES["user"])


def proximity_bonus(distance_m: float) -> int:
    km = distance_m / 1000.0
    for limit_km, bonus in PROXIMITY_TIERS:
        if km < limit_km:
            return bonus
    return 0


def route_start(route: PersistedRoute) -> Optional[Tuple[float, float]]:
    """(lat, lon) of the first geometry coordinate, else the first stop."""
    if route.route_geometry and route.route_geometry.coordinates:
        return first_point_latlon(route.route_geometry.coordinates)
    if route.points:
        first = min(route.points, key=lambda p: p.order_index)
        return first.latitude, first.longitude
    return None


def apply_user_preferences(
    routes: Iterable[PersistedRoute], preferences: Optional[UserPreferences]
) -> List[PersistedRoute]:
    routes = list(routes)
    if not preferences:
        return routes

    kept = []
    for route in routes:
        if preferences.transport_modes and route.transport_mode not in preferences.transport_modes:
            continue
        if preferences.difficulty_levels and (route.difficulty_level or "") not in preferences.difficulty_levels:
            continue
        kept.append(route)
    return kept


def apply_geographic_filter(routes: Iterable[PersistedRoute], bounds: Optional[MapBounds]) -> List[PersistedRoute]:
    routes = list(routes)
    if not bounds:
        return routes

    kept = []
    for route in routes:
        if not route.route_geometry or not route.route_geometry.coordinates:
            kept.append(route)
            continue
        if any(point_in_bounds(lat, lon, bounds) for lon, lat in route.route_geometry.coordinates):
            kept.append(route)
    return kept


def score_route(
    route: PersistedRoute,
    user_location: Optional[Tuple[float, float]] = None,
    preferences: Optional[UserPreferences] = None,
) -> ScoredRoute:
    score = route.priority_score or 0
    distance_from_user = None

    if user_location is not None:
        start = route_start(route)
        if start is not None:
            distance_from_user = haversine_m(user_location[0], user_location[1], start[0], start[1])
            score += proximity_bonus(distance_from_user)

    if preferences and route.transport_mode in preferences.transport_modes:
        score += PREFERRED_MODE_BONUS

    if route.visibility == "featured":
        score += FEATURED_BONUS

    return ScoredRoute(
        **route.model_dump(exclude={"relevance_score", "distance_from_user_m"}),
        relevance_score=score,
        distance_from_user_m=distance_from_user,
    )


def select_for_map(pool: Iterable[PersistedRoute], options: Optional[MapFilterOptions] = None) -> List[ScoredRoute]:
    options = options or MapFilterOptions()
    routes = apply_user_preferences(pool, options.user_preferences)
    routes = apply_geographic_filter(routes, options.map_bounds)

    scored = [score_route(r, options.user_location, options.user_preferences) for r in routes]
    scored.sort(key=lambda r: r.relevance_score, reverse=True)

    logger.debug("Ranked %d routes for %s, returning up to %d", len(scored), options.city, options.max_routes)
    return scored[: options.max_routes]
