# path: archroute-api/app/services/route_catalog.py

from __future__ import annotations

import logging
from typing import List

from app.models.map_models import MapFilterOptions, PersistedRoute, ScoredRoute
from app.services.route_ranking import select_for_map
from app.services.route_store import RouteStore

logger = logging.getLogger(__name__)


async def fetch_pool(store: RouteStore, city: str, limit: int) -> List[PersistedRoute]:
    """Primary candidate query, then the simpler published-routes query if that fails or is empty."""
    try:
        pool = await store.fetch_map_candidates(city, limit)
        if pool:
            return pool
        logger.info("No map candidates for %s, trying fallback query", city)
    except Exception as exc:
        logger.warning("Map candidate query failed for %s, trying fallback query: %s", city, exc)

    try:
        return await store.fetch_published_routes(city, limit)
    except Exception as exc:
        logger.error("Fallback route query failed for %s: %s", city, exc)
        return []


async def get_routes_for_map(store: RouteStore, options: MapFilterOptions) -> List[ScoredRoute]:
    pool = await fetch_pool(store, options.city, options.max_routes)
    return select_for_map(pool, options)
