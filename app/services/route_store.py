# path: archroute-api/app/services/route_store.py

from __future__ import annotations

import uuid
from typing import Dict, List, Optional, Protocol

from app.models.generation_models import NewRouteRecord
from app.models.map_models import PersistedRoute

MAP_VISIBILITY = ("public", "featured")


class RouteStore(Protocol):
    """Persistence collaborator. The production store lives outside this service."""

    async def fetch_map_candidates(self, city: str, limit: int) -> List[PersistedRoute]:
        ...

    async def fetch_published_routes(self, city: str, limit: int) -> List[PersistedRoute]:
        ...

    async def insert_route(self, record: NewRouteRecord) -> str:
        ...


def is_map_visible(route: PersistedRoute) -> bool:
    return route.publication_status == "published" and route.visibility in MAP_VISIBILITY


class InMemoryRouteStore:
    def __init__(self, routes: Optional[List[PersistedRoute]] = None) -> None:
        self._routes: Dict[str, PersistedRoute] = {r.id: r for r in routes or []}

    def get(self, route_id: str) -> Optional[PersistedRoute]:
        return self._routes.get(route_id)

    async def fetch_map_candidates(self, city: str, limit: int) -> List[PersistedRoute]:
        rows = [r for r in self._routes.values() if r.city == city and is_map_visible(r)]
        rows.sort(key=lambda r: r.priority_score, reverse=True)
        return rows[:limit]

    async def fetch_published_routes(self, city: str, limit: int) -> List[PersistedRoute]:
        needle = city.lower()
        rows = [r for r in self._routes.values() if needle in r.city.lower() and is_map_visible(r)]
        rows.sort(key=lambda r: r.priority_score, reverse=True)
        return rows[:limit]

    async def insert_route(self, record: NewRouteRecord) -> str:
        route_id = str(uuid.uuid4())
        route = record.route
        self._routes[route_id] = PersistedRoute(
            id=route_id,
            title=record.title,
            city=record.city,
            created_by=record.created_by,
            visibility=record.visibility,
            publication_status=record.publication_status,
            source=record.source,
            priority_score=record.priority_score,
            transport_mode=record.transport_mode,
            difficulty_level=record.difficulty_level,
            route_geometry=route.geometry if route else None,
            distance_m=route.distance if route else None,
            duration_s=route.duration if route else None,
            points=record.points,
            tags=record.tags,
        )
        return route_id
