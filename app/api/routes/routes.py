# path: archroute-api/app/api/routes/routes.py

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from app.models.generation_models import GenerateRouteRequest, NewRouteRecord
from app.models.map_models import MapFilterOptions, ScoredRoute, SelectForMapRequest
from app.models.route_models import BuildRouteRequest, OptimizedRoute, RouteResult
from app.services.directions_client import DirectionsClient
from app.services.errors import GenerationError, InsufficientWaypointsError, PointProviderError
from app.services.generation import GenerationOrchestrator, OpenAIPointSuggester, PointSuggester
from app.services.route_catalog import get_routes_for_map
from app.services.route_optimizer import optimize_route
from app.services.route_ranking import select_for_map
from app.services.route_store import InMemoryRouteStore, RouteStore
from app.utils.formatting import format_distance, format_duration

router = APIRouter(prefix="/routes", tags=["routes"])

_store = InMemoryRouteStore()


def get_directions_client() -> DirectionsClient:
    return DirectionsClient()


def get_route_store() -> RouteStore:
    return _store


def get_point_suggester() -> PointSuggester:
    return OpenAIPointSuggester()


class RouteDisplay(BaseModel):
    distance: str
    duration: str


class BuildRouteResponse(BaseModel):
    route: RouteResult
    display: RouteDisplay


class GenerateRouteResponse(BaseModel):
    route_id: str
    route: NewRouteRecord


def _display(route: RouteResult) -> RouteDisplay:
    return RouteDisplay(distance=format_distance(route.distance), duration=format_duration(route.duration))


@router.post("/build", response_model=BuildRouteResponse)
async def build_route(
    body: BuildRouteRequest,
    client: DirectionsClient = Depends(get_directions_client),
) -> BuildRouteResponse:
    try:
        route = await client.build_route(body.waypoints, body.options)
    except InsufficientWaypointsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BuildRouteResponse(route=route, display=_display(route))


@router.post("/optimize", response_model=OptimizedRoute)
async def optimize(
    body: BuildRouteRequest,
    client: DirectionsClient = Depends(get_directions_client),
) -> OptimizedRoute:
    try:
        return await optimize_route(body.waypoints, body.options, client)
    except InsufficientWaypointsError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/map/select", response_model=List[ScoredRoute])
def select_routes(body: SelectForMapRequest) -> List[ScoredRoute]:
    return select_for_map(body.pool, body.options)


@router.get("/map", response_model=List[ScoredRoute])
async def routes_for_map(
    city: str = Query(default="Berlin", min_length=1),
    max_routes: int = Query(default=30, ge=1, le=200),
    lat: Optional[float] = Query(default=None, ge=-90.0, le=90.0),
    lon: Optional[float] = Query(default=None, ge=-180.0, le=180.0),
    store: RouteStore = Depends(get_route_store),
) -> List[ScoredRoute]:
    user_location = (lat, lon) if lat is not None and lon is not None else None
    options = MapFilterOptions(city=city, max_routes=max_routes, user_location=user_location)
    return await get_routes_for_map(store, options)


@router.post("/generate", response_model=GenerateRouteResponse)
async def generate_route(
    body: GenerateRouteRequest,
    client: DirectionsClient = Depends(get_directions_client),
    store: RouteStore = Depends(get_route_store),
    suggester: PointSuggester = Depends(get_point_suggester),
) -> GenerateRouteResponse:
    orchestrator = GenerationOrchestrator(suggester=suggester, store=store, directions=client)
    try:
        result = await orchestrator.generate(body)
    except PointProviderError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return GenerateRouteResponse(route_id=result.route_id, route=result.record)
