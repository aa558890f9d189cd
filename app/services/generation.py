# path: archroute-api/app/services/generation.py
"""Route autogeneration: suggested stops -> ordered waypoints -> routed record -> store."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Protocol

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from app.core.config import get_openai_config
from app.models.generation_models import (
    GeneratedPoint,
    GenerateRouteRequest,
    GenerationParams,
    GenerationResult,
    NewRouteRecord,
)
from app.models.map_models import RouteStop
from app.models.route_models import RouteOptions, Waypoint
from app.services.directions_client import DirectionsClient
from app.services.errors import GenerationError, PointProviderError
from app.services.route_optimizer import greedy_reorder
from app.services.route_ranking import default_priority_score
from app.services.route_store import RouteStore

logger = logging.getLogger(__name__)


class PointSuggester(Protocol):
    async def suggest_points(self, city: str, params: GenerationParams) -> List[GeneratedPoint]:
        ...


# ---------------------------------------------------------------------------
# OpenAI-backed suggester
# ---------------------------------------------------------------------------

def _build_prompt(city: str, params: GenerationParams) -> str:
    prefs = [f"transport mode: {params.transport_mode}", f"difficulty: {params.difficulty}"]
    if params.style:
        prefs.append(f"architectural style: {params.style}")
    if params.time_available_minutes:
        prefs.append(f"time available: {params.time_available_minutes} minutes")
    return (
        "You are an architecture guide. "
        f"Suggest {params.max_points} notable buildings in {city} within {params.radius_km:g} km "
        "of the city centre for a single route "
        f"({'; '.join(prefs)}). "
        "Reply in strict JSON with the schema: "
        '{"points": [{"title": <str>, "latitude": <float>, "longitude": <float>, "description": <str|null>}]}'
    )


def _parse_points(content: str) -> List[GeneratedPoint]:
    try:
        payload = json.loads(content)
        raw_points = payload["points"]
    except (json.JSONDecodeError, KeyError, TypeError) as exc:
        logger.error("Failed to parse point suggestions: %s", exc)
        raise GenerationError("AI provider returned an unreadable point list") from exc

    points: List[GeneratedPoint] = []
    for raw in raw_points or []:
        try:
            points.append(GeneratedPoint.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Dropping suggested point %r: %s", raw, exc.errors()[0]["msg"])
    return points


class OpenAIPointSuggester:
    def __init__(self, client: Optional[AsyncOpenAI] = None, model: Optional[str] = None) -> None:
        cfg = get_openai_config()
        self._client = client
        self.model = model or cfg["model"]
        self.temperature = cfg["temperature"]

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = get_openai_config()["api_key"]
            if not api_key:
                raise GenerationError("OPENAI_API_KEY not set")
            self._client = AsyncOpenAI(api_key=api_key)
        return self._client

    async def suggest_points(self, city: str, params: GenerationParams) -> List[GeneratedPoint]:
        messages: List[Dict[str, Any]] = [
            {"role": "system", "content": "You plan architecture walks and answer only in JSON."},
            {"role": "user", "content": _build_prompt(city, params)},
        ]
        logger.debug("Requesting %d point suggestions for %s from %s", params.max_points, city, self.model)

        try:
            response = await self._get_client().chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            logger.error("Point suggestion request failed for %s: %s", city, exc)
            raise PointProviderError(f"AI provider request failed: {exc.__class__.__name__}") from exc
        return _parse_points(response.choices[0].message.content or "")


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def _route_tags(city: str, params: GenerationParams) -> List[str]:
    tags = [city, params.style, params.transport_mode, params.difficulty]
    return list(dict.fromkeys(t for t in tags if t))


class GenerationOrchestrator:
    def __init__(
        self,
        suggester: PointSuggester,
        store: RouteStore,
        directions: Optional[DirectionsClient] = None,
    ) -> None:
        self.suggester = suggester
        self.store = store
        self.directions = directions or DirectionsClient()

    async def generate(self, request: GenerateRouteRequest) -> GenerationResult:
        city = (request.city or "").strip()
        title = (request.route_title or "").strip()
        if not city:
            raise GenerationError("City is required for route generation")
        if not title:
            raise GenerationError("Route title is required for route generation")

        params = request.generation_params
        logger.info("Generating %s route for %s (max %d points)", params.transport_mode, city, params.max_points)

        suggested = await self.suggester.suggest_points(city, params)
        if len(suggested) < 2:
            raise GenerationError(f"Not enough points to build a route in {city}: got {len(suggested)}")

        ordered = greedy_reorder(
            suggested[: params.max_points],
            lat_of=lambda p: p.latitude,
            lon_of=lambda p: p.longitude,
        )
        waypoints = [Waypoint(lat=p.latitude, lon=p.longitude, title=p.title, place_id=p.building_id) for p in ordered]
        route = await self.directions.build_route(waypoints, RouteOptions(transport_mode=params.transport_mode))

        record = NewRouteRecord(
            title=title,
            description=f"A {params.transport_mode} route through {len(ordered)} architectural sites in {city}.",
            city=city,
            created_by=request.created_by,
            priority_score=default_priority_score("ai_generated", "private"),
            transport_mode=params.transport_mode,
            difficulty_level=params.difficulty,
            route=route,
            points=[
                RouteStop(
                    order_index=i,
                    title=p.title,
                    latitude=p.latitude,
                    longitude=p.longitude,
                    description=p.description,
                    building_id=p.building_id,
                )
                for i, p in enumerate(ordered)
            ],
            tags=_route_tags(city, params),
        )

        route_id = await self.store.insert_route(record)
        logger.info("Generated route %s for %s (%s geometry)", route_id, city, route.source)
        return GenerationResult(route_id=route_id, record=record)
