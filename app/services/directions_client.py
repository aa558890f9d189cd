# path: archroute-api/app/services/directions_client.py
"""Mapbox Directions wrapper with a straight-line fallback.

`build_route` always returns a complete RouteResult. Provider failures are
captured as a `ProviderOutcome` and turned into straight-line geometry; the
failure kind is reported on the result (`source`, `provider_error`) so the
caller can render the fallback differently or retry later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import httpx

from app.core.config import MAPBOX_TOKEN_PLACEHOLDER, get_directions_config
from app.models.route_models import (
    AVERAGE_SPEEDS_KMH,
    PROVIDER_PROFILES,
    RouteGeometry,
    RouteInstruction,
    RouteOptions,
    RouteResult,
    RouteSummary,
    Waypoint,
)
from app.services.errors import (
    InsufficientWaypointsError,
    InvalidCredentialError,
    ProviderError,
    ProviderUnavailableError,
    RateLimitedError,
    UnroutableError,
)
from app.utils.formatting import format_distance
from app.utils.geo import polyline_length_m

logger = logging.getLogger(__name__)

MAX_WAYPOINTS = 25


@dataclass(frozen=True)
class ProviderOutcome:
    result: Optional[RouteResult] = None
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.result is not None


def build_straight_line_route(waypoints: Sequence[Waypoint], options: RouteOptions) -> RouteResult:
    coordinates = [wp.lonlat() for wp in waypoints]
    distance = polyline_length_m(coordinates)
    speed_kmh = AVERAGE_SPEEDS_KMH[options.transport_mode]
    duration = (distance / 1000.0) / speed_kmh * 3600.0

    instruction = RouteInstruction(
        instruction=f"Follow {format_distance(distance)} to destination",
        distance=distance,
        duration=duration,
        type="depart",
        way_points=(0, len(coordinates) - 1),
    )
    return RouteResult(
        geometry=RouteGeometry(coordinates=coordinates),
        distance=distance,
        duration=duration,
        instructions=[instruction],
        summary=RouteSummary(distance=distance, duration=duration),
        source="straight_line",
        requested_waypoints=len(waypoints),
    )


def parse_directions_response(response: httpx.Response) -> RouteResult:
    status = response.status_code
    if status == 401:
        raise InvalidCredentialError("Mapbox rejected the access token")
    if status == 422:
        raise UnroutableError("Mapbox cannot connect the given points")
    if status == 429:
        raise RateLimitedError("Mapbox rate limit exceeded")
    if not response.is_success:
        logger.debug("Mapbox error body: %s", response.text[:500])
        raise ProviderUnavailableError(f"Mapbox returned HTTP {status}")

    try:
        return _route_from_payload(response.json())
    except (ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
        # pydantic ValidationError is a ValueError
        raise ProviderUnavailableError(f"Malformed Mapbox response: {exc}") from exc


def _route_from_payload(data: Dict) -> RouteResult:
    route = data["routes"][0]
    geometry = RouteGeometry(coordinates=route["geometry"]["coordinates"])
    if len(geometry.coordinates) < 2:
        raise ProviderUnavailableError("Mapbox geometry has fewer than 2 coordinates")

    instructions: List[RouteInstruction] = []
    for leg in route.get("legs") or []:
        for step in leg.get("steps") or []:
            maneuver = step.get("maneuver") or {}
            instructions.append(
                RouteInstruction(
                    instruction=maneuver.get("instruction") or "Continue",
                    distance=step.get("distance") or 0.0,
                    duration=step.get("duration") or 0.0,
                    type=maneuver.get("type") or "continue",
                )
            )

    distance = float(route.get("distance") or 0.0)
    duration = float(route.get("duration") or 0.0)
    return RouteResult(
        geometry=geometry,
        distance=distance,
        duration=duration,
        instructions=instructions,
        summary=RouteSummary(distance=distance, duration=duration),
        source="provider",
    )


class DirectionsClient:
    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        cfg = get_directions_config()
        self.access_token = cfg["access_token"] if access_token is None else access_token
        self.base_url = (base_url or cfg["base_url"]).rstrip("/")
        self.timeout_seconds = cfg["timeout_seconds"] if timeout_seconds is None else timeout_seconds
        self._http = http_client

    @property
    def has_credential(self) -> bool:
        return bool(self.access_token) and self.access_token != MAPBOX_TOKEN_PLACEHOLDER

    def build_url(self, waypoints: Sequence[Waypoint], options: RouteOptions) -> str:
        profile = PROVIDER_PROFILES[options.transport_mode]
        coordinates = ";".join(f"{wp.lon},{wp.lat}" for wp in waypoints)
        return f"{self.base_url}/{profile}/{coordinates}"

    def build_params(self, options: RouteOptions) -> Dict[str, str]:
        params = {
            "access_token": self.access_token,
            "steps": "true",
            "geometries": "geojson",
            "overview": "full",
            "annotations": "duration,distance",
        }
        if options.transport_mode == "driving":
            exclude = []
            if options.avoid_tolls:
                exclude.append("toll")
            if options.avoid_ferries:
                exclude.append("ferry")
            if exclude:
                params["exclude"] = ",".join(exclude)
        return params

    async def request_provider_route(self, waypoints: Sequence[Waypoint], options: RouteOptions) -> ProviderOutcome:
        """Single provider round-trip. Never raises; failures come back as `outcome.error`."""
        url = self.build_url(waypoints, options)
        params = self.build_params(options)
        logger.debug("Requesting %s route for %d waypoints", options.transport_mode, len(waypoints))

        try:
            if self._http is not None:
                response = await self._http.get(url, params=params, timeout=self.timeout_seconds)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            return ProviderOutcome(error=ProviderUnavailableError(f"Directions request failed: {exc!r}"))

        try:
            return ProviderOutcome(result=parse_directions_response(response))
        except ProviderError as exc:
            return ProviderOutcome(error=exc)

    async def build_route(self, waypoints: Sequence[Waypoint], options: Optional[RouteOptions] = None) -> RouteResult:
        options = options or RouteOptions()
        points = list(waypoints)
        requested = len(points)
        if requested < 2:
            raise InsufficientWaypointsError(requested)

        warnings: List[str] = []
        if requested > MAX_WAYPOINTS:
            logger.warning("Route has %d waypoints, routing only the first %d", requested, MAX_WAYPOINTS)
            points = points[:MAX_WAYPOINTS]
            warnings.append(f"Only the first {MAX_WAYPOINTS} of {requested} waypoints were routed")

        if not self.has_credential:
            logger.info("No valid Mapbox token configured, building straight-line route")
            result = build_straight_line_route(points, options)
            provider_error = "missing_credential"
        else:
            outcome = await self.request_provider_route(points, options)
            if outcome.ok:
                result = outcome.result
                provider_error = None
                logger.info(
                    "Route built via Mapbox: %.2f km, %d min, %d instructions",
                    result.distance / 1000.0,
                    round(result.duration / 60.0),
                    len(result.instructions),
                )
            else:
                error = outcome.error
                if isinstance(error, InvalidCredentialError):
                    logger.error("Mapbox credential rejected, check MAPBOX_ACCESS_TOKEN: %s", error)
                else:
                    logger.warning("Mapbox routing failed (%s), falling back to straight lines: %s", error.code, error)
                result = build_straight_line_route(points, options)
                provider_error = error.code

        if result.source == "straight_line":
            warnings.append("Straight-line approximation; not a road-following path")

        return result.model_copy(
            update={
                "provider_error": provider_error,
                "truncated": requested > MAX_WAYPOINTS,
                "requested_waypoints": requested,
                "warnings": warnings,
            }
        )
