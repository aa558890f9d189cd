# path: archroute-api/app/models/route_models.py

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


TransportMode = Literal["walking", "cycling", "driving", "transit"]
RouteSource = Literal["provider", "straight_line"]
ProviderErrorCode = Literal[
    "missing_credential",
    "invalid_credential",
    "unroutable",
    "rate_limited",
    "unavailable",
]

# Provider profile per transport mode. Transit has no Mapbox profile; walking is the closest.
PROVIDER_PROFILES: Dict[str, str] = {
    "walking": "walking",
    "cycling": "cycling",
    "driving": "driving",
    "transit": "walking",
}

# km/h, used only for straight-line duration estimates
AVERAGE_SPEEDS_KMH: Dict[str, float] = {
    "walking": 5.0,
    "cycling": 15.0,
    "driving": 40.0,
    "transit": 25.0,
}


class Waypoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    title: Optional[str] = Field(default=None, max_length=200)
    place_id: Optional[str] = None

    def lonlat(self) -> List[float]:
        return [self.lon, self.lat]


class RouteOptions(BaseModel):
    transport_mode: TransportMode = "walking"
    avoid_tolls: bool = False
    avoid_ferries: bool = False
    # Cycling only. Mapbox has no green-space switch, so this is carried but not sent.
    prefer_green: bool = False


class RouteGeometry(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[Tuple[float, float]]  # (lon, lat)

    @field_validator("coordinates", mode="before")
    @classmethod
    def coerce_coords(cls, coords):
        # Provider geometry may carry a third (elevation) value.
        return [tuple(c[:2]) for c in coords or []]


class RouteInstruction(BaseModel):
    instruction: str
    distance: float = Field(ge=0)
    duration: float = Field(ge=0)
    type: str = "continue"
    way_points: Tuple[int, int] = (0, 0)


class RouteSummary(BaseModel):
    distance: float = Field(ge=0)
    duration: float = Field(ge=0)


class RouteResult(BaseModel):
    geometry: RouteGeometry
    distance: float = Field(ge=0)  # meters
    duration: float = Field(ge=0)  # seconds
    instructions: List[RouteInstruction]
    summary: RouteSummary
    source: RouteSource = "provider"
    provider_error: Optional[ProviderErrorCode] = None
    truncated: bool = False
    requested_waypoints: int = Field(default=0, ge=0)
    warnings: List[str] = Field(default_factory=list)


class BuildRouteRequest(BaseModel):
    waypoints: List[Waypoint]
    options: RouteOptions = Field(default_factory=RouteOptions)


class OptimizedRoute(BaseModel):
    optimized_points: List[Waypoint]
    route: RouteResult
    reordered: bool = False
