# path: archroute-api/app/models/map_models.py

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, Field, model_validator

from app.models.route_models import RouteGeometry, TransportMode


Visibility = Literal["private", "public", "featured"]
PublicationStatus = Literal["draft", "pending", "published", "rejected", "archived"]
RouteOrigin = Literal["user", "editorial", "ai_generated", "corporate", "institutional"]
Difficulty = Literal["easy", "medium", "hard"]


class RouteStop(BaseModel):
    order_index: int = Field(ge=0)
    title: str
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    description: Optional[str] = None
    building_id: Optional[str] = None


class PersistedRoute(BaseModel):
    id: str
    title: str
    city: str
    country: Optional[str] = None
    created_by: Optional[str] = None
    visibility: Visibility = "public"
    publication_status: PublicationStatus = "published"
    source: RouteOrigin = "user"
    priority_score: int = 0
    transport_mode: Optional[TransportMode] = None
    difficulty_level: Optional[str] = None
    route_geometry: Optional[RouteGeometry] = None
    distance_m: Optional[float] = None
    duration_s: Optional[float] = None
    points: List[RouteStop] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    featured_until: Optional[datetime] = None


class ScoredRoute(PersistedRoute):
    relevance_score: int = 0
    distance_from_user_m: Optional[float] = None


class MapBounds(BaseModel):
    north: float = Field(ge=-90.0, le=90.0)
    south: float = Field(ge=-90.0, le=90.0)
    east: float = Field(ge=-180.0, le=180.0)
    west: float = Field(ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def validate_order(self):
        if self.south > self.north:
            raise ValueError("south must not exceed north")
        return self


class UserPreferences(BaseModel):
    transport_modes: List[TransportMode] = Field(default_factory=list)
    difficulty_levels: List[str] = Field(default_factory=list)


class MapFilterOptions(BaseModel):
    city: str = "Berlin"
    max_routes: int = Field(default=30, ge=1, le=200)
    user_location: Optional[Tuple[float, float]] = None  # (lat, lon)
    user_preferences: Optional[UserPreferences] = None
    map_bounds: Optional[MapBounds] = None


class SelectForMapRequest(BaseModel):
    pool: List[PersistedRoute]
    options: MapFilterOptions = Field(default_factory=MapFilterOptions)
