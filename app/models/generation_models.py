# path: archroute-api/app/models/generation_models.py

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field

from app.models.map_models import (
    Difficulty,
    PublicationStatus,
    RouteOrigin,
    RouteStop,
    Visibility,
)
from app.models.route_models import RouteResult, TransportMode


class GenerationParams(BaseModel):
    max_points: int = Field(default=8, ge=2, le=25)
    transport_mode: TransportMode = "walking"
    difficulty: Difficulty = "easy"
    radius_km: float = Field(default=3.0, gt=0, le=50)
    style: Optional[str] = None
    time_available_minutes: Optional[int] = Field(default=None, gt=0)


class GenerateRouteRequest(BaseModel):
    city: str = ""
    route_title: str = ""
    created_by: Optional[str] = None
    generation_params: GenerationParams = Field(default_factory=GenerationParams)


class GeneratedPoint(BaseModel):
    title: str
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    description: Optional[str] = None
    building_id: Optional[str] = None


class NewRouteRecord(BaseModel):
    title: str
    description: Optional[str] = None
    city: str
    created_by: Optional[str] = None
    visibility: Visibility = "private"
    publication_status: PublicationStatus = "draft"
    source: RouteOrigin = "ai_generated"
    priority_score: int = 0
    transport_mode: TransportMode = "walking"
    difficulty_level: Difficulty = "easy"
    route: Optional[RouteResult] = None
    points: List[RouteStop]
    tags: List[str] = Field(default_factory=list)


class GenerationResult(BaseModel):
    route_id: str
    record: NewRouteRecord
