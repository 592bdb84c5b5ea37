"""Models for routing service results."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .common import Geo


class RouteSegment(BaseModel):
    """One leg between two consecutive waypoints."""

    from_geo: Geo = Field(description="Leg origin")
    to_geo: Geo = Field(description="Leg destination")
    duration_minutes: int = Field(description="Leg duration, rounded to minutes")
    distance_km: float = Field(description="Leg distance, one decimal")


class Route(BaseModel):
    """Multi-waypoint route."""

    segments: list[RouteSegment] = Field(default_factory=list)
    total_duration_minutes: int = Field(default=0)
    total_distance_km: float = Field(default=0.0)
    geometry: list[tuple[float, float]] = Field(
        default_factory=list, description="Decoded (lat, lon) path"
    )
