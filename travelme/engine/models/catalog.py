"""Catalog models: the authoritative places a plan may recommend from."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .common import Geo


class ReviewSummary(BaseModel):
    """Aggregated review data stored alongside a place."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(default=0, description="Number of reviews")
    average: float | None = Field(default=None, description="Average review score")


class CatalogPlace(BaseModel):
    """Immutable catalog record loaded from the store."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque stable key")
    title: str = Field(description="Display name")
    type: str = Field(default="", description="Category, e.g. cafe, museum")
    description: str = Field(default="", description="Free-text catalog description")
    tags: tuple[str, ...] = Field(default=(), description="Catalog tag set")
    rating: float | None = Field(default=None, description="Numeric rating")
    safety_score: int = Field(default=90, ge=0, le=100, description="Safety 0-100")
    price_level: int = Field(default=0, ge=0, le=5, description="0=free, 5=luxury")
    location: Geo | None = Field(default=None, description="Coordinates, if known")
    address: str | None = Field(default=None)
    contact: str | None = Field(default=None)
    opening_hours: str | None = Field(default=None)
    image_url: str = Field(default="")
    reviews: ReviewSummary | None = Field(default=None)
    verified: bool = Field(default=False, description="Verified by the catalog team")
    city_id: str = Field(default="", description="City identifier")


class CityRecord(BaseModel):
    """Row of the city name -> id lookup table."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class ScoredPlace(BaseModel):
    """A catalog place with its relevance score for one request."""

    place: CatalogPlace = Field(description="The scored place")
    score: float = Field(description="Additive relevance score")
    distance_km: float | None = Field(
        default=None, description="Distance from the user, if known"
    )
