"""Plan models representing the recommendation returned to the caller."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import ConfidenceLevel, SafetyLevel

MAX_OPTIONS_PER_SECTION = 3
MAX_RESERVES_PER_SECTION = 2


class Stop(BaseModel):
    """A catalog place projected into presentation form."""

    id: str = Field(description="Catalog place id")
    title: str = Field(description="Display name")
    type: str = Field(default="", description="Category")
    tags: list[str] = Field(default_factory=list)
    description: str = Field(default="")
    image_url: str = Field(default="")
    rating: float | None = Field(default=None)
    address: str | None = Field(default=None)
    price_level: int = Field(default=0)
    opening_hours: str | None = Field(default=None)
    contact: str | None = Field(default=None)
    review_count: int = Field(default=0)
    verified: bool = Field(default=False)
    safety_score: int = Field(default=90)
    safety_level: SafetyLevel = Field(default=SafetyLevel.safe)
    latitude: float | None = Field(default=None)
    longitude: float | None = Field(default=None)
    distance_km: float | None = Field(
        default=None, description="Distance from the user at planning time"
    )
    walking_time: str | None = Field(
        default=None, description="Formatted travel time from the previous stop"
    )
    segment_distance_km: float | None = Field(
        default=None, description="Routed distance from the previous stop"
    )

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class PlanOption(BaseModel):
    """A recommended stop with its justification and confidence."""

    stop: Stop = Field(description="The recommended place")
    why: str = Field(description="Natural-language justification")
    budget_hint: str = Field(default="", description="e.g. '10–15k ₸'")
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    confidence_level: ConfidenceLevel = Field(default=ConfidenceLevel.verified)


class PlanSection(BaseModel):
    """A labeled time slot with shown options and hidden reserves."""

    title: str = Field(description="Section title, e.g. 'Ужин'")
    emoji: str = Field(default="📍")
    time_range: str = Field(default="", description="'HH:MM–HH:MM' or empty")
    options: list[PlanOption] = Field(default_factory=list)
    reserves: list[PlanOption] = Field(default_factory=list)

    @field_validator("options")
    @classmethod
    def validate_option_count(cls, v: list[PlanOption]) -> list[PlanOption]:
        """Ensure no more than three options are shown."""
        if len(v) > MAX_OPTIONS_PER_SECTION:
            raise ValueError(
                f"At most {MAX_OPTIONS_PER_SECTION} options per section, got {len(v)}"
            )
        return v

    @field_validator("reserves")
    @classmethod
    def validate_reserve_count(cls, v: list[PlanOption]) -> list[PlanOption]:
        """Ensure no more than two reserves are kept."""
        if len(v) > MAX_RESERVES_PER_SECTION:
            raise ValueError(
                f"At most {MAX_RESERVES_PER_SECTION} reserves per section, got {len(v)}"
            )
        return v

    @property
    def is_marker(self) -> bool:
        """A fixed external commitment such as a meeting."""
        return not self.options and not self.reserves

    def all_options(self) -> list[PlanOption]:
        return [*self.options, *self.reserves]


class Plan(BaseModel):
    """Recommendation returned to the caller."""

    title: str = Field(description="Plan title")
    sections: list[PlanSection] = Field(description="Ordered time slots")
    scored_pool: list[str] = Field(
        default_factory=list,
        description="Scored but unused place ids, consumed by replace",
    )

    @model_validator(mode="after")
    def validate_unique_place_ids(self) -> Plan:
        """Ensure no place appears twice across options and reserves."""
        seen: set[str] = set()
        for place_id in self.place_ids():
            if place_id in seen:
                raise ValueError(f"Place {place_id} appears more than once in plan")
            seen.add(place_id)
        return self

    def place_ids(self) -> list[str]:
        """All place ids across options and reserves, in plan order."""
        return [
            option.stop.id
            for section in self.sections
            for option in section.all_options()
        ]

    def iter_options(self, include_reserves: bool = True):
        for section in self.sections:
            yield from (section.all_options() if include_reserves else section.options)
