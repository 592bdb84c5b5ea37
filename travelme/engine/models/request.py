"""Plan request model."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .common import Geo


class PlanRequest(BaseModel):
    """A traveler's request for one city."""

    intent: str = Field(description="Free-text request, e.g. 'хочу кофе'")
    city: str = Field(description="City name as shown to the user")
    interests: list[str] = Field(
        default_factory=list, description="Declared interests, e.g. ['food']"
    )
    user_location: Geo | None = Field(default=None)

    @field_validator("interests", mode="before")
    @classmethod
    def parse_interests(cls, v: Any) -> Any:
        """Accept interests stored as a JSON string by older clients."""
        if v is None:
            return []
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
            except json.JSONDecodeError:
                return []
            return parsed if isinstance(parsed, list) else []
        return v
