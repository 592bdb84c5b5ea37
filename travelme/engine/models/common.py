"""Common data types and enums used across the engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Geo(BaseModel):
    """Geographic coordinates in WGS84 decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(description="Latitude in decimal degrees")
    lon: float = Field(description="Longitude in decimal degrees")


class ConfidenceLevel(str, Enum):
    """How trustworthy an option's justification is."""

    verified = "verified"
    ai_generated = "ai_generated"
    low_confidence = "low_confidence"


class SafetyLevel(str, Enum):
    """Coarse safety label derived from the catalog safety score."""

    safe = "safe"
    warning = "warning"


class TravelMode(str, Enum):
    """Routing profiles supported by the routing service."""

    foot = "foot"
    car = "car"


class JudgeIssueType(str, Enum):
    """Kinds of problems the LLM judge may report."""

    logical_contradiction = "logical_contradiction"
    temporal_impossibility = "temporal_impossibility"
    geographic_error = "geographic_error"
    fabricated_detail = "fabricated_detail"


# Issues that force an option down to low_confidence
SEVERE_ISSUE_TYPES = frozenset(
    {
        JudgeIssueType.fabricated_detail,
        JudgeIssueType.logical_contradiction,
        JudgeIssueType.temporal_impossibility,
    }
)
