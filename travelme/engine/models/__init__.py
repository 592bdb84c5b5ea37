"""Convenient imports for all model types."""

# Common types and enums
from .common import (
    SEVERE_ISSUE_TYPES,
    ConfidenceLevel,
    Geo,
    JudgeIssueType,
    SafetyLevel,
    TravelMode,
)

# Catalog models
from .catalog import CatalogPlace, CityRecord, ReviewSummary, ScoredPlace

# LLM wire models
from .llm import (
    JudgeIssue,
    JudgeVerdict,
    SynthesisOption,
    SynthesisResult,
    SynthesisSection,
)

# Plan models
from .plan import Plan, PlanOption, PlanSection, Stop

# Request and routing models
from .request import PlanRequest
from .routing import Route, RouteSegment

__all__ = [
    # Common
    "ConfidenceLevel",
    "Geo",
    "JudgeIssueType",
    "SafetyLevel",
    "SEVERE_ISSUE_TYPES",
    "TravelMode",
    # Catalog
    "CatalogPlace",
    "CityRecord",
    "ReviewSummary",
    "ScoredPlace",
    # LLM
    "JudgeIssue",
    "JudgeVerdict",
    "SynthesisOption",
    "SynthesisResult",
    "SynthesisSection",
    # Plan
    "Plan",
    "PlanOption",
    "PlanSection",
    "Stop",
    # Request / routing
    "PlanRequest",
    "Route",
    "RouteSegment",
]
