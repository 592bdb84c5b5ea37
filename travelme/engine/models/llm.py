"""Wire models for structured LLM responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_WIRE_CONFIG = ConfigDict(
    populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
)


class SynthesisOption(BaseModel):
    """One option as returned by the synthesis model."""

    model_config = _WIRE_CONFIG

    id: str = Field(description="Catalog place id chosen by the model")
    why: str = Field(default="", description="Justification written by the model")
    budget: str = Field(default="", description="Budget hint written by the model")

    @field_validator("why", "budget", mode="before")
    @classmethod
    def null_to_empty_str(cls, v: Any) -> Any:
        return "" if v is None else v


class SynthesisSection(BaseModel):
    """One section as returned by the synthesis model."""

    model_config = _WIRE_CONFIG

    title: str = Field(default="")
    emoji: str = Field(default="")
    time_range: str = Field(default="", alias="timeRange")
    options: list[SynthesisOption] = Field(default_factory=list)
    reserve_ids: list[str] = Field(default_factory=list, alias="reserveIds")

    @field_validator("title", "emoji", "time_range", mode="before")
    @classmethod
    def null_to_empty_str(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("options", "reserve_ids", mode="before")
    @classmethod
    def null_to_empty_list(cls, v: Any) -> Any:
        """Models sometimes send null for an empty array."""
        return [] if v is None else v


class SynthesisResult(BaseModel):
    """Top-level structured response of the synthesis model."""

    model_config = _WIRE_CONFIG

    title: str = Field(default="")
    sections: list[SynthesisSection] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def null_to_empty_str(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("sections", mode="before")
    @classmethod
    def null_to_empty_list(cls, v: Any) -> Any:
        return [] if v is None else v


class JudgeIssue(BaseModel):
    """A problem the judge found with one option."""

    model_config = _WIRE_CONFIG

    option_id: str = Field(alias="optionId")
    type: str = Field(description="One of the JudgeIssueType values")
    description: str = Field(default="")


class JudgeVerdict(BaseModel):
    """Judge response; the default is the fail-open 'no issues' verdict."""

    model_config = _WIRE_CONFIG

    valid: bool = Field(default=True)
    issues: list[JudgeIssue] = Field(default_factory=list)
