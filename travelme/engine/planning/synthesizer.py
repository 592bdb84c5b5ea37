"""Plan synthesis: ask a hosted model to assemble a plan from catalog ids only."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import BaseModel, Field, ValidationError

from travelme.engine.adapters.llm import LLMClient, parse_json_object
from travelme.engine.config import Settings, get_settings
from travelme.engine.exceptions import SynthesisError
from travelme.engine.exec import call_with_deadline
from travelme.engine.metrics.registry import MetricsClient
from travelme.engine.models.catalog import CatalogPlace
from travelme.engine.models.common import Geo
from travelme.engine.models.llm import SynthesisResult, SynthesisSection
from travelme.engine.models.plan import (
    MAX_OPTIONS_PER_SECTION,
    MAX_RESERVES_PER_SECTION,
    PlanSection,
)

from .stops import build_option

logger = logging.getLogger(__name__)

DESCRIPTION_PREVIEW_CHARS = 100
MARKER_EMOJI = "🤝"
DEFAULT_EMOJI = "📍"
RESERVE_DEFAULT_WHY = "Альтернативный вариант"


class SynthesisDraft(BaseModel):
    """Validated plan skeleton produced by a synthesis model."""

    title: str = Field(default="", description="Model-proposed title, may be empty")
    sections: list[PlanSection] = Field(default_factory=list)


@dataclass
class IdValidationStats:
    """Counts from validating the ids of one model response."""

    total: int = 0
    valid: int = 0
    hallucinated: int = 0
    duplicates: int = 0


def validate_synthesis_ids(
    result: SynthesisResult, valid_ids: set[str]
) -> tuple[list[SynthesisSection], IdValidationStats]:
    """
    Drop every id the model was not given, and every repeated id.

    A section the model sent with no options and no reserves is kept as a
    marker (e.g. a meeting). Any other section left without options after
    validation is dropped.
    Options beyond three and reserves beyond two are trimmed.

    Args:
        result: Parsed model response
        valid_ids: Ids of the candidates sent to the model

    Returns:
        Surviving sections and validation statistics
    """
    stats = IdValidationStats()
    seen: set[str] = set()
    sections: list[SynthesisSection] = []

    def _accept(place_id: str, kind: str) -> bool:
        stats.total += 1
        if place_id not in valid_ids:
            logger.warning(f"Rejected hallucinated {kind} id: {place_id}")
            stats.hallucinated += 1
            return False
        if place_id in seen:
            logger.warning(f"Rejected duplicate {kind} id: {place_id}")
            stats.duplicates += 1
            return False
        stats.valid += 1
        return True

    for section in result.sections:
        is_marker = not section.options and not section.reserve_ids
        options = []
        for option in section.options:
            if not _accept(option.id, "option"):
                continue
            if len(options) >= MAX_OPTIONS_PER_SECTION:
                logger.debug(f"Trimmed extra option {option.id} in {section.title!r}")
                continue
            seen.add(option.id)
            options.append(option)

        reserve_ids = []
        for reserve_id in section.reserve_ids:
            if not _accept(reserve_id, "reserve"):
                continue
            if len(reserve_ids) >= MAX_RESERVES_PER_SECTION:
                logger.debug(f"Trimmed extra reserve {reserve_id} in {section.title!r}")
                continue
            seen.add(reserve_id)
            reserve_ids.append(reserve_id)

        if not options and not is_marker:
            logger.warning(
                f"Dropped section {section.title!r}: no valid options left"
            )
            continue
        if is_marker:
            logger.info(
                f"Keeping marker section {section.title!r} ({section.time_range})"
            )
        sections.append(
            section.model_copy(update={"options": options, "reserve_ids": reserve_ids})
        )

    logger.info(
        f"IDs: {stats.total} total, {stats.valid} valid, "
        f"{stats.hallucinated} hallucinated, {stats.duplicates} duplicates",
        extra={
            "ids_total": stats.total,
            "ids_valid": stats.valid,
            "ids_hallucinated": stats.hallucinated,
            "ids_duplicates": stats.duplicates,
        },
    )
    return sections, stats


def build_synthesis_prompt(
    intent: str,
    interests: Sequence[str],
    candidates: Sequence[CatalogPlace],
    city: str,
) -> str:
    """Render the single synthesis prompt for one request."""
    place_list = [
        {
            "id": p.id,
            "title": p.title,
            "type": p.type,
            "tags": list(p.tags),
            "rating": p.rating,
            "desc": p.description[:DESCRIPTION_PREVIEW_CHARS],
            "price": p.price_level,
            "addr": p.address or "",
        }
        for p in candidates
    ]
    interest_line = (
        f"\nUser preferences: {', '.join(interests)}." if interests else ""
    )

    return f"""You are Travelme AI, a premium travel concierge for {city}, Kazakhstan. Calm, confident, concierge-style.{interest_line}

AVAILABLE PLACES (use ONLY these IDs):
{json.dumps(place_list, ensure_ascii=False)}

REQUEST: "{intent}"

Analyze: traveler profile (age, purpose), schedule constraints (meetings, flights), energy/pace, query type.

TWO MODES:

MODE A: PLACE SEARCH ("где поесть", "хочу кофе"):
→ 1 section, 2-3 options to choose from.

MODE B: FULL DAY PLAN (schedule, trip, meeting, business trip):
→ Build a sequential timeline of 4-8 sections. EVERY section MUST have a "timeRange".
→ Each activity section = 1 recommended place + 1-2 reserveIds.
→ If the user mentions a meeting/event/flight, include it as a MARKER section with "options":[] and "reserveIds":[] (empty arrays). The meeting must appear in the timeline.
→ Plan activities BEFORE and AFTER the meeting. Ensure smooth flow: morning→lunch→meeting→evening→night.
→ Account for travel time between places. Cluster nearby venues.

EXAMPLE of a meeting marker section:
{{"title":"Деловая встреча","emoji":"🤝","timeRange":"15:00–16:00","options":[],"reserveIds":[]}}

JSON FORMAT (ONLY valid JSON, no markdown):
{{"title":"Catchy title","sections":[{{"title":"Activity","emoji":"emoji","timeRange":"HH:MM–HH:MM","options":[{{"id":"uuid","why":"2-3 sentences WHY this fits the user","budget":"Xk KZT"}}],"reserveIds":["backup-uuid"]}}]}}

RULES:
- In MODE B every section MUST have "timeRange" in format "HH:MM–HH:MM".
- Every "id" MUST match an id from the list. Non-matching ids are rejected.
- "why" must reference the user's specific context (age, purpose, mood, schedule).
- Budget from price_level: 0=бесплатно, 1=2-5k, 2=5-10k, 3=10-15k, 4=15-25k, 5=25k+ KZT.
- NEVER invent places, addresses, amenities or details not in the data.
- NEVER repeat IDs across sections.
- Respond in Russian for Russian queries, English for English."""


class PlanSynthesizer:
    """Structured plan generation with a prioritized list of models."""

    def __init__(
        self,
        llm: LLMClient,
        settings: Settings | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._llm = llm
        self._settings = settings or get_settings()
        self._metrics = metrics

    @property
    def available(self) -> bool:
        return self._llm.available

    def _fail(self, model: str, reason: str, message: str) -> str:
        logger.warning(
            f"Synthesis model {model} failed: {message}",
            extra={"model": model, "reason": reason},
        )
        if self._metrics:
            self._metrics.inc_synthesis_failure(model, reason)
        return f"{model}: {message}"

    async def synthesize(
        self,
        intent: str,
        interests: Sequence[str],
        candidates: Sequence[CatalogPlace],
        city: str,
        user_location: Geo | None = None,
    ) -> SynthesisDraft:
        """
        Produce a validated plan draft from the candidate set.

        Models are tried in priority order; the first response that parses
        and keeps at least one section after id validation wins.

        Raises:
            SynthesisError: If every model fails
        """
        prompt = build_synthesis_prompt(intent, interests, candidates, city)
        candidate_map = {p.id: p for p in candidates}
        errors: list[str] = []

        for model in self._settings.synthesis_models:
            logger.info(f"Calling synthesis model {model} with {len(candidates)} places")
            call = await call_with_deadline(
                self._llm.complete(
                    model,
                    prompt,
                    temperature=self._settings.synthesis_temperature,
                    max_tokens=self._settings.synthesis_max_tokens,
                ),
                self._settings.synthesis_timeout_s,
                f"synthesis:{model}",
            )
            if call.status == "timeout":
                errors.append(self._fail(model, "timeout", "timed out"))
                continue
            if not call.ok:
                errors.append(self._fail(model, "api_error", call.error or "error"))
                continue

            text = call.value or ""
            if not text.strip():
                errors.append(self._fail(model, "empty", "empty response"))
                continue

            try:
                data = parse_json_object(text)
            except ValueError as e:
                errors.append(self._fail(model, "invalid_json", str(e)))
                continue

            try:
                result = SynthesisResult.model_validate(data)
            except ValidationError as e:
                errors.append(self._fail(model, "invalid_structure", str(e)))
                continue
            if not result.sections:
                errors.append(self._fail(model, "invalid_structure", "no sections"))
                continue

            sections, stats = validate_synthesis_ids(result, set(candidate_map))
            if self._metrics:
                self._metrics.observe_id_validation(
                    stats.valid, stats.hallucinated, stats.duplicates
                )
            if not any(s.options for s in sections):
                errors.append(
                    self._fail(
                        model,
                        "all_hallucinated",
                        f"all place ids were rejected ({stats.hallucinated}/{stats.total})",
                    )
                )
                continue

            logger.info(
                f"Synthesis model {model} returned {len(sections)} sections "
                f"({stats.hallucinated} hallucinated ids removed)"
            )
            return SynthesisDraft(
                title=result.title,
                sections=[
                    self._build_section(s, candidate_map, user_location)
                    for s in sections
                ],
            )

        raise SynthesisError("; ".join(errors) or "No synthesis models configured")

    def _build_section(
        self,
        section: SynthesisSection,
        candidate_map: dict[str, CatalogPlace],
        user_location: Geo | None,
    ) -> PlanSection:
        """Project a validated model section into plan options."""
        if not section.options:
            return PlanSection(
                title=section.title,
                emoji=section.emoji or MARKER_EMOJI,
                time_range=section.time_range,
            )

        options = [
            build_option(
                candidate_map[o.id],
                o.why or candidate_map[o.id].description,
                user_location,
                budget_hint=o.budget or None,
            )
            for o in section.options
        ]
        reserves = [
            build_option(
                candidate_map[rid],
                candidate_map[rid].description or RESERVE_DEFAULT_WHY,
                user_location,
            )
            for rid in section.reserve_ids
        ]
        return PlanSection(
            title=section.title,
            emoji=section.emoji or DEFAULT_EMOJI,
            time_range=section.time_range,
            options=options,
            reserves=reserves,
        )
