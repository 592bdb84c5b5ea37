"""Deterministic section builder used when plan synthesis is unavailable."""

import logging
from collections.abc import Sequence

from travelme.engine.models.catalog import CatalogPlace
from travelme.engine.models.common import Geo
from travelme.engine.models.plan import PlanOption, PlanSection

from .stops import build_option
from .tables import CATEGORY_SECTIONS

logger = logging.getLogger(__name__)

MAX_SECTIONS = 6
MAX_FALLBACK_OPTIONS = 2
MAX_FALLBACK_RESERVES = 2
FLAT_SECTION_SIZE = 3
FLAT_SECTION_TITLE = "Рекомендации"
FLAT_SECTION_EMOJI = "✨"
DEFAULT_EMOJI = "📍"
DEFAULT_TITLE = "Рекомендация"


def _fallback_option(
    place: CatalogPlace, city: str, user_location: Geo | None
) -> PlanOption:
    return build_option(
        place, place.description or f"Популярное место в {city}", user_location
    )


def _flat_section(
    candidates: Sequence[CatalogPlace], city: str, user_location: Geo | None
) -> PlanSection:
    return PlanSection(
        title=FLAT_SECTION_TITLE,
        emoji=FLAT_SECTION_EMOJI,
        options=[
            _fallback_option(p, city, user_location)
            for p in candidates[:FLAT_SECTION_SIZE]
        ],
    )


def build_fallback_sections(
    candidates: Sequence[CatalogPlace],
    city: str,
    user_location: Geo | None = None,
) -> list[PlanSection]:
    """
    Group candidates into category sections without calling a model.

    Candidates are walked in rank order. Each is added to the section for
    its category: as an option while that section has fewer than two, then
    as a reserve while it has fewer than two reserves; otherwise a new
    section with the same category is opened. Building stops once six
    sections exist and another would be needed.

    Args:
        candidates: Ranked catalog places
        city: City name used in default justifications
        user_location: Optional user position for stop distances

    Returns:
        At least one section whenever candidates is non-empty
    """
    if not candidates:
        return []

    if len(candidates) <= FLAT_SECTION_SIZE:
        return [_flat_section(candidates, city, user_location)]

    sections: list[PlanSection] = []
    used_ids: set[str] = set()

    for place in candidates:
        if place.id in used_ids:
            continue

        emoji, title = CATEGORY_SECTIONS.get(
            place.type.lower(), (DEFAULT_EMOJI, place.type or DEFAULT_TITLE)
        )
        option = _fallback_option(place, city, user_location)

        target = next(
            (
                s
                for s in sections
                if s.title == title
                and (
                    len(s.options) < MAX_FALLBACK_OPTIONS
                    or len(s.reserves) < MAX_FALLBACK_RESERVES
                )
            ),
            None,
        )
        if target is not None:
            if len(target.options) < MAX_FALLBACK_OPTIONS:
                target.options.append(option)
            else:
                target.reserves.append(option)
        elif len(sections) >= MAX_SECTIONS:
            break
        else:
            sections.append(PlanSection(title=title, emoji=emoji, options=[option]))
        used_ids.add(place.id)

    if not sections:
        logger.warning("Fallback grouping produced no sections, using flat list")
        return [_flat_section(candidates, city, user_location)]

    logger.info(
        f"Built {len(sections)} fallback sections from {len(candidates)} candidates"
    )
    return sections
