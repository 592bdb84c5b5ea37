"""Relevance scoring of catalog places against intent and interests."""

import logging
from collections.abc import Sequence

from travelme.engine.models.catalog import CatalogPlace, ScoredPlace
from travelme.engine.models.common import Geo
from travelme.engine.utils.geo import haversine_km

from .tables import INTEREST_TAG_MAP, PROMPT_TAG_MAP

logger = logging.getLogger(__name__)

# Score weights
INTEREST_TAG_WEIGHT = 3
INTEREST_TYPE_WEIGHT = 2
PROMPT_TAG_WEIGHT = 4
PROMPT_TYPE_WEIGHT = 3
TITLE_WORD_WEIGHT = 5
TYPE_WORD_WEIGHT = 3
MIN_WORD_LENGTH = 3

# (min rating, bonus); both bonuses stack
RATING_BONUSES = ((4.7, 2), (4.5, 1))

# (max distance km, bonus); first match wins
PROXIMITY_BONUSES = ((1.0, 5), (3.0, 3), (5.0, 1))


def _interest_tags(interests: Sequence[str]) -> set[str]:
    tags: set[str] = set()
    for interest in interests:
        tags.update(INTEREST_TAG_MAP.get(interest.lower(), ()))
    return tags


def _prompt_tags(words: Sequence[str]) -> set[str]:
    tags: set[str] = set()
    for word in words:
        for key, key_tags in PROMPT_TAG_MAP.items():
            if key in word or word in key:
                tags.update(key_tags)
    return tags


def _proximity_bonus(distance_km: float) -> int:
    for max_km, bonus in PROXIMITY_BONUSES:
        if distance_km < max_km:
            return bonus
    return 0


def score_place(
    place: CatalogPlace,
    interest_tags: set[str],
    prompt_tags: set[str],
    words: Sequence[str],
    user_location: Geo | None = None,
) -> ScoredPlace:
    """Score a single place against precomputed tag sets."""
    score = 0.0
    place_tags = [t.lower() for t in place.tags]
    place_type = place.type.lower()
    place_title = place.title.lower()

    score += INTEREST_TAG_WEIGHT * sum(1 for t in place_tags if t in interest_tags)
    if place_type in interest_tags:
        score += INTEREST_TYPE_WEIGHT

    score += PROMPT_TAG_WEIGHT * sum(1 for t in place_tags if t in prompt_tags)
    if place_type in prompt_tags:
        score += PROMPT_TYPE_WEIGHT

    for word in words:
        if len(word) < MIN_WORD_LENGTH:
            continue
        if word in place_title:
            score += TITLE_WORD_WEIGHT
        if word in place_type:
            score += TYPE_WORD_WEIGHT

    if place.rating is not None:
        for min_rating, bonus in RATING_BONUSES:
            if place.rating >= min_rating:
                score += bonus

    distance_km = None
    if user_location is not None and place.location is not None:
        distance_km = haversine_km(user_location, place.location)
        score += _proximity_bonus(distance_km)

    return ScoredPlace(place=place, score=score, distance_km=distance_km)


def score_places(
    catalog: Sequence[CatalogPlace],
    interests: Sequence[str],
    intent: str,
    user_location: Geo | None = None,
) -> list[ScoredPlace]:
    """
    Rank catalog places by relevance to the request.

    Sorted by descending score; ties by ascending distance, with places of
    unknown distance after those with a known one; remaining ties keep
    catalog order. Pure and deterministic.

    Args:
        catalog: Places to score
        interests: Declared interests, e.g. ["food", "culture"]
        intent: Free-text request
        user_location: Optional user position for proximity bonuses

    Returns:
        Every place in catalog, scored and ranked
    """
    words = intent.lower().split()
    interest_tags = _interest_tags(interests)
    prompt_tags = _prompt_tags(words)

    scored = [
        score_place(place, interest_tags, prompt_tags, words, user_location)
        for place in catalog
    ]
    scored.sort(
        key=lambda s: (
            -s.score,
            s.distance_km is None,
            s.distance_km if s.distance_km is not None else 0.0,
        )
    )

    logger.debug(
        f"Scored {len(scored)} places: {len(interest_tags)} interest tags, "
        f"{len(prompt_tags)} prompt tags"
    )
    return scored
