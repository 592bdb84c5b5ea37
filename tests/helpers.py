"""Shared builders and fakes for engine tests."""

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

from travelme.engine.config import Settings
from travelme.engine.models import (
    CatalogPlace,
    CityRecord,
    ConfidenceLevel,
    Geo,
    Plan,
    PlanOption,
    PlanSection,
    ReviewSummary,
)
from travelme.engine.planning.stops import build_option

ALMATY_ID = "c-almaty"
ASTANA_ID = "c-astana"


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from any .env file, with a usable API key."""
    values: dict[str, Any] = {
        "openai_api_key": "sk-test-key",
        "synthesis_models": ["model-a", "model-b"],
        "synthesis_timeout_s": 0.5,
        "judge_timeout_s": 0.2,
        "embedding_timeout_s": 0.2,
        "enrich_travel_times": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_place(
    place_id: str,
    title: str | None = None,
    type: str = "cafe",
    tags: Sequence[str] = (),
    rating: float | None = None,
    description: str = "",
    location: Geo | None = None,
    price_level: int = 0,
    city_id: str = ALMATY_ID,
    safety_score: int = 90,
) -> CatalogPlace:
    return CatalogPlace(
        id=place_id,
        title=title or place_id.title(),
        type=type,
        tags=tuple(tags),
        rating=rating,
        description=description,
        location=location,
        price_level=price_level,
        city_id=city_id,
        safety_score=safety_score,
        reviews=ReviewSummary(count=12, average=4.5),
    )


def almaty_catalog() -> list[CatalogPlace]:
    return [
        make_place(
            "p-cafe1",
            "Coffee Boom",
            "cafe",
            ("coffee", "cafe", "cozy"),
            rating=4.8,
            description="Specialty coffee shop with fresh pastries",
            location=Geo(lat=43.238, lon=76.945),
            price_level=1,
        ),
        make_place(
            "p-cafe2",
            "Nomad Cafe",
            "cafe",
            ("cafe", "breakfast"),
            rating=4.5,
            description="Breakfast cafe near the park",
            location=Geo(lat=43.25, lon=76.93),
            price_level=2,
        ),
        make_place(
            "p-rest1",
            "Navat",
            "restaurant",
            ("kazakh", "traditional", "dinner"),
            rating=4.6,
            description="Traditional Kazakh cuisine",
            location=Geo(lat=43.26, lon=76.95),
            price_level=3,
        ),
        make_place(
            "p-museum",
            "Central State Museum",
            "museum",
            ("museum", "history", "culture"),
            rating=4.4,
            description="National history museum",
        ),
        make_place(
            "p-park",
            "Panfilov Park",
            "park",
            ("park", "outdoor", "walking"),
            rating=4.7,
            description="",
            location=Geo(lat=43.258, lon=76.955),
        ),
        make_place(
            "p-bar",
            "Esentai Rooftop",
            "bar",
            ("bar", "rooftop", "nightlife"),
            description="Rooftop cocktail bar",
            price_level=4,
        ),
        make_place(
            "p-baiterek",
            "Baiterek",
            "landmark",
            ("view", "landmark"),
            rating=4.9,
            description="Observation tower",
            city_id=ASTANA_ID,
        ),
    ]


def cities() -> list[CityRecord]:
    return [
        CityRecord(id=ALMATY_ID, name="Almaty"),
        CityRecord(id=ASTANA_ID, name="Astana"),
        CityRecord(id="c-almaty-dup", name="ALMATY"),
    ]


def place_map(places: Sequence[CatalogPlace]) -> dict[str, CatalogPlace]:
    return {p.id: p for p in places}


def option_for(place: CatalogPlace, why: str | None = None) -> PlanOption:
    return build_option(place, why if why is not None else place.description)


def make_plan(
    sections: Sequence[tuple[Sequence[CatalogPlace], Sequence[CatalogPlace]]],
    scored_pool: Sequence[str] = (),
) -> Plan:
    """Plan from (options, reserves) place lists, one tuple per section."""
    return Plan(
        title="Test plan",
        sections=[
            PlanSection(
                title=f"Section {i}",
                options=[option_for(p) for p in options],
                reserves=[option_for(p) for p in reserves],
            )
            for i, (options, reserves) in enumerate(sections)
        ],
        scored_pool=list(scored_pool),
    )


class FakeLLMClient:
    """In-memory LLMClient.

    ``completions`` maps a model name to a response string, an exception to
    raise, or a callable taking the prompt. ``embed_fn`` maps the text batch
    to vectors. Delays simulate slow calls.
    """

    def __init__(
        self,
        completions: dict[str, Any] | None = None,
        embed_fn: Callable[[list[str]], list[list[float]]] | None = None,
        available: bool = True,
        complete_delay: float = 0.0,
        embed_delay: float = 0.0,
    ) -> None:
        self.completions = completions or {}
        self.embed_fn = embed_fn
        self._available = available
        self.complete_delay = complete_delay
        self.embed_delay = embed_delay
        self.complete_calls: list[tuple[str, str]] = []
        self.embed_calls: list[list[str]] = []

    @property
    def available(self) -> bool:
        return self._available

    async def complete(
        self,
        model: str,
        prompt: str,
        *,
        temperature: float,
        max_tokens: int,
        system: str | None = None,
    ) -> str:
        self.complete_calls.append((model, prompt))
        if self.complete_delay:
            await asyncio.sleep(self.complete_delay)
        response = self.completions.get(model, "")
        if isinstance(response, Exception):
            raise response
        if callable(response):
            response = response(prompt)
        return response

    async def embed(self, texts: list[str], model: str) -> list[list[float]]:
        self.embed_calls.append(list(texts))
        if self.embed_delay:
            await asyncio.sleep(self.embed_delay)
        if self.embed_fn is None:
            raise RuntimeError("embeddings unavailable")
        return self.embed_fn(texts)


def char_histogram(texts: list[str]) -> list[list[float]]:
    """Deterministic embedding: identical texts give identical vectors."""
    vectors = []
    for text in texts:
        vec = [0.0] * 64
        for ch in text:
            vec[ord(ch) % 64] += 1.0
        vectors.append(vec)
    return vectors


def orthogonal_pairs(texts: list[str]) -> list[list[float]]:
    """Embedding where every justification is orthogonal to its catalog text."""
    return [[1.0, 0.0] if i % 2 == 0 else [0.0, 1.0] for i in range(len(texts))]


def confidence_snapshot(plan: Plan) -> list[tuple[str, float, ConfidenceLevel, str]]:
    return [
        (o.stop.id, o.confidence, o.confidence_level, o.why)
        for o in plan.iter_options(include_reserves=True)
    ]
