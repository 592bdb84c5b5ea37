"""End-to-end tests for plan generation with fake collaborators."""

import asyncio
import json
import threading

import pytest

from travelme.engine.adapters.catalog import CatalogRepository, StaticCatalogSource
from travelme.engine.exceptions import NoPlacesForCityError
from travelme.engine.models import Geo, PlanRequest, Route, RouteSegment
from travelme.engine.planning.enrichment import TravelTimeEnricher
from travelme.engine.planning.planner import TravelPlanner
from travelme.engine.planning.synthesizer import PlanSynthesizer
from travelme.engine.verify.judge import LLMJudge
from travelme.engine.verify.pipeline import AntiHallucinationPipeline
from travelme.engine.verify.semantic import SemanticValidator
from tests.helpers import FakeLLMClient, almaty_catalog, cities, make_settings


class RecordingRouting:
    def __init__(self):
        self.calls = []

    async def get_route(self, waypoints, mode):
        self.calls.append(list(waypoints))
        return Route(
            segments=[
                RouteSegment(from_geo=a, to_geo=b, duration_minutes=7, distance_km=0.5)
                for a, b in zip(waypoints, waypoints[1:])
            ]
        )


def build_planner(llm, settings, metrics=None, places=None, enricher=None):
    repository = CatalogRepository(
        StaticCatalogSource(almaty_catalog() if places is None else places, cities())
    )
    return TravelPlanner(
        repository=repository,
        synthesizer=PlanSynthesizer(llm, settings, metrics),
        pipeline=AntiHallucinationPipeline(
            SemanticValidator(llm, settings, metrics),
            LLMJudge(llm, settings, metrics),
            metrics,
        ),
        enricher=enricher,
        settings=settings,
        metrics=metrics,
    )


SYNTHESIS_RESPONSE = json.dumps(
    {
        "title": "Утро в Алматы",
        "sections": [
            {
                "title": "Кофе",
                "emoji": "☕",
                "timeRange": "09:00–10:00",
                "options": [{"id": "p-cafe1", "why": "Лучший кофе рядом", "budget": "3k KZT"}],
                "reserveIds": ["p-cafe2", "p-ghost"],
            },
            {
                "title": "Прогулка",
                "emoji": "🌿",
                "timeRange": "10:00–11:30",
                "options": [{"id": "p-park", "why": "Тенистые аллеи"}],
                "reserveIds": [],
            },
        ],
    },
    ensure_ascii=False,
)


@pytest.mark.asyncio
async def test_fallback_plan_without_credentials(no_key_settings, metrics):
    """Test the coffee request with no key: grouped fallback, keyword title."""
    llm = FakeLLMClient(available=False)
    planner = build_planner(llm, no_key_settings, metrics)

    plan = await planner.generate_plan(PlanRequest(intent="хочу кофе", city="Almaty"))

    assert plan.title == "Кофейни — Almaty"
    first = plan.sections[0]
    assert first.title == "Кофе и завтрак"
    assert first.emoji == "☕"
    assert [o.stop.id for o in first.options] == ["p-cafe1", "p-cafe2"]
    assert [s.title for s in plan.sections] == [
        "Кофе и завтрак",
        "Прогулка",
        "Обед / Ужин",
        "Культура",
        "Вечер",
    ]
    assert "p-baiterek" not in plan.place_ids()
    assert plan.scored_pool == []
    assert all(o.confidence == 1.0 for o in plan.iter_options())
    assert metrics.fallback_plans == 1
    assert llm.complete_calls == []
    assert llm.embed_calls == []


@pytest.mark.asyncio
async def test_synthesized_plan_keeps_only_catalog_ids(settings, metrics):
    """Test the synthesis path: hallucinated ids dropped, pool excludes used ids."""
    llm = FakeLLMClient(completions={"model-a": SYNTHESIS_RESPONSE})
    planner = build_planner(llm, settings, metrics)

    plan = await planner.generate_plan(
        PlanRequest(intent="хочу кофе", city="almaty", interests='["coffee"]')
    )

    assert plan.title == "Утро в Алматы"
    assert [s.time_range for s in plan.sections] == ["09:00–10:00", "10:00–11:30"]
    coffee = plan.sections[0]
    assert coffee.options[0].why == "Лучший кофе рядом"
    assert coffee.options[0].budget_hint == "3k KZT"
    assert [r.stop.id for r in coffee.reserves] == ["p-cafe2"]
    assert plan.sections[1].options[0].budget_hint == "Бесплатно"
    assert plan.scored_pool == ["p-rest1", "p-museum", "p-bar"]
    assert metrics.hallucinated_ids == 1
    assert metrics.fallback_plans == 0


@pytest.mark.asyncio
async def test_fabricated_only_response_falls_back(settings, metrics):
    """Test that a response naming no catalog place yields the fallback plan."""
    fabricated = json.dumps(
        {"sections": [{"title": "Кофе", "options": [{"id": "fake-1"}, {"id": "fake-2"}], "reserveIds": []}]}
    )
    llm = FakeLLMClient(completions={"model-a": fabricated, "model-b": fabricated})
    planner = build_planner(llm, settings, metrics)

    plan = await planner.generate_plan(PlanRequest(intent="хочу кофе", city="Almaty"))

    assert plan.title == "Кофейни — Almaty"
    assert plan.sections[0].title == "Кофе и завтрак"
    assert [o.stop.id for o in plan.sections[0].options] == ["p-cafe1", "p-cafe2"]
    assert metrics.fallback_plans == 1
    assert metrics.get_synthesis_failure_count("model-b", "all_hallucinated") == 1


@pytest.mark.asyncio
async def test_catalog_reads_stay_off_the_event_loop(no_key_settings):
    """Test that both the place and the city lookups run in worker threads."""
    loop_thread = threading.get_ident()
    fetch_threads: dict[str, int] = {}

    class ThreadRecordingSource(StaticCatalogSource):
        def fetch_places(self):
            fetch_threads["places"] = threading.get_ident()
            return super().fetch_places()

        def fetch_cities(self):
            fetch_threads["cities"] = threading.get_ident()
            return super().fetch_cities()

    llm = FakeLLMClient(available=False)
    planner = TravelPlanner(
        repository=CatalogRepository(ThreadRecordingSource(almaty_catalog(), cities())),
        synthesizer=PlanSynthesizer(llm, no_key_settings),
        pipeline=AntiHallucinationPipeline(
            SemanticValidator(llm, no_key_settings), LLMJudge(llm, no_key_settings)
        ),
        settings=no_key_settings,
    )

    await planner.generate_plan(PlanRequest(intent="кофе", city="Almaty"))

    assert set(fetch_threads) == {"places", "cities"}
    assert loop_thread not in fetch_threads.values()


@pytest.mark.asyncio
async def test_synthesis_failure_falls_back(settings, metrics):
    """Test that every model failing yields the fallback plan."""
    llm = FakeLLMClient(completions={"model-a": "not json", "model-b": "{}"})
    planner = build_planner(llm, settings, metrics)

    plan = await planner.generate_plan(PlanRequest(intent="музей", city="Almaty"))

    assert plan.title == "Культура — Almaty"
    assert plan.sections
    assert metrics.fallback_plans == 1
    assert metrics.get_synthesis_failure_count("model-a", "invalid_json") == 1
    assert metrics.get_synthesis_failure_count("model-b", "invalid_structure") == 1


@pytest.mark.asyncio
async def test_max_candidates_limits_plan_and_fills_pool(no_key_settings):
    """Test that only top candidates are planned and the rest form the pool."""
    settings = no_key_settings.model_copy(update={"max_candidates": 2})
    planner = build_planner(FakeLLMClient(available=False), settings)

    plan = await planner.generate_plan(PlanRequest(intent="хочу кофе", city="Almaty"))

    [section] = plan.sections
    assert section.title == "Рекомендации"
    assert [o.stop.id for o in section.options] == ["p-cafe1", "p-cafe2"]
    assert plan.scored_pool == ["p-park", "p-rest1", "p-museum", "p-bar"]


@pytest.mark.asyncio
async def test_empty_catalog_raises_no_places(no_key_settings):
    """Test that a city with nothing to plan from is an error."""
    planner = build_planner(FakeLLMClient(available=False), no_key_settings, places=[])

    with pytest.raises(NoPlacesForCityError) as exc_info:
        await planner.generate_plan(PlanRequest(intent="кофе", city="Almaty"))

    assert exc_info.value.city == "Almaty"
    assert "No places found for Almaty" in str(exc_info.value)


@pytest.mark.asyncio
@pytest.mark.parametrize("enabled", [True, False])
async def test_enrichment_is_scheduled_only_when_enabled(no_key_settings, enabled):
    """Test the travel-time toggle."""
    settings = no_key_settings.model_copy(update={"enrich_travel_times": enabled})
    routing = RecordingRouting()
    enricher = TravelTimeEnricher(routing)
    planner = build_planner(FakeLLMClient(available=False), settings, enricher=enricher)

    plan = await planner.generate_plan(
        PlanRequest(intent="хочу кофе", city="Almaty", user_location=Geo(lat=43.24, lon=76.94))
    )
    await asyncio.sleep(0.05)

    assert enricher.pending == 0
    if enabled:
        assert len(routing.calls) == 1
        assert plan.sections[0].options[1].stop.walking_time == "7 мин · 500 м"
    else:
        assert routing.calls == []
        assert plan.sections[0].options[1].stop.walking_time is None
