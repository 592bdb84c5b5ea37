"""Request orchestration: catalog to scored candidates to a validated plan."""

import asyncio
import logging

from travelme.engine.adapters.catalog import CatalogRepository, SqlCatalogSource
from travelme.engine.adapters.llm import OpenAILLMClient
from travelme.engine.adapters.routing import RoutingClient
from travelme.engine.config import Settings, get_settings
from travelme.engine.db.base import get_engine, get_session_factory
from travelme.engine.exceptions import NoPlacesForCityError, SynthesisError
from travelme.engine.metrics.registry import MetricsClient
from travelme.engine.models.catalog import CatalogPlace
from travelme.engine.models.plan import Plan, PlanSection
from travelme.engine.models.request import PlanRequest
from travelme.engine.verify.judge import LLMJudge
from travelme.engine.verify.pipeline import AntiHallucinationPipeline
from travelme.engine.verify.semantic import SemanticValidator

from .enrichment import TravelTimeEnricher
from .fallback import build_fallback_sections
from .scoring import score_places
from .synthesizer import PlanSynthesizer
from .titles import guess_title

logger = logging.getLogger(__name__)


class TravelPlanner:
    """Builds a plan for one request from its collaborators."""

    def __init__(
        self,
        repository: CatalogRepository,
        synthesizer: PlanSynthesizer,
        pipeline: AntiHallucinationPipeline,
        enricher: TravelTimeEnricher | None = None,
        settings: Settings | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._repository = repository
        self._synthesizer = synthesizer
        self._pipeline = pipeline
        self._enricher = enricher
        self._settings = settings or get_settings()
        self._metrics = metrics

    async def generate_plan(self, request: PlanRequest) -> Plan:
        """
        Generate a validated plan for the request.

        Raises:
            NoPlacesForCityError: If the catalog has no places for the city
        """
        catalog = await asyncio.to_thread(self._repository.load_catalog)
        city_places = await asyncio.to_thread(
            self._repository.filter_by_city, catalog, request.city
        )
        if not city_places:
            raise NoPlacesForCityError(request.city)

        logger.info(
            f"City: {request.city}, places: {len(catalog)} -> {len(city_places)}, "
            f"interests: [{', '.join(request.interests)}]"
        )

        scored = score_places(
            city_places, request.interests, request.intent, request.user_location
        )
        candidates = [s.place for s in scored[: self._settings.max_candidates]]

        title, sections = await self._build_sections(request, candidates)

        used_ids = {
            option.stop.id for section in sections for option in section.all_options()
        }
        scored_pool = [s.place.id for s in scored if s.place.id not in used_ids]
        plan = Plan(title=title, sections=sections, scored_pool=scored_pool)
        logger.info(
            f"Title: {title!r}, sections: {len(sections)}, pool: {len(scored_pool)}"
        )

        place_map = {p.id: p for p in city_places}
        await self._pipeline.run(plan, place_map, request.city)

        if self._enricher is not None and self._settings.enrich_travel_times:
            self._enricher.schedule(plan)
        return plan

    async def _build_sections(
        self, request: PlanRequest, candidates: list[CatalogPlace]
    ) -> tuple[str, list[PlanSection]]:
        if self._synthesizer.available and candidates:
            try:
                draft = await self._synthesizer.synthesize(
                    request.intent,
                    request.interests,
                    candidates,
                    request.city,
                    request.user_location,
                )
            except SynthesisError as e:
                logger.warning(f"Synthesis failed, using fallback: {e}")
            else:
                return draft.title or guess_title(request.intent, request.city), draft.sections
        else:
            logger.info("No LLM key configured, using fallback sections")

        if self._metrics:
            self._metrics.inc_fallback_plan()
        return (
            guess_title(request.intent, request.city),
            build_fallback_sections(candidates, request.city, request.user_location),
        )


def create_planner(
    settings: Settings | None = None, metrics: MetricsClient | None = None
) -> TravelPlanner:
    """Wire a planner against the SQL catalog, OpenAI and the routing service."""
    settings = settings or get_settings()
    llm = OpenAILLMClient(settings)
    repository = CatalogRepository(
        SqlCatalogSource(get_session_factory(get_engine(settings))),
        ttl_seconds=settings.catalog_ttl_seconds,
    )
    return TravelPlanner(
        repository=repository,
        synthesizer=PlanSynthesizer(llm, settings, metrics),
        pipeline=AntiHallucinationPipeline(
            SemanticValidator(llm, settings, metrics),
            LLMJudge(llm, settings, metrics),
            metrics,
        ),
        enricher=TravelTimeEnricher(RoutingClient(settings), metrics),
        settings=settings,
        metrics=metrics,
    )
