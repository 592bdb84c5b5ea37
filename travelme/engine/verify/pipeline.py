"""Concurrent anti-hallucination pipeline over a freshly built plan."""

import asyncio
import logging
from collections.abc import Mapping

from travelme.engine.metrics.registry import MetricsClient
from travelme.engine.models.catalog import CatalogPlace
from travelme.engine.models.llm import JudgeVerdict
from travelme.engine.models.plan import Plan

from .judge import LLMJudge, apply_judge_verdict
from .semantic import SemanticValidator, apply_semantic_scores

logger = logging.getLogger(__name__)


class AntiHallucinationPipeline:
    """Runs the semantic validator and the judge side by side.

    Each check has its own deadline; one failing never cancels the other.
    Semantic scores are applied before the judge verdict.
    """

    def __init__(
        self,
        semantic: SemanticValidator,
        judge: LLMJudge,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._semantic = semantic
        self._judge = judge
        self._metrics = metrics

    async def run(
        self, plan: Plan, place_map: Mapping[str, CatalogPlace], city: str
    ) -> None:
        """Validate the plan in place. Never raises."""
        semantic_task = asyncio.create_task(
            self._semantic.compute_scores(plan, place_map)
        )
        judge_task = asyncio.create_task(self._judge.judge(plan, place_map, city))
        semantic_result, judge_result = await asyncio.gather(
            semantic_task, judge_task, return_exceptions=True
        )

        if isinstance(semantic_result, BaseException):
            logger.warning(f"Semantic scoring failed (skipped): {semantic_result}")
            if self._metrics:
                self._metrics.inc_validator_skip("semantic")
        elif semantic_result:
            apply_semantic_scores(plan, semantic_result, place_map, self._metrics)

        if isinstance(judge_result, BaseException):
            logger.warning(f"LLM judge failed (skipped): {judge_result}")
            if self._metrics:
                self._metrics.inc_validator_skip("judge")
        elif isinstance(judge_result, JudgeVerdict):
            apply_judge_verdict(plan, judge_result)

        logger.info("Anti-hallucination pipeline complete")
