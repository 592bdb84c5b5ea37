"""Semantic validation: embedding similarity between justification and catalog text."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from travelme.engine.adapters.llm import LLMClient
from travelme.engine.config import Settings, get_settings
from travelme.engine.exec import call_with_deadline
from travelme.engine.metrics.registry import MetricsClient
from travelme.engine.models.catalog import CatalogPlace
from travelme.engine.models.common import ConfidenceLevel
from travelme.engine.models.plan import Plan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SemanticScore:
    """Similarity of one option's justification to its catalog entry."""

    score: float
    level: ConfidenceLevel


def catalog_text(place: CatalogPlace) -> str:
    """Comparison text for a place: description, tags, type, title."""
    parts = [place.description, ", ".join(place.tags), place.type, place.title]
    return ". ".join(part for part in parts if part)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity clamped to [0, 1]; 0 for empty or mismatched vectors."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.size == 0 or va.shape != vb.shape:
        return 0.0
    denom = np.linalg.norm(va) * np.linalg.norm(vb)
    if denom == 0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / denom, 0.0, 1.0))


class SemanticValidator:
    """Scores every option and reserve against its catalog description."""

    def __init__(
        self,
        llm: LLMClient,
        settings: Settings | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._llm = llm
        self._settings = settings or get_settings()
        self._metrics = metrics

    def classify(self, score: float) -> ConfidenceLevel:
        if score >= self._settings.semantic_verified_threshold:
            return ConfidenceLevel.verified
        if score >= self._settings.semantic_ai_generated_threshold:
            return ConfidenceLevel.ai_generated
        return ConfidenceLevel.low_confidence

    def _skip(self, reason: str) -> dict[str, SemanticScore]:
        logger.warning(f"Semantic validation skipped: {reason}")
        if self._metrics:
            self._metrics.inc_validator_skip("semantic")
        return {}

    async def compute_scores(
        self, plan: Plan, place_map: Mapping[str, CatalogPlace]
    ) -> dict[str, SemanticScore]:
        """
        Embed each justification next to its catalog text and compare them.

        Returns:
            Scores keyed by place id; empty when the check was skipped
        """
        pairs: list[tuple[str, str, str]] = []
        for option in plan.iter_options(include_reserves=True):
            place = place_map.get(option.stop.id)
            if place is None:
                continue
            pairs.append((place.id, option.why, catalog_text(place)))

        if not pairs:
            return {}
        if not self._llm.available:
            return self._skip("no LLM credentials")

        # Interleaved: [why0, catalog0, why1, catalog1, ...]
        max_chars = self._settings.embedding_max_chars
        texts = [
            text[:max_chars] for _, why, db in pairs for text in (why, db)
        ]

        call = await call_with_deadline(
            self._llm.embed(texts, self._settings.embedding_model),
            self._settings.embedding_timeout_s,
            "embedding",
        )
        if not call.ok:
            return self._skip(f"embedding call {call.status}")

        vectors = call.value or []
        if len(vectors) != len(texts):
            return self._skip(f"got {len(vectors)}/{len(texts)} embeddings")

        scores: dict[str, SemanticScore] = {}
        for i, (place_id, _, _) in enumerate(pairs):
            score = cosine_similarity(vectors[2 * i], vectors[2 * i + 1])
            level = self.classify(score)
            scores[place_id] = SemanticScore(score=score, level=level)
            logger.debug(f"{place_id[:8]}... similarity={score:.3f} -> {level.value}")
        return scores


def apply_semantic_scores(
    plan: Plan,
    scores: Mapping[str, SemanticScore],
    place_map: Mapping[str, CatalogPlace],
    metrics: MetricsClient | None = None,
) -> None:
    """
    Write semantic confidence onto options and reserves in place.

    A low-confidence justification is replaced with the catalog description
    and labeled ai_generated; its confidence stays below the ai_generated
    threshold, which marks it as swapped.
    """
    for option in plan.iter_options(include_reserves=True):
        scored = scores.get(option.stop.id)
        if scored is None:
            continue

        option.confidence = scored.score
        option.confidence_level = scored.level

        if scored.level == ConfidenceLevel.low_confidence:
            place = place_map.get(option.stop.id)
            if place is not None and place.description:
                option.why = place.description
                option.confidence_level = ConfidenceLevel.ai_generated
                logger.info(
                    f"Replaced low-confidence justification for {option.stop.id[:8]}... "
                    "with catalog description"
                )
                if metrics:
                    metrics.inc_low_confidence_swap()
