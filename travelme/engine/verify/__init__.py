"""Anti-hallucination checks: embedding similarity and an LLM judge."""

from .judge import LLMJudge, apply_judge_verdict
from .pipeline import AntiHallucinationPipeline
from .semantic import SemanticScore, SemanticValidator, apply_semantic_scores

__all__ = [
    "AntiHallucinationPipeline",
    "LLMJudge",
    "SemanticScore",
    "SemanticValidator",
    "apply_judge_verdict",
    "apply_semantic_scores",
]
