"""In-process metrics registry for the planning engine."""

from collections import defaultdict


class MetricsClient:
    """
    Simple in-process metrics client for tracking plan generation.

    Stores counters in memory for testing and internal monitoring.
    Every engine component accepts ``metrics=None`` and skips recording.
    """

    def __init__(self) -> None:
        # Synthesizer ID validation
        self.hallucinated_ids: int = 0
        self.duplicate_ids: int = 0
        self.valid_ids: int = 0

        # Synthesis model failures: model -> reason -> count
        self.synthesis_failures: dict[str, dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )

        # Plans produced by the fallback builder
        self.fallback_plans: int = 0

        # Validator skips: validator -> count
        self.validator_skips: dict[str, int] = defaultdict(int)

        # Judge issues: issue type -> count
        self.judge_issues: dict[str, int] = defaultdict(int)

        # Semantic validator rewrites of low-confidence justifications
        self.low_confidence_swaps: int = 0

        # Enrichment outcomes: outcome -> count
        self.enrichment_outcomes: dict[str, int] = defaultdict(int)

    def observe_id_validation(self, valid: int, hallucinated: int, duplicates: int) -> None:
        """Record the result of validating one synthesis response."""
        self.valid_ids += valid
        self.hallucinated_ids += hallucinated
        self.duplicate_ids += duplicates

    def inc_synthesis_failure(self, model: str, reason: str) -> None:
        """Increment failure counter for a synthesis model and reason."""
        self.synthesis_failures[model][reason] += 1

    def inc_fallback_plan(self) -> None:
        """Increment fallback plan counter."""
        self.fallback_plans += 1

    def inc_validator_skip(self, validator: str) -> None:
        """Increment skip counter for a validator."""
        self.validator_skips[validator] += 1

    def inc_judge_issue(self, issue_type: str) -> None:
        """Increment judge issue counter by type."""
        self.judge_issues[issue_type] += 1

    def inc_low_confidence_swap(self) -> None:
        """Increment low-confidence justification swap counter."""
        self.low_confidence_swaps += 1

    def inc_enrichment(self, outcome: str) -> None:
        """Increment enrichment outcome counter."""
        self.enrichment_outcomes[outcome] += 1

    def get_synthesis_failure_count(self, model: str, reason: str | None = None) -> int:
        """Get failure count for a model, optionally filtered by reason."""
        if reason:
            return self.synthesis_failures.get(model, {}).get(reason, 0)
        return sum(self.synthesis_failures.get(model, {}).values())

    def get_hallucination_rate(self) -> float:
        """Share of returned ids that were not in the candidate set."""
        total = self.valid_ids + self.hallucinated_ids + self.duplicate_ids
        if total == 0:
            return 0.0
        return self.hallucinated_ids / total

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        self.hallucinated_ids = 0
        self.duplicate_ids = 0
        self.valid_ids = 0
        self.synthesis_failures.clear()
        self.fallback_plans = 0
        self.validator_skips.clear()
        self.judge_issues.clear()
        self.low_confidence_swaps = 0
        self.enrichment_outcomes.clear()
