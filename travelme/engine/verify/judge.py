"""LLM judge: a second model cross-checks the plan against the catalog."""

import json
import logging
from collections import defaultdict
from collections.abc import Mapping

from pydantic import ValidationError

from travelme.engine.adapters.llm import LLMClient, parse_json_object
from travelme.engine.config import Settings, get_settings
from travelme.engine.exec import call_with_deadline
from travelme.engine.metrics.registry import MetricsClient
from travelme.engine.models.catalog import CatalogPlace
from travelme.engine.models.common import (
    SEVERE_ISSUE_TYPES,
    ConfidenceLevel,
    JudgeIssueType,
)
from travelme.engine.models.llm import JudgeIssue, JudgeVerdict
from travelme.engine.models.plan import Plan

logger = logging.getLogger(__name__)

CONTEXT_DESCRIPTION_CHARS = 80
JUDGE_TEMPERATURE = 0.1

# Confidence caps applied to flagged options
SEVERE_ISSUE_CAP = 0.4
MINOR_ISSUE_CAP = 0.55

_KNOWN_ISSUE_TYPES = {t.value for t in JudgeIssueType}


def build_judge_prompt(
    plan: Plan, place_map: Mapping[str, CatalogPlace], city: str
) -> str:
    """Render the fact-checking prompt for one plan."""
    context = [
        {
            "id": p.id,
            "title": p.title,
            "type": p.type,
            "tags": list(p.tags),
            "desc": p.description[:CONTEXT_DESCRIPTION_CHARS],
            "price": p.price_level,
            "addr": p.address or "",
        }
        for p in place_map.values()
    ]
    response = [
        {
            "title": s.title,
            "timeRange": s.time_range,
            "options": [
                {
                    "id": o.stop.id,
                    "title": o.stop.title,
                    "why": o.why,
                    "budget": o.budget_hint,
                }
                for o in s.options
            ],
        }
        for s in plan.sections
    ]

    return f"""You are a strict fact-checker for a travel app in {city}, Kazakhstan.

ORIGINAL DATABASE CONTEXT (source of truth):
{json.dumps(context, ensure_ascii=False)}

AI-GENERATED RESPONSE to verify:
{json.dumps(response, ensure_ascii=False)}

Check the AI response for:
1. Logical contradictions (e.g. "quiet nightclub", "budget luxury restaurant")
2. Temporal impossibilities (e.g. breakfast recommended at 23:00, lunch at 06:00)
3. Geographic errors (places mixed from different cities)
4. Fabricated details: any claim in "why" that cannot be verified from the database context (invented features, fake prices, non-existent amenities)

Return ONLY valid JSON:
{{"valid":true/false,"issues":[{{"optionId":"place-uuid","type":"logical_contradiction|temporal_impossibility|geographic_error|fabricated_detail","description":"brief explanation"}}]}}

If everything checks out, return: {{"valid":true,"issues":[]}}"""


class LLMJudge:
    """Fail-open fact-checker; any failure reads as 'no issues'."""

    def __init__(
        self,
        llm: LLMClient,
        settings: Settings | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._llm = llm
        self._settings = settings or get_settings()
        self._metrics = metrics

    def _pass(self, reason: str) -> JudgeVerdict:
        logger.warning(f"LLM judge skipped: {reason}")
        if self._metrics:
            self._metrics.inc_validator_skip("judge")
        return JudgeVerdict(valid=True, issues=[])

    async def judge(
        self, plan: Plan, place_map: Mapping[str, CatalogPlace], city: str
    ) -> JudgeVerdict:
        """Ask the judge model to flag problems with the plan's shown options."""
        if not self._llm.available:
            return self._pass("no LLM credentials")

        call = await call_with_deadline(
            self._llm.complete(
                self._settings.judge_model,
                build_judge_prompt(plan, place_map, city),
                temperature=JUDGE_TEMPERATURE,
                max_tokens=self._settings.judge_max_tokens,
            ),
            self._settings.judge_timeout_s,
            "judge",
        )
        if not call.ok:
            return self._pass(f"judge call {call.status}")

        text = call.value or ""
        if not text.strip():
            return self._pass("empty response")

        try:
            data = parse_json_object(text)
        except ValueError as e:
            return self._pass(f"unparsable response: {e}")

        issues: list[JudgeIssue] = []
        raw_issues = data.get("issues")
        for raw in raw_issues if isinstance(raw_issues, list) else []:
            try:
                issue = JudgeIssue.model_validate(raw)
            except ValidationError:
                logger.debug(f"Ignoring malformed judge issue: {raw!r}")
                continue
            if issue.type not in _KNOWN_ISSUE_TYPES:
                logger.debug(f"Ignoring unknown judge issue type: {issue.type}")
                continue
            issues.append(issue)

        verdict = JudgeVerdict(valid=bool(data.get("valid", True)), issues=issues)
        logger.info(
            f"Judge verdict: {'PASS' if verdict.valid else 'ISSUES FOUND'} "
            f"({len(issues)} issues)"
        )
        for issue in issues:
            logger.info(f"  {issue.type}: {issue.description} ({issue.option_id[:8]}...)")
            if self._metrics:
                self._metrics.inc_judge_issue(issue.type)
        return verdict


def apply_judge_verdict(plan: Plan, verdict: JudgeVerdict) -> None:
    """
    Downgrade confidence of flagged shown options in place.

    Severe issues cap confidence at 0.4 and force low_confidence; any other
    issue caps it at 0.55 and demotes verified to ai_generated. A verdict
    marked valid is not applied. Reserves are left alone.
    """
    if verdict.valid or not verdict.issues:
        return

    issues_by_option: dict[str, list[JudgeIssue]] = defaultdict(list)
    for issue in verdict.issues:
        issues_by_option[issue.option_id].append(issue)

    for section in plan.sections:
        for option in section.options:
            issues = issues_by_option.get(option.stop.id)
            if not issues:
                continue

            if any(JudgeIssueType(i.type) in SEVERE_ISSUE_TYPES for i in issues):
                option.confidence = min(option.confidence, SEVERE_ISSUE_CAP)
                option.confidence_level = ConfidenceLevel.low_confidence
            else:
                option.confidence = min(option.confidence, MINOR_ISSUE_CAP)
                if option.confidence_level == ConfidenceLevel.verified:
                    option.confidence_level = ConfidenceLevel.ai_generated
