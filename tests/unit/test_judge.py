"""Tests for the LLM judge."""

import json

import pytest

from travelme.engine.models import ConfidenceLevel, JudgeIssue, JudgeVerdict
from travelme.engine.verify.judge import LLMJudge, apply_judge_verdict, build_judge_prompt
from tests.helpers import (
    FakeLLMClient,
    almaty_catalog,
    confidence_snapshot,
    make_plan,
    make_settings,
    place_map,
)


def _verdict(valid, *issues):
    return json.dumps(
        {
            "valid": valid,
            "issues": [
                {"optionId": oid, "type": kind, "description": "flagged"}
                for oid, kind in issues
            ],
        }
    )


@pytest.fixture
def plan():
    catalog = almaty_catalog()
    return make_plan([([catalog[0], catalog[1]], [catalog[2]]), ([catalog[3]], [])])


@pytest.mark.asyncio
async def test_timeout_yields_no_issues_and_no_mutation(plan, metrics):
    """Test the fail-open verdict on timeout."""
    settings = make_settings(judge_timeout_s=0.05)
    llm = FakeLLMClient(
        completions={settings.judge_model: _verdict(False, ("p-cafe1", "fabricated_detail"))},
        complete_delay=1.0,
    )
    before = confidence_snapshot(plan)

    verdict = await LLMJudge(llm, settings, metrics).judge(plan, place_map(almaty_catalog()), "Almaty")
    apply_judge_verdict(plan, verdict)

    assert verdict == JudgeVerdict(valid=True, issues=[])
    assert confidence_snapshot(plan) == before
    assert metrics.validator_skips["judge"] == 1


@pytest.mark.asyncio
async def test_fabricated_detail_downgrades_only_flagged_option(plan, settings, metrics):
    """Test that a fabricated detail caps X at 0.4 and leaves Y alone."""
    llm = FakeLLMClient(
        completions={settings.judge_model: "```json\n" + _verdict(False, ("p-cafe1", "fabricated_detail")) + "\n```"}
    )
    verdict = await LLMJudge(llm, settings, metrics).judge(plan, place_map(almaty_catalog()), "Almaty")
    apply_judge_verdict(plan, verdict)

    flagged, untouched = plan.sections[0].options
    assert flagged.confidence <= 0.4
    assert flagged.confidence_level == ConfidenceLevel.low_confidence
    assert untouched.confidence == 1.0
    assert untouched.confidence_level == ConfidenceLevel.verified
    assert metrics.judge_issues["fabricated_detail"] == 1


@pytest.mark.parametrize("kind", ["logical_contradiction", "temporal_impossibility"])
def test_logical_and_temporal_issues_are_severe(plan, kind):
    """Test that logical and temporal issues force low_confidence."""
    verdict = JudgeVerdict(valid=False, issues=[JudgeIssue(option_id="p-museum", type=kind)])
    apply_judge_verdict(plan, verdict)
    option = plan.sections[1].options[0]
    assert option.confidence == 0.4
    assert option.confidence_level == ConfidenceLevel.low_confidence


def test_geographic_error_demotes_verified_to_ai_generated(plan):
    """Test the minor-issue cap and one-step demotion."""
    verdict = JudgeVerdict(valid=False, issues=[JudgeIssue(option_id="p-cafe2", type="geographic_error")])
    apply_judge_verdict(plan, verdict)
    option = plan.sections[0].options[1]
    assert option.confidence == 0.55
    assert option.confidence_level == ConfidenceLevel.ai_generated


def test_minor_issue_never_promotes_low_confidence(plan):
    """Test that a minor issue keeps an existing low_confidence level."""
    option = plan.sections[0].options[0]
    option.confidence = 0.2
    option.confidence_level = ConfidenceLevel.low_confidence
    verdict = JudgeVerdict(valid=False, issues=[JudgeIssue(option_id="p-cafe1", type="geographic_error")])
    apply_judge_verdict(plan, verdict)
    assert option.confidence == 0.2
    assert option.confidence_level == ConfidenceLevel.low_confidence


def test_reserves_are_not_judged(plan):
    """Test that issues about reserves are ignored."""
    before = confidence_snapshot(plan)
    verdict = JudgeVerdict(valid=False, issues=[JudgeIssue(option_id="p-rest1", type="fabricated_detail")])
    apply_judge_verdict(plan, verdict)
    assert confidence_snapshot(plan) == before


def test_valid_verdict_is_not_applied(plan):
    """Test that issues on a verdict marked valid change nothing."""
    before = confidence_snapshot(plan)
    verdict = JudgeVerdict(valid=True, issues=[JudgeIssue(option_id="p-cafe1", type="fabricated_detail")])
    apply_judge_verdict(plan, verdict)
    assert confidence_snapshot(plan) == before


@pytest.mark.asyncio
async def test_unknown_and_malformed_issues_are_ignored(plan, settings):
    """Test that only known issue types are kept."""
    response = json.dumps(
        {
            "valid": False,
            "issues": [
                {"optionId": "p-cafe1", "type": "vibes_off", "description": "?"},
                {"type": "fabricated_detail"},
                {"optionId": "p-cafe2", "type": "geographic_error", "description": "wrong city"},
            ],
        }
    )
    llm = FakeLLMClient(completions={settings.judge_model: response})
    verdict = await LLMJudge(llm, settings).judge(plan, place_map(almaty_catalog()), "Almaty")
    assert [(i.option_id, i.type) for i in verdict.issues] == [("p-cafe2", "geographic_error")]
    assert verdict.valid is False


@pytest.mark.asyncio
@pytest.mark.parametrize("response", ["", "no json here", "[1, 2]", RuntimeError("HTTP 503")])
async def test_failures_yield_no_issues(plan, settings, response):
    """Test fail-open behavior for empty, unparsable and failed responses."""
    llm = FakeLLMClient(completions={settings.judge_model: response})
    verdict = await LLMJudge(llm, settings).judge(plan, place_map(almaty_catalog()), "Almaty")
    assert verdict == JudgeVerdict(valid=True, issues=[])


@pytest.mark.asyncio
async def test_no_credentials_skips_call(plan, settings):
    """Test that the judge does not call an unavailable client."""
    llm = FakeLLMClient(available=False)
    verdict = await LLMJudge(llm, settings).judge(plan, place_map(almaty_catalog()), "Almaty")
    assert verdict.valid is True
    assert llm.complete_calls == []


def test_prompt_contains_context_and_shown_options(plan):
    """Test the judge prompt carries catalog context and shown options only."""
    prompt = build_judge_prompt(plan, place_map(almaty_catalog()), "Almaty")
    assert "strict fact-checker for a travel app in Almaty" in prompt
    assert '"id": "p-baiterek"' in prompt  # context lists the whole map
    response_part = prompt.split("AI-GENERATED RESPONSE to verify:")[1]
    assert "p-cafe1" in response_part
    assert "p-rest1" not in response_part.split("Check the AI response for:")[0]
