"""Tests for the structured-first / constrained-fallback batch state machine."""

import json

import pytest

from fakes import FakeProvider, SleepRecorder, ids_in_prompt, make_candidate, make_gateway, score_payload
from models.schemas.ai_score_response import AIScoreItem
from models.scoring import BatchFailure, BatchSuccess
from models.weights import InputValidationError
from services.batch_scorer import BatchScorer, to_scored_candidate
from services.error_mapping import UnknownCandidateError
from services.llm.errors import (
    LLMError,
    QuotaExhaustedError,
    RateLimitedError,
    SchemaMismatchError,
    TransportError,
)

JOB = "Python backend engineer with AWS experience"
BATCH = [make_candidate(1), make_candidate(2), make_candidate(3)]


def _raise(error):
    def responder(prompt):
        raise error
    return responder


def _scorer(provider):
    return BatchScorer(make_gateway(provider), sleep=SleepRecorder())


class TestToScoredCandidate:
    def test_merges_judgment_with_original(self):
        item = AIScoreItem(
            id="cand-2",
            score=87.6,
            highlights=["Strong AWS background"],
            reasoning="Matches the backend and cloud requirements well.",
            matchedSkills=["Python", "AWS"],
        )
        scored = to_scored_candidate(item, BATCH)
        assert scored.id == "cand-2"
        assert scored.name == "Candidate 2"
        assert scored.score == 88
        assert scored.matched_skills == ("Python", "AWS")
        assert scored.scoring_timestamp.tzinfo is not None

    def test_unknown_id_is_an_error(self):
        item = AIScoreItem(
            id="ghost",
            score=50,
            highlights=["x"],
            reasoning="Does not exist in this batch.",
            matchedSkills=[],
        )
        with pytest.raises(UnknownCandidateError):
            to_scored_candidate(item, BATCH)


@pytest.mark.asyncio
async def test_structured_success_skips_fallback():
    provider = FakeProvider()
    outcome = await _scorer(provider).score_batch(BATCH, 0, JOB)

    assert isinstance(outcome, BatchSuccess)
    assert [c.id for c in outcome.candidates] == ["cand-1", "cand-2", "cand-3"]
    assert len(provider.structured_calls) == 1
    assert provider.text_calls == []


@pytest.mark.asyncio
async def test_parse_error_triggers_fallback():
    provider = FakeProvider(
        structured=_raise(SchemaMismatchError("not json", raw_response="garbage")),
        text=lambda prompt: json.dumps(score_payload(ids_in_prompt(prompt), lambda cid: 64)),
    )
    outcome = await _scorer(provider).score_batch(BATCH, 2, JOB)

    assert isinstance(outcome, BatchSuccess)
    assert outcome.batch_index == 2
    assert {c.score for c in outcome.candidates} == {64}
    # structured attempt retried on the uniform schedule before falling back
    assert len(provider.structured_calls) == 4
    assert len(provider.text_calls) == 1
    assert "Return ONLY this JSON structure" in provider.text_calls[0]


@pytest.mark.asyncio
async def test_fallback_with_invalid_shape_fails_with_raw_text():
    provider = FakeProvider(
        structured=_raise(SchemaMismatchError("bad")),
        text=lambda prompt: '{"candidates": [{"id": "cand-1"}]}',
    )
    outcome = await _scorer(provider).score_batch(BATCH, 1, JOB)

    assert isinstance(outcome, BatchFailure)
    assert outcome.batch_index == 1
    assert outcome.error.type == "PARSE_ERROR"
    assert outcome.error.details == "Each candidate must have 'score' number between 0-100"
    assert outcome.error.raw_response == '{"candidates": [{"id": "cand-1"}]}'


@pytest.mark.asyncio
async def test_unknown_id_in_structured_response_fails_without_fallback():
    provider = FakeProvider(
        structured=lambda prompt: score_payload(["ghost"]),
        text=lambda prompt: "{}",
    )
    outcome = await _scorer(provider).score_batch(BATCH, 0, JOB)

    assert isinstance(outcome, BatchFailure)
    assert outcome.error.type == "UNKNOWN_ERROR"
    assert outcome.error.message == "Candidate with ID ghost not found"
    assert provider.text_calls == []


@pytest.mark.asyncio
async def test_unknown_id_in_fallback_response_fails_batch():
    provider = FakeProvider(
        structured=_raise(SchemaMismatchError("bad")),
        text=lambda prompt: json.dumps(score_payload(["ghost"])),
    )
    outcome = await _scorer(provider).score_batch(BATCH, 0, JOB)

    assert isinstance(outcome, BatchFailure)
    assert outcome.error.type == "UNKNOWN_ERROR"
    assert "ghost" in outcome.error.message


@pytest.mark.asyncio
@pytest.mark.parametrize(("raw", "expected"), [(84.5, 85), (85.5, 86), (84.49, 84), (0, 0), (100, 100)])
async def test_scores_round_half_up(raw, expected):
    provider = FakeProvider(
        structured=lambda prompt: score_payload(ids_in_prompt(prompt), lambda cid: raw)
    )
    outcome = await _scorer(provider).score_batch(BATCH, 0, JOB)
    assert {c.score for c in outcome.candidates} == {expected}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "expected_type"),
    [
        (RateLimitedError(), "RATE_LIMIT"),
        (TransportError("refused", code="ECONNREFUSED"), "NETWORK_ERROR"),
        (QuotaExhaustedError(), "QUOTA_EXCEEDED"),
        (LLMError("401 unauthorized", status=401), "UNKNOWN_ERROR"),
        (InputValidationError("weights", "bad"), "VALIDATION_ERROR"),
    ],
)
async def test_non_parse_errors_never_fall_back(error, expected_type):
    provider = FakeProvider(structured=_raise(error))
    outcome = await _scorer(provider).score_batch(BATCH, 0, JOB)

    assert isinstance(outcome, BatchFailure)
    assert outcome.error.type == expected_type
    assert provider.text_calls == []
    assert len(provider.structured_calls) == 4


@pytest.mark.asyncio
async def test_fallback_transport_failure_is_reported():
    provider = FakeProvider(
        structured=_raise(SchemaMismatchError("bad")),
        text=_raise(TransportError("down", code="TIMEOUT")),
    )
    outcome = await _scorer(provider).score_batch(BATCH, 0, JOB)

    assert isinstance(outcome, BatchFailure)
    assert outcome.error.type == "NETWORK_ERROR"
    assert outcome.error.code == "TIMEOUT"


@pytest.mark.asyncio
async def test_weights_reach_structured_prompt():
    from models.weights import ScoringWeights

    provider = FakeProvider()
    weights = ScoringWeights(
        skills_match=0.2, experience_level=0.2, education=0.2, portfolio=0.2, availability=0.2
    )
    await _scorer(provider).score_batch(BATCH, 0, JOB, weights)
    assert "- Skills Match: 20%" in provider.structured_calls[0]
