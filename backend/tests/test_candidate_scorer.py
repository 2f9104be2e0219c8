import pytest

from config import Settings
from fakes import FakeProvider, ids_in_prompt, make_gateway, make_pool, score_payload
from models.scoring import ScoringFailure, ScoringSuccess
from services.candidate_scorer import score_candidates
from services.llm.errors import RateLimitedError, TransportError

JOB = "Senior Python engineer for a remote startup team"


@pytest.fixture
def settings():
    return Settings(
        batch_size=10,
        max_concurrent_batches=3,
        wave_pause_ms=1000,
        max_retries=3,
        default_max_results=30,
    )


def _second_batch_rate_limited(prompt):
    ids = ids_in_prompt(prompt)
    if "cand-10" in ids:
        raise RateLimitedError(retry_after=30)
    return score_payload(ids, lambda cid: int(cid.split("-")[1]) * 3)


@pytest.mark.asyncio
async def test_empty_pool_makes_no_llm_calls(settings, sleep_recorder):
    provider = FakeProvider()
    result = await score_candidates(
        JOB, [], make_gateway(provider), settings=settings, sleep=sleep_recorder
    )
    assert result == ScoringSuccess(candidates=[])
    assert provider.total_calls == 0


@pytest.mark.asyncio
async def test_rate_limited_batch_is_dropped_from_partial_success(settings, sleep_recorder):
    provider = FakeProvider(structured=_second_batch_rate_limited)
    result = await score_candidates(
        JOB, make_pool(25), make_gateway(provider), settings=settings, sleep=sleep_recorder
    )

    assert isinstance(result, ScoringSuccess)
    ids = [c.id for c in result.candidates]
    assert len(ids) == 15
    assert not any(cid in ids for cid in (f"cand-{i}" for i in range(10, 20)))
    scores = [c.score for c in result.candidates]
    assert scores == sorted(scores, reverse=True)
    # 2 good batches + 4 attempts of the rate-limited one
    assert len(provider.structured_calls) == 6
    assert provider.text_calls == []
    # retry backoff only; a single wave never pauses
    assert sleep_recorder.delays == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_max_results_caps_output(settings, sleep_recorder):
    provider = FakeProvider()
    result = await score_candidates(
        JOB, make_pool(25), make_gateway(provider),
        max_results=5, settings=settings, sleep=sleep_recorder,
    )
    assert len(result.candidates) == 5


@pytest.mark.asyncio
async def test_smaller_batch_size_makes_more_calls(settings, sleep_recorder):
    provider = FakeProvider()
    await score_candidates(
        JOB, make_pool(12), make_gateway(provider),
        batch_size=4, settings=settings, sleep=sleep_recorder,
    )
    assert len(provider.structured_calls) == 3


@pytest.mark.asyncio
async def test_all_batches_failing_returns_first_error(settings, sleep_recorder):
    def always_down(prompt):
        raise TransportError("connection refused", code="ECONNREFUSED")

    provider = FakeProvider(structured=always_down)
    result = await score_candidates(
        JOB, make_pool(15), make_gateway(provider), settings=settings, sleep=sleep_recorder
    )

    assert isinstance(result, ScoringFailure)
    assert result.error.type == "NETWORK_ERROR"
    assert result.error.code == "ECONNREFUSED"


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_unknown_error(settings, sleep_recorder, monkeypatch):
    from services import aggregator

    def explode(*args, **kwargs):
        raise RuntimeError("aggregation broke")

    monkeypatch.setattr(aggregator, "finalize", explode)
    result = await score_candidates(
        JOB, make_pool(3), make_gateway(FakeProvider()), settings=settings, sleep=sleep_recorder
    )

    assert isinstance(result, ScoringFailure)
    assert result.error.type == "UNKNOWN_ERROR"
    assert result.error.message == "aggregation broke"
