"""Scoring entry point: candidate pool in, ranked result out.

Flow:
    candidates
      ├─ empty pool                  → success([]), no LLM calls
      ├─ batch_scheduler.run_batches → BatchScorer per batch (waves)
      └─ aggregator.finalize         → ScoringSuccess | ScoringFailure
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from config import Settings, settings as default_settings
from models.candidate import Candidate
from models.scoring import ScoringFailure, ScoringResult, ScoringSuccess
from models.weights import ScoringWeights
from services import aggregator, batch_scheduler
from services.batch_scorer import BatchScorer, RetryPolicy
from services.error_mapping import to_scoring_error
from services.llm.gateway import LLMGateway

logger = logging.getLogger(__name__)


def build_scorer(
    gateway: LLMGateway,
    settings: Settings,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> BatchScorer:
    return BatchScorer(
        gateway,
        retry_policy=RetryPolicy(
            max_attempts=settings.max_attempts,
            base_delay_ms=settings.retry_base_delay_ms,
            max_delay_ms=settings.retry_max_delay_ms,
        ),
        contextual_prompts=settings.contextual_prompts,
        sleep=sleep,
    )


async def score_candidates(
    job_description: str,
    candidates: Sequence[Candidate],
    gateway: LLMGateway,
    *,
    weights: ScoringWeights | None = None,
    batch_size: int | None = None,
    max_results: int | None = None,
    settings: Settings = default_settings,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ScoringResult:
    """Score ``candidates`` against ``job_description`` and rank them.

    Never raises: unexpected exceptions become UNKNOWN_ERROR failures.
    """
    if not candidates:
        return ScoringSuccess(candidates=[])

    max_results = max_results or settings.default_max_results
    started = time.monotonic()

    try:
        scorer = build_scorer(gateway, settings, sleep=sleep)
        scored, errors = await batch_scheduler.run_batches(
            candidates,
            job_description,
            scorer,
            batch_size=batch_size or settings.batch_size,
            max_concurrent=settings.max_concurrent_batches,
            weights=weights,
            wave_pause=settings.wave_pause_ms / 1000,
            sleep=sleep,
        )
        result = aggregator.finalize(scored, errors, max_results, pool_size=len(candidates))
    except Exception as e:
        logger.exception("Unexpected error in score_candidates")
        return ScoringFailure(error=to_scoring_error(e))

    logger.info("Scoring finished in %dms", (time.monotonic() - started) * 1000)
    return result
