"""Batch partitioning and bounded-concurrency wave execution."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from models.candidate import Candidate, ScoredCandidate
from models.errors import ScoringError
from models.scoring import BatchFailure, BatchOutcome, BatchSuccess
from models.weights import ScoringWeights
from services.error_mapping import to_scoring_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 10
DEFAULT_MAX_CONCURRENT = 3
DEFAULT_WAVE_PAUSE = 1.0  # seconds

ScoreBatchFn = Callable[
    [Sequence[Candidate], int, str, ScoringWeights | None],
    Awaitable[BatchOutcome],
]


def partition(items: Sequence[T], batch_size: int) -> list[list[T]]:
    """Split ``items`` into ordered slices of at most ``batch_size``."""
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    return [list(items[i:i + batch_size]) for i in range(0, len(items), batch_size)]


async def run_batches(
    candidates: Sequence[Candidate],
    job_description: str,
    score_batch: ScoreBatchFn,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    weights: ScoringWeights | None = None,
    wave_pause: float = DEFAULT_WAVE_PAUSE,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> tuple[list[ScoredCandidate], list[ScoringError]]:
    """Score every batch, ``max_concurrent`` at a time.

    Each wave is joined all-settled: a failing batch never cancels its
    siblings. Outcomes are collected in batch order, not completion order.
    Returns the concatenated successful candidates and the failed batches'
    errors.
    """
    if max_concurrent < 1:
        raise ValueError("max_concurrent must be at least 1")

    batches = partition(candidates, batch_size)
    logger.info(
        "Processing %d candidates in %d batches with up to %d concurrent batches",
        len(candidates),
        len(batches),
        max_concurrent,
    )

    outcomes: list[BatchOutcome] = []
    for start in range(0, len(batches), max_concurrent):
        wave = batches[start:start + max_concurrent]
        results = await asyncio.gather(
            *(
                score_batch(batch, start + offset, job_description, weights)
                for offset, batch in enumerate(wave)
            ),
            return_exceptions=True,
        )

        for offset, result in enumerate(results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error("Batch %d raised unexpectedly: %s", start + offset + 1, result)
                result = BatchFailure(batch_index=start + offset, error=to_scoring_error(result))
            outcomes.append(result)

        if start + max_concurrent < len(batches):
            await sleep(wave_pause)

    scored: list[ScoredCandidate] = []
    errors: list[ScoringError] = []
    for outcome in outcomes:
        if isinstance(outcome, BatchSuccess):
            scored.extend(outcome.candidates)
        else:
            errors.append(outcome.error)
    return scored, errors
