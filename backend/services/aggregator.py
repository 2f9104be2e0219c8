"""Merge batch results into the final ranked result."""

import logging
from collections.abc import Sequence

from models.candidate import ScoredCandidate
from models.errors import ScoringError, UnknownError
from models.scoring import ScoringFailure, ScoringResult, ScoringSuccess

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 30


def rank(candidates: Sequence[ScoredCandidate], max_results: int) -> list[ScoredCandidate]:
    """Descending by score; equal scores keep their input order."""
    return sorted(candidates, key=lambda c: c.score, reverse=True)[:max_results]


def finalize(
    scored: Sequence[ScoredCandidate],
    errors: Sequence[ScoringError],
    max_results: int = DEFAULT_MAX_RESULTS,
    pool_size: int | None = None,
) -> ScoringResult:
    """Turn collected batch results into a success or a failure.

    Any scored candidate makes the result a success; failed-batch errors are
    then only logged. With nothing scored, the first recorded error is
    returned.
    """
    if pool_size == 0:
        return ScoringSuccess(candidates=[])

    if not scored:
        if errors:
            return ScoringFailure(error=errors[0])
        return ScoringFailure(error=UnknownError(message="No candidates could be scored"))

    if errors:
        logger.warning("%d batches failed during processing", len(errors))
        for error in errors:
            logger.warning("Batch error: %s", error.model_dump_json(exclude={"raw_response"}))

    ranked = rank(scored, max_results)
    logger.info(
        "Successfully scored %d candidates, returning top %d", len(scored), len(ranked)
    )
    return ScoringSuccess(candidates=ranked)
