"""Per-batch scoring with structured-first, constrained-text fallback.

    Pending -> Structured --ok--> Success
                   |
                   +--PARSE_ERROR--> Fallback --ok--> Success
                   |                     +--fail--> Failed
                   +--any other error--> Failed

Only a parse/shape failure of the structured attempt triggers the fallback.
Rate limits (after retries), network, quota and unknown errors fail the
batch directly.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from models.candidate import Candidate, ScoredCandidate
from models.errors import ParseError
from models.schemas.ai_score_response import AIScoreItem, AIScoreResponse
from models.scoring import BatchFailure, BatchOutcome, BatchSuccess
from models.weights import ScoringWeights
from services import prompt_builder
from services.error_mapping import UnknownCandidateError, to_scoring_error
from services.llm.gateway import LLMGateway
from services.retry import (
    BASE_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    MAX_DELAY_MS,
    retry_with_backoff,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay_ms: int = BASE_DELAY_MS
    max_delay_ms: int = MAX_DELAY_MS


def to_scored_candidate(item: AIScoreItem, batch: Sequence[Candidate]) -> ScoredCandidate:
    """Merge one model judgment with its originating candidate.

    Raises UnknownCandidateError if the id is not in the batch, and
    pydantic.ValidationError if the judgment violates ScoredCandidate's
    constraints (e.g. no highlights). Scores are rounded half up (84.5 -> 85).
    """
    original = next((c for c in batch if c.id == item.id), None)
    if original is None:
        raise UnknownCandidateError(item.id)

    return ScoredCandidate(
        **original.model_dump(),
        score=int(item.score + 0.5),
        highlights=item.highlights,
        reasoning=item.reasoning,
        matched_skills=item.matched_skills,
        scoring_timestamp=datetime.now(timezone.utc),
    )


def to_scored_candidates(response: AIScoreResponse, batch: Sequence[Candidate]) -> list[ScoredCandidate]:
    return [to_scored_candidate(item, batch) for item in response.candidates]


class BatchScorer:
    """Scores one batch at a time against a job description."""

    def __init__(
        self,
        gateway: LLMGateway,
        retry_policy: RetryPolicy | None = None,
        contextual_prompts: bool = True,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self.gateway = gateway
        self.retry_policy = retry_policy or RetryPolicy()
        self.contextual_prompts = contextual_prompts
        self._sleep = sleep

    async def __call__(
        self,
        batch: Sequence[Candidate],
        batch_index: int,
        job_description: str,
        weights: ScoringWeights | None = None,
    ) -> BatchOutcome:
        return await self.score_batch(batch, batch_index, job_description, weights)

    async def score_batch(
        self,
        batch: Sequence[Candidate],
        batch_index: int,
        job_description: str,
        weights: ScoringWeights | None = None,
    ) -> BatchOutcome:
        logger.info("Processing batch %d (%d candidates)", batch_index + 1, len(batch))

        try:
            scored = await self._structured_attempt(batch, job_description, weights)
            return BatchSuccess(batch_index=batch_index, candidates=scored)
        except Exception as e:
            error = to_scoring_error(e)

        if error.type != "PARSE_ERROR":
            logger.warning("Batch %d failed: %s", batch_index + 1, error.type)
            return BatchFailure(batch_index=batch_index, error=error)

        logger.warning(
            "Batch %d: Structured generation failed, trying fallback", batch_index + 1
        )
        try:
            scored_or_error = await self._fallback_attempt(batch, job_description)
        except Exception as e:
            return BatchFailure(batch_index=batch_index, error=to_scoring_error(e))

        if isinstance(scored_or_error, ParseError):
            logger.warning("Batch %d: fallback response rejected: %s", batch_index + 1, scored_or_error.details)
            return BatchFailure(batch_index=batch_index, error=scored_or_error)
        return BatchSuccess(batch_index=batch_index, candidates=scored_or_error)

    async def _structured_attempt(
        self,
        batch: Sequence[Candidate],
        job_description: str,
        weights: ScoringWeights | None,
    ) -> list[ScoredCandidate]:
        prompt = prompt_builder.build_structured_prompt(
            job_description, batch, weights, contextual=self.contextual_prompts
        )
        response = await self._retry(
            lambda: self.gateway.generate_structured(prompt, AIScoreResponse)
        )
        return to_scored_candidates(response, batch)

    async def _fallback_attempt(
        self,
        batch: Sequence[Candidate],
        job_description: str,
    ) -> list[ScoredCandidate] | ParseError:
        prompt = prompt_builder.build_constrained_prompt(job_description, batch)
        text = await self._retry(lambda: self.gateway.generate_text(prompt))

        validated = prompt_builder.validate_response_shape(text)
        if isinstance(validated, prompt_builder.ShapeError):
            return ParseError(details=validated.reason, raw_response=text)
        return to_scored_candidates(validated, batch)

    async def _retry(self, operation):
        kwargs = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return await retry_with_backoff(
            operation,
            self.retry_policy.max_attempts,
            base_delay_ms=self.retry_policy.base_delay_ms,
            max_delay_ms=self.retry_policy.max_delay_ms,
            **kwargs,
        )
