"""Classify any exception into one of the six scoring error kinds."""

import asyncio
import json
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError

from models.errors import (
    NetworkError,
    ParseError,
    QuotaExceededError,
    RateLimitError,
    ScoringError,
    UnknownError,
    ValidationFailure,
)
from models.weights import InputValidationError
from services.llm.errors import (
    LLMError,
    QuotaExhaustedError,
    RateLimitedError,
    SchemaMismatchError,
    TransportError,
)

DEFAULT_RETRY_AFTER = 60
QUOTA_RESET = timedelta(hours=24)


class UnknownCandidateError(LookupError):
    """A model response referenced a candidate id not present in the batch."""

    def __init__(self, candidate_id: str) -> None:
        super().__init__(f"Candidate with ID {candidate_id} not found")
        self.candidate_id = candidate_id


def to_scoring_error(error: BaseException) -> ScoringError:
    if isinstance(error, RateLimitedError):
        return RateLimitError(retry_after=error.retry_after or DEFAULT_RETRY_AFTER)

    if isinstance(error, QuotaExhaustedError):
        return QuotaExceededError(reset_time=datetime.now(timezone.utc) + QUOTA_RESET)

    if isinstance(error, TransportError):
        return NetworkError(message=f"Network error: {error.message}", code=error.code)

    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return NetworkError(message=f"Network error: {str(error) or 'timed out'}", code="TIMEOUT")

    if isinstance(error, ConnectionError):
        return NetworkError(message=f"Network error: {error}", code="ECONNREFUSED")

    if isinstance(error, SchemaMismatchError):
        return ParseError(details=error.details, raw_response=error.raw_response)

    if isinstance(error, json.JSONDecodeError):
        return ParseError(details=f"Invalid JSON: {error}", raw_response=error.doc)

    if isinstance(error, UnknownCandidateError):
        return UnknownError(message=str(error))

    if isinstance(error, ValidationError):
        return ParseError(details=str(error))

    if isinstance(error, InputValidationError):
        return ValidationFailure(field=error.field, message=error.message)

    if isinstance(error, LLMError):
        return UnknownError(message=error.message or "Unknown error occurred")

    return UnknownError(message=str(error) or "Unknown error occurred")
