"""Closed set of scoring error kinds, as a discriminated union on ``type``."""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _ErrorBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class RateLimitError(_ErrorBase):
    type: Literal["RATE_LIMIT"] = "RATE_LIMIT"
    retry_after: int = 60  # seconds
    message: str = "API rate limit exceeded"


class ParseError(_ErrorBase):
    type: Literal["PARSE_ERROR"] = "PARSE_ERROR"
    details: str
    raw_response: str | None = None


class NetworkError(_ErrorBase):
    type: Literal["NETWORK_ERROR"] = "NETWORK_ERROR"
    message: str
    code: str | None = None


class ValidationFailure(_ErrorBase):
    type: Literal["VALIDATION_ERROR"] = "VALIDATION_ERROR"
    field: str
    message: str


class QuotaExceededError(_ErrorBase):
    type: Literal["QUOTA_EXCEEDED"] = "QUOTA_EXCEEDED"
    reset_time: datetime
    message: str = "API quota exceeded"


class UnknownError(_ErrorBase):
    type: Literal["UNKNOWN_ERROR"] = "UNKNOWN_ERROR"
    message: str


ScoringError = Annotated[
    Union[
        RateLimitError,
        ParseError,
        NetworkError,
        ValidationFailure,
        QuotaExceededError,
        UnknownError,
    ],
    Field(discriminator="type"),
]

scoring_error_adapter: TypeAdapter[ScoringError] = TypeAdapter(ScoringError)

# HTTP status for each error kind at the request boundary
STATUS_CODES: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "RATE_LIMIT": 429,
    "PARSE_ERROR": 502,
    "NETWORK_ERROR": 503,
    "QUOTA_EXCEEDED": 402,
    "UNKNOWN_ERROR": 500,
}
