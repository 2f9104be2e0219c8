"""Scoring weights and job-description validation."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

WEIGHT_SUM_TOLERANCE = 0.001

JOB_DESCRIPTION_MIN_LENGTH = 10
JOB_DESCRIPTION_MAX_LENGTH = 200


class InputValidationError(ValueError):
    """A caller-supplied value failed validation before any scoring attempt."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PartialScoringWeights(BaseModel):
    """Any subset of the five weights, as accepted on the request boundary."""

    skills_match: float | None = Field(default=None, ge=0, le=1)
    experience_level: float | None = Field(default=None, ge=0, le=1)
    education: float | None = Field(default=None, ge=0, le=1)
    portfolio: float | None = Field(default=None, ge=0, le=1)
    availability: float | None = Field(default=None, ge=0, le=1)


class ScoringWeights(BaseModel):
    """Five category weights. A custom set must sum to 1 within tolerance."""

    model_config = ConfigDict(frozen=True)

    skills_match: float = Field(default=0.40, ge=0, le=1)
    experience_level: float = Field(default=0.25, ge=0, le=1)
    education: float = Field(default=0.15, ge=0, le=1)
    portfolio: float = Field(default=0.10, ge=0, le=1)
    availability: float = Field(default=0.10, ge=0, le=1)

    @model_validator(mode="after")
    def _check_sum(self) -> "ScoringWeights":
        total = self.total()
        if abs(total - 1) >= WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Weights must sum to 1 (got {total:.3f})")
        return self

    def total(self) -> float:
        return (
            self.skills_match
            + self.experience_level
            + self.education
            + self.portfolio
            + self.availability
        )


DEFAULT_WEIGHTS = ScoringWeights()


def merge_weights(partial: PartialScoringWeights | None) -> ScoringWeights | None:
    """Fill unspecified weights from the defaults and validate the full set.

    Returns None when no custom weights were supplied. Raises
    InputValidationError when the merged set does not sum to 1.
    """
    if partial is None:
        return None
    overrides = partial.model_dump(exclude_none=True)
    merged = DEFAULT_WEIGHTS.model_dump() | overrides
    try:
        return ScoringWeights(**merged)
    except ValueError as e:
        # pydantic's ValidationError is a ValueError
        raise InputValidationError("weights", _first_message(e)) from e


def validate_job_description(text: str) -> str:
    """Trim and bounds-check a job description."""
    if not isinstance(text, str):
        raise InputValidationError("job_description", "Job description must be a string")
    trimmed = text.strip()
    if len(trimmed) < JOB_DESCRIPTION_MIN_LENGTH:
        raise InputValidationError(
            "job_description",
            f"Job description must be at least {JOB_DESCRIPTION_MIN_LENGTH} characters",
        )
    if len(trimmed) > JOB_DESCRIPTION_MAX_LENGTH:
        raise InputValidationError(
            "job_description",
            f"Job description must not exceed {JOB_DESCRIPTION_MAX_LENGTH} characters",
        )
    return trimmed


def _first_message(error: ValueError) -> str:
    errors = getattr(error, "errors", None)
    if callable(errors):
        details = errors()
        if details:
            return str(details[0].get("msg", error))
    return str(error)
