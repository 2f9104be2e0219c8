from pydantic import BaseModel, Field, field_validator

from models.weights import (
    JOB_DESCRIPTION_MAX_LENGTH,
    JOB_DESCRIPTION_MIN_LENGTH,
    PartialScoringWeights,
)


class ScoreRequest(BaseModel):
    job_description: str = Field(
        ...,
        min_length=JOB_DESCRIPTION_MIN_LENGTH,
        max_length=JOB_DESCRIPTION_MAX_LENGTH,
        description="Free-text job description",
    )
    max_results: int = Field(default=30, ge=1, le=100, description="Number of ranked candidates to return")
    weights: PartialScoringWeights | None = Field(default=None, description="Optional scoring weight overrides")

    @field_validator("job_description")
    @classmethod
    def _strip(cls, v: str) -> str:
        stripped = v.strip()
        if len(stripped) < JOB_DESCRIPTION_MIN_LENGTH:
            raise ValueError(
                f"Job description must be at least {JOB_DESCRIPTION_MIN_LENGTH} characters"
            )
        return stripped
