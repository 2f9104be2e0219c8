"""LLM output contract: one judgment per candidate in a batch."""

from pydantic import BaseModel, ConfigDict, Field


class AIScoreItem(BaseModel):
    """A single candidate judgment as returned by the model.

    Field names on the wire are camelCase (``matchedSkills``); both spellings
    are accepted when validating.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    score: float = Field(..., ge=0, le=100)
    highlights: list[str]
    reasoning: str = Field(..., min_length=10)
    matched_skills: list[str] = Field(..., alias="matchedSkills")


class AIScoreResponse(BaseModel):
    """Structured output expected from both scoring strategies."""
    candidates: list[AIScoreItem]
