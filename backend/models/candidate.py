"""Candidate records loaded from the dataset and their scored counterparts."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

Availability = Literal["immediate", "2-weeks", "1-month", "not-available"]


class QuestionAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


class Candidate(BaseModel):
    """An immutable candidate record.

    Built by the candidate store from raw dataset rows. Never mutated;
    scoring produces a new ScoredCandidate instead.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    experience: int = Field(..., ge=0, le=50)  # years
    location: str = Field(..., min_length=1)
    bio: str = Field(..., min_length=20, max_length=2000)

    skills: tuple[str, ...] = ()
    education: tuple[str, ...] = ()
    work_history: tuple[str, ...] = ()
    questions: tuple[QuestionAnswer, ...] = ()
    availability: Availability | None = None

    # Pass-through metadata from the source spreadsheet
    job_title: str | None = None
    job_department: str | None = None
    job_location: str | None = None
    headline: str | None = None
    summary: str | None = None
    creation_time: str | None = None
    disqualified: bool = False


class ScoredCandidate(Candidate):
    """A candidate enriched with one LLM judgment."""

    score: int = Field(..., ge=0, le=100)
    highlights: tuple[str, ...] = Field(..., min_length=1)
    reasoning: str = Field(..., min_length=10)
    matched_skills: tuple[str, ...] = ()
    scoring_timestamp: datetime
