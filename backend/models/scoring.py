"""Per-batch outcomes and the final scoring result."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

from models.candidate import ScoredCandidate
from models.errors import ScoringError


class BatchSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    batch_index: int
    candidates: tuple[ScoredCandidate, ...] = ()


class BatchFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    batch_index: int
    error: ScoringError


BatchOutcome = BatchSuccess | BatchFailure


class ScoringSuccess(BaseModel):
    success: Literal[True] = True
    candidates: list[ScoredCandidate] = []


class ScoringFailure(BaseModel):
    success: Literal[False] = False
    error: ScoringError


ScoringResult = ScoringSuccess | ScoringFailure
