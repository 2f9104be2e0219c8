from pydantic import BaseModel

from models.candidate import ScoredCandidate
from models.errors import ScoringError


class ScoreResponse(BaseModel):
    candidates: list[ScoredCandidate] = []
    total_processed: int = 0
    processing_time_ms: int = 0
    model_used: str = ""


class ErrorResponse(BaseModel):
    error: ScoringError


class HealthResponse(BaseModel):
    status: str = "ok"
    candidates_count: int = 0
    provider: str = ""
    model: str = ""
    error: str | None = None


class LLMHealthResponse(BaseModel):
    healthy: bool = False
    provider: str = ""
    model: str = ""
    error: str | None = None


class CandidateStats(BaseModel):
    total_candidates: int = 0
    unique_skills: int = 0
    top_skills: list[str] = []
    locations: dict[str, int] = {}
    average_experience: float = 0.0
    availability_distribution: dict[str, int] = {}
