"""Pydantic contracts for LLM responses."""

from models.schemas.ai_score_response import AIScoreItem, AIScoreResponse

__all__ = [
    "AIScoreItem",
    "AIScoreResponse",
]
