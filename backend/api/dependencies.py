"""Shared dependencies for API routes."""

from functools import lru_cache

from config import settings
from services.candidate_store import CandidateStore
from services.llm.gateway import LLMGateway, build_gateway


@lru_cache
def get_candidate_store() -> CandidateStore:
    return CandidateStore(settings.candidates_path, ttl_seconds=settings.cache_ttl_seconds)


@lru_cache
def get_gateway() -> LLMGateway:
    return build_gateway(settings)
