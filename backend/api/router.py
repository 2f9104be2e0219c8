import logging
import time

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_candidate_store, get_gateway
from config import settings
from models.errors import STATUS_CODES, RateLimitError, ScoringError, UnknownError, ValidationFailure
from models.requests import ScoreRequest
from models.responses import (
    CandidateStats,
    ErrorResponse,
    HealthResponse,
    LLMHealthResponse,
    ScoreResponse,
)
from models.scoring import ScoringFailure
from models.weights import InputValidationError, merge_weights
from services import candidate_search
from services.candidate_scorer import score_candidates
from services.candidate_store import CandidateDataError, CandidateStore
from services.llm.gateway import LLMGateway

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def error_response(error: ScoringError) -> JSONResponse:
    """Render a scoring error with its mapped status code."""
    headers = {}
    if isinstance(error, RateLimitError):
        headers["Retry-After"] = str(error.retry_after)
    return JSONResponse(
        status_code=STATUS_CODES.get(error.type, 500),
        content=ErrorResponse(error=error).model_dump(mode="json"),
        headers=headers,
    )


@router.get("/health", response_model=HealthResponse)
async def health(
    store: CandidateStore = Depends(get_candidate_store),
    gateway: LLMGateway = Depends(get_gateway),
):
    try:
        count = len(await run_in_threadpool(store.get_candidates))
    except CandidateDataError as e:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                provider=gateway.provider_name,
                model=gateway.model,
                error=str(e),
            ).model_dump(),
        )
    return HealthResponse(
        status="ok",
        candidates_count=count,
        provider=gateway.provider_name,
        model=gateway.model,
    )


@router.get("/health/llm", response_model=LLMHealthResponse)
async def health_llm(gateway: LLMGateway = Depends(get_gateway)):
    return await gateway.check_health()


@router.post("/score", response_model=ScoreResponse)
@limiter.limit(settings.score_rate_limit)
async def score(
    request: Request,
    body: ScoreRequest,
    store: CandidateStore = Depends(get_candidate_store),
    gateway: LLMGateway = Depends(get_gateway),
):
    started = time.monotonic()

    try:
        weights = merge_weights(body.weights)
    except InputValidationError as e:
        return error_response(ValidationFailure(field=e.field, message=e.message))

    try:
        candidates = await run_in_threadpool(store.get_candidates)
    except CandidateDataError as e:
        logger.error("Failed to load candidates: %s", e)
        return error_response(UnknownError(message="Failed to load candidate database"))

    result = await score_candidates(
        body.job_description,
        candidates,
        gateway,
        weights=weights,
        max_results=body.max_results,
    )
    if isinstance(result, ScoringFailure):
        return error_response(result.error)

    elapsed_ms = round((time.monotonic() - started) * 1000)
    logger.info(
        "Scored %d candidates in %dms, returning top %d",
        len(candidates),
        elapsed_ms,
        len(result.candidates),
    )
    return ScoreResponse(
        candidates=result.candidates,
        total_processed=len(candidates),
        processing_time_ms=elapsed_ms,
        model_used=gateway.model,
    )


@router.get("/candidates/stats", response_model=CandidateStats)
async def stats(store: CandidateStore = Depends(get_candidate_store)):
    try:
        candidates = await run_in_threadpool(store.get_candidates)
    except CandidateDataError as e:
        return error_response(UnknownError(message=str(e)))
    return candidate_search.candidate_stats(candidates)


@router.get("/candidates/search")
async def search(
    q: str = Query(..., min_length=1, max_length=200),
    limit: int = Query(default=50, ge=1, le=500),
    store: CandidateStore = Depends(get_candidate_store),
):
    try:
        candidates = await run_in_threadpool(store.get_candidates)
    except CandidateDataError as e:
        return error_response(UnknownError(message=str(e)))
    matches = candidate_search.search_candidates(candidates, q, limit)
    return {"candidates": [c.model_dump(mode="json") for c in matches], "total": len(matches)}


@router.post("/candidates/cache/invalidate")
async def invalidate_cache(store: CandidateStore = Depends(get_candidate_store)):
    store.invalidate()
    return {"status": "ok"}


def rate_limit_exceeded(request: Request, exc: Exception) -> JSONResponse:
    """slowapi handler: report throttling as a RATE_LIMIT scoring error."""
    return error_response(RateLimitError(message=f"Rate limit exceeded: {exc}"))
