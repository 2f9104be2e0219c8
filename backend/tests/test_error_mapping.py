import asyncio
import json
from datetime import datetime, timezone

from pydantic import ValidationError

from models.candidate import Candidate
from models.errors import STATUS_CODES, scoring_error_adapter
from models.weights import InputValidationError
from services.error_mapping import UnknownCandidateError, to_scoring_error
from services.llm.errors import (
    LLMError,
    QuotaExhaustedError,
    RateLimitedError,
    SchemaMismatchError,
    TransportError,
)


def test_rate_limit_default_and_explicit_retry_after():
    assert to_scoring_error(RateLimitedError()).retry_after == 60
    error = to_scoring_error(RateLimitedError(retry_after=12))
    assert error.type == "RATE_LIMIT"
    assert error.retry_after == 12


def test_quota_exceeded_resets_in_the_future():
    error = to_scoring_error(QuotaExhaustedError())
    assert error.type == "QUOTA_EXCEEDED"
    assert error.reset_time > datetime.now(timezone.utc)


def test_network_errors():
    assert to_scoring_error(TransportError("refused", code="ECONNREFUSED")).code == "ECONNREFUSED"
    assert to_scoring_error(asyncio.TimeoutError()).code == "TIMEOUT"
    assert to_scoring_error(ConnectionResetError("reset")).type == "NETWORK_ERROR"


def test_parse_errors_keep_raw_response():
    error = to_scoring_error(SchemaMismatchError("bad shape", raw_response="{oops"))
    assert error.type == "PARSE_ERROR"
    assert error.details == "bad shape"
    assert error.raw_response == "{oops"

    try:
        json.loads("{oops")
    except json.JSONDecodeError as e:
        assert to_scoring_error(e).type == "PARSE_ERROR"


def test_model_output_validation_is_a_parse_error():
    try:
        Candidate(id="x", name="", email="e", experience=1, location="L", bio="b" * 30)
    except ValidationError as e:
        assert to_scoring_error(e).type == "PARSE_ERROR"


def test_unknown_candidate_id_is_unknown_error():
    error = to_scoring_error(UnknownCandidateError("ghost"))
    assert error.type == "UNKNOWN_ERROR"
    assert error.message == "Candidate with ID ghost not found"


def test_input_validation():
    error = to_scoring_error(InputValidationError("weights", "Weights must sum to 1"))
    assert error.type == "VALIDATION_ERROR"
    assert error.field == "weights"


def test_everything_else_is_unknown():
    assert to_scoring_error(LLMError("401 unauthorized", status=401)).type == "UNKNOWN_ERROR"
    assert to_scoring_error(RuntimeError("boom")).message == "boom"
    assert to_scoring_error(RuntimeError()).message == "Unknown error occurred"


def test_variants_carry_only_their_own_fields():
    error = to_scoring_error(RateLimitedError())
    assert set(error.model_dump()) == {"type", "retry_after", "message"}
    parsed = scoring_error_adapter.validate_python({"type": "NETWORK_ERROR", "message": "down"})
    assert not hasattr(parsed, "retry_after")


def test_status_code_mapping_covers_every_kind():
    assert STATUS_CODES == {
        "VALIDATION_ERROR": 400,
        "RATE_LIMIT": 429,
        "PARSE_ERROR": 502,
        "NETWORK_ERROR": 503,
        "QUOTA_EXCEEDED": 402,
        "UNKNOWN_ERROR": 500,
    }
