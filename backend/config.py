import os
from typing import Literal

from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    # LLM provider
    llm_provider: Literal["gemini", "openai", "anthropic"] = "gemini"
    llm_model: str = ""  # empty -> provider default
    gemini_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    llm_max_tokens: int = 4000
    llm_temperature: float = 0.3
    llm_timeout_seconds: float = 30.0

    # Retry/backoff (1 initial attempt + max_retries)
    max_retries: int = 3
    retry_base_delay_ms: int = 1000
    retry_max_delay_ms: int = 10000

    # Batching
    batch_size: int = 10
    max_concurrent_batches: int = 3
    wave_pause_ms: int = 1000
    default_max_results: int = 30
    contextual_prompts: bool = True

    # Candidate dataset
    candidates_path: str = "data/candidates.json"
    cache_ttl_seconds: float = 300.0

    # HTTP surface
    score_rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
