"""Provider-agnostic gateway used by the scoring core.

Binds one provider to a model, token budget, temperature and per-call
timeout. A call exceeding the timeout raises TransportError(code="TIMEOUT").
"""

import asyncio
import logging

from config import Settings
from models.responses import LLMHealthResponse
from services.llm import get_provider
from services.llm.base import LLMProvider, SchemaT
from services.llm.errors import TransportError

logger = logging.getLogger(__name__)

HEALTH_PROMPT = "Respond with 'OK'"


class LLMGateway:
    def __init__(
        self,
        provider: LLMProvider,
        model: str | None = None,
        max_tokens: int = 4000,
        temperature: float = 0.3,
        timeout: float | None = 30.0,
    ) -> None:
        self.provider = provider
        self.model = model or provider.default_model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    @property
    def provider_name(self) -> str:
        return self.provider.provider_id

    async def generate_structured(self, prompt: str, schema: type[SchemaT]) -> SchemaT:
        return await self._with_timeout(
            self.provider.generate_structured(
                prompt,
                schema,
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        )

    async def generate_text(self, prompt: str, max_tokens: int | None = None) -> str:
        return await self._with_timeout(
            self.provider.generate_text(
                prompt,
                model=self.model,
                max_tokens=max_tokens or self.max_tokens,
                temperature=self.temperature,
            )
        )

    async def check_health(self) -> LLMHealthResponse:
        """Liveness probe: one minimal generation call."""
        try:
            await self.generate_text(HEALTH_PROMPT, max_tokens=10)
        except Exception as e:
            logger.warning("LLM health check failed: %s", e)
            return LLMHealthResponse(
                healthy=False,
                provider=self.provider_name,
                model=self.model,
                error=str(e),
            )
        return LLMHealthResponse(healthy=True, provider=self.provider_name, model=self.model)

    async def _with_timeout(self, coro):
        if self.timeout is None:
            return await coro
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"LLM call exceeded {self.timeout:g}s timeout", code="TIMEOUT"
            ) from e


def build_gateway(settings: Settings) -> LLMGateway:
    """Create the gateway for the configured provider."""
    api_keys = {
        "gemini": settings.gemini_api_key,
        "openai": settings.openai_api_key,
        "anthropic": settings.anthropic_api_key,
    }
    provider = get_provider(settings.llm_provider, api_key=api_keys.get(settings.llm_provider, ""))
    return LLMGateway(
        provider,
        model=settings.llm_model or None,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        timeout=settings.llm_timeout_seconds,
    )
