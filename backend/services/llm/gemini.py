"""Google Gemini provider (google-genai SDK)."""

import logging

import httpx
from google import genai
from google.genai import types
from google.genai.errors import ClientError, ServerError

from services.llm.base import LLMProvider, SchemaT, parse_structured
from services.llm.errors import LLMError, QuotaExhaustedError, RateLimitedError, TransportError

logger = logging.getLogger(__name__)


class GeminiProvider(LLMProvider):
    """LLM provider using the Google Gemini API."""

    def __init__(self, api_key: str = "") -> None:
        super().__init__(api_key)
        self._client: genai.Client | None = None

    @property
    def provider_id(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return "gemini-2.5-flash"

    @property
    def env_var(self) -> str:
        return "GEMINI_API_KEY"

    def get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self._require_api_key())
        return self._client

    async def generate_structured(
        self,
        prompt: str,
        schema: type[SchemaT],
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> SchemaT:
        text = await self._generate(
            prompt,
            model=model,
            config=types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        return parse_structured(text, schema)

    async def generate_text(
        self,
        prompt: str,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        return await self._generate(
            prompt,
            model=model,
            config=types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
            ),
        )

    async def _generate(self, prompt: str, *, model: str, config: types.GenerateContentConfig) -> str:
        client = self.get_client()
        logger.debug("Sending prompt to Gemini (%s, %d chars)", model, len(prompt))
        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=config,
            )
        except ClientError as e:
            if e.code == 429 or "RESOURCE_EXHAUSTED" in str(e):
                raise RateLimitedError(str(e)) from e
            if e.code == 402:
                raise QuotaExhaustedError(str(e)) from e
            raise LLMError(str(e), status=e.code) from e
        except ServerError as e:
            raise TransportError(str(e), code=e.status, status=e.code) from e
        except httpx.TimeoutException as e:
            raise TransportError(f"Gemini request timed out: {e}", code="TIMEOUT") from e
        except httpx.TransportError as e:
            raise TransportError(f"Gemini connection failed: {e}", code="ECONNREFUSED") from e

        return response.text or ""
