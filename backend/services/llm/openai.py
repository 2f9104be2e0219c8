"""OpenAI provider."""

import logging

from services.llm.base import LLMProvider, SchemaT, parse_structured
from services.llm.errors import LLMError, QuotaExhaustedError, RateLimitedError, TransportError

logger = logging.getLogger(__name__)


def _retry_after(error) -> int | None:
    response = getattr(error, "response", None)
    if response is None:
        return None
    value = response.headers.get("retry-after")
    try:
        return int(float(value)) if value else None
    except ValueError:
        return None


class OpenAIProvider(LLMProvider):
    """LLM provider using the OpenAI chat completions API."""

    @property
    def provider_id(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4.1-mini"

    @property
    def env_var(self) -> str:
        return "OPENAI_API_KEY"

    def _client(self):
        try:
            import openai
        except ImportError:
            msg = (
                "openai is required for the OpenAI provider. "
                "Install with: pip install 'candidate-screener[openai]'"
            )
            raise ImportError(msg) from None
        return openai.AsyncOpenAI(api_key=self._require_api_key())

    async def generate_structured(
        self,
        prompt: str,
        schema: type[SchemaT],
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> SchemaT:
        text = await self._complete(
            prompt,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": schema.__name__,
                    "schema": schema.model_json_schema(),
                },
            },
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
        return await self._complete(prompt, model=model, max_tokens=max_tokens, temperature=temperature)

    async def _complete(self, prompt: str, *, model: str, max_tokens: int, temperature: float, **extra) -> str:
        import openai

        client = self._client()
        logger.debug("Sending prompt to OpenAI (%s, %d chars)", model, len(prompt))
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=temperature,
                **extra,
            )
        except openai.RateLimitError as e:
            if getattr(e, "code", None) == "insufficient_quota":
                raise QuotaExhaustedError(str(e)) from e
            raise RateLimitedError(str(e), retry_after=_retry_after(e)) from e
        except openai.APITimeoutError as e:
            raise TransportError(f"OpenAI request timed out: {e}", code="TIMEOUT") from e
        except openai.APIConnectionError as e:
            raise TransportError(f"OpenAI connection failed: {e}", code="ECONNREFUSED") from e
        except openai.InternalServerError as e:
            raise TransportError(str(e), status=e.status_code) from e
        except openai.APIStatusError as e:
            if e.status_code == 402:
                raise QuotaExhaustedError(str(e)) from e
            raise LLMError(str(e), status=e.status_code) from e

        return response.choices[0].message.content or ""
