"""Anthropic Claude provider.

Structured output is obtained by forcing a single tool call whose input
schema is the requested pydantic schema.
"""

import json
import logging

from services.llm.base import LLMProvider, SchemaT, parse_structured
from services.llm.errors import LLMError, QuotaExhaustedError, RateLimitedError, TransportError

logger = logging.getLogger(__name__)

_TOOL_NAME = "record_result"


class AnthropicProvider(LLMProvider):
    """LLM provider using the Anthropic Messages API."""

    @property
    def provider_id(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    @property
    def env_var(self) -> str:
        return "ANTHROPIC_API_KEY"

    def _client(self):
        try:
            import anthropic
        except ImportError:
            msg = (
                "anthropic is required for the Anthropic provider. "
                "Install with: pip install 'candidate-screener[anthropic]'"
            )
            raise ImportError(msg) from None
        return anthropic.AsyncAnthropic(api_key=self._require_api_key())

    async def generate_structured(
        self,
        prompt: str,
        schema: type[SchemaT],
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> SchemaT:
        message = await self._create(
            prompt,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            tools=[{
                "name": _TOOL_NAME,
                "description": "Record the evaluation result.",
                "input_schema": schema.model_json_schema(),
            }],
            tool_choice={"type": "tool", "name": _TOOL_NAME},
        )
        for block in message.content:
            if getattr(block, "type", None) == "tool_use":
                return parse_structured(json.dumps(block.input), schema)
        return parse_structured(_joined_text(message), schema)

    async def generate_text(
        self,
        prompt: str,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        message = await self._create(prompt, model=model, max_tokens=max_tokens, temperature=temperature)
        return _joined_text(message)

    async def _create(self, prompt: str, *, model: str, max_tokens: int, temperature: float, **extra):
        import anthropic

        client = self._client()
        logger.debug("Sending prompt to Anthropic (%s, %d chars)", model, len(prompt))
        try:
            return await client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
                **extra,
            )
        except anthropic.RateLimitError as e:
            raise RateLimitedError(str(e)) from e
        except anthropic.APITimeoutError as e:
            raise TransportError(f"Anthropic request timed out: {e}", code="TIMEOUT") from e
        except anthropic.APIConnectionError as e:
            raise TransportError(f"Anthropic connection failed: {e}", code="ECONNREFUSED") from e
        except anthropic.InternalServerError as e:
            raise TransportError(str(e), status=e.status_code) from e
        except anthropic.APIStatusError as e:
            if e.status_code == 402:
                raise QuotaExhaustedError(str(e)) from e
            if e.status_code == 529:  # overloaded
                raise TransportError(str(e), status=e.status_code) from e
            raise LLMError(str(e), status=e.status_code) from e


def _joined_text(message) -> str:
    return "".join(getattr(block, "text", "") for block in message.content)
