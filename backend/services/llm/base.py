"""Abstract base class for LLM providers and shared response parsing."""

import json
import re
from abc import ABC, abstractmethod
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from services.llm.errors import SchemaMismatchError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if present."""
    cleaned = re.sub(r"^```(?:json)?\s*\n?", "", text.strip())
    cleaned = re.sub(r"\n?```\s*$", "", cleaned)
    return cleaned.strip()


def parse_structured(raw_text: str | None, schema: type[SchemaT]) -> SchemaT:
    """Parse provider output into ``schema``.

    Raises SchemaMismatchError (carrying the raw text) on invalid JSON or a
    schema violation.
    """
    if not raw_text:
        raise SchemaMismatchError("Empty response from model", raw_response=raw_text)

    try:
        data = json.loads(strip_code_fences(raw_text))
    except json.JSONDecodeError as e:
        raise SchemaMismatchError(f"Invalid JSON: {e}", raw_response=raw_text) from e

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise SchemaMismatchError(
            f"Response does not match {schema.__name__}: {e.errors()[0]['msg']}",
            raw_response=raw_text,
        ) from e


class LLMProvider(ABC):
    """Base class that every LLM provider must implement."""

    def __init__(self, api_key: str = "") -> None:
        self.api_key = api_key

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique identifier for this provider (e.g. 'gemini')."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """The default model ID used when no override is specified."""

    @property
    @abstractmethod
    def env_var(self) -> str | None:
        """Environment variable name for the API key, or None if not needed."""

    @abstractmethod
    async def generate_structured(
        self,
        prompt: str,
        schema: type[SchemaT],
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> SchemaT:
        """Ask the model for an object conforming to ``schema``.

        Raises an LLMError subclass on transport, auth, rate-limit or
        schema-mismatch failures.
        """

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Return raw model text. Shape validation is the caller's job."""

    def _require_api_key(self) -> str:
        if not self.api_key:
            msg = f"{self.env_var} is required for the {self.provider_id} provider"
            raise ValueError(msg)
        return self.api_key
