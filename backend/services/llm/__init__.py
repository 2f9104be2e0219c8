"""LLM provider registry with lazy loading.

Usage:
    from services.llm import get_provider

    provider = get_provider("gemini", api_key=settings.gemini_api_key)
    text = await provider.generate_text(prompt, model=..., max_tokens=..., temperature=...)
"""

import importlib

from services.llm.base import LLMProvider

__all__ = ["LLMProvider", "available_providers", "get_provider"]

# Lazy registry: maps provider name -> (module_path, class_name)
_REGISTRY: dict[str, tuple[str, str]] = {
    "gemini": ("services.llm.gemini", "GeminiProvider"),
    "openai": ("services.llm.openai", "OpenAIProvider"),
    "anthropic": ("services.llm.anthropic", "AnthropicProvider"),
}


def get_provider(name: str, api_key: str = "") -> LLMProvider:
    """Instantiate and return an LLM provider by name.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unsupported LLM provider '{name}'. Available: {valid}"
        raise ValueError(msg)

    module_path, class_name = _REGISTRY[name]
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls(api_key=api_key)  # type: ignore[no-any-return]


def available_providers() -> list[str]:
    """Return sorted list of registered provider names."""
    return sorted(_REGISTRY)
