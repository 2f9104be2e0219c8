"""Exceptions raised by LLM providers.

Providers translate vendor SDK failures into these so the scoring core can
classify them without knowing which SDK produced them.
"""


class LLMError(Exception):
    """Any provider failure not covered by a more specific subclass."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class RateLimitedError(LLMError):
    """HTTP 429 / resource exhausted."""

    def __init__(self, message: str = "Rate limited", *, retry_after: int | None = None) -> None:
        super().__init__(message, status=429)
        self.retry_after = retry_after


class QuotaExhaustedError(LLMError):
    """Billing quota exceeded (HTTP 402 / insufficient_quota)."""

    def __init__(self, message: str = "Quota exceeded") -> None:
        super().__init__(message, status=402)


class TransportError(LLMError):
    """Connection failure, timeout or upstream 5xx."""

    def __init__(self, message: str, *, code: str | None = None, status: int | None = None) -> None:
        super().__init__(message, status=status)
        self.code = code


class SchemaMismatchError(LLMError):
    """The model answered, but not with a valid instance of the schema."""

    def __init__(self, details: str, *, raw_response: str | None = None) -> None:
        super().__init__(details)
        self.details = details
        self.raw_response = raw_response
