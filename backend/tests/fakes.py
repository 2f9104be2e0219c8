"""In-process stand-ins for LLM providers, plus candidate factories."""

import re
from collections.abc import Callable

from models.candidate import Candidate
from services.llm.base import LLMProvider
from services.llm.gateway import LLMGateway

_STRUCTURED_ID_RE = re.compile(r"\(ID: ([^)]+)\)")
_CONSTRAINED_ID_RE = re.compile(r"^([\w-]+): ", re.MULTILINE)


def make_candidate(i: int, **overrides) -> Candidate:
    fields = {
        "id": f"cand-{i}",
        "name": f"Candidate {i}",
        "email": f"candidate{i}@example.com",
        "experience": i % 15,
        "location": "Berlin",
        "bio": f"Backend engineer number {i} with Python and cloud experience.",
        "skills": ("Python", "FastAPI", "AWS"),
    }
    fields.update(overrides)
    return Candidate(**fields)


def make_pool(n: int) -> list[Candidate]:
    return [make_candidate(i) for i in range(n)]


def ids_in_prompt(prompt: str) -> list[str]:
    """Candidate ids mentioned in either prompt variant."""
    ids = _STRUCTURED_ID_RE.findall(prompt)
    if ids:
        return ids
    _, _, tail = prompt.partition("CANDIDATES:\n")
    return _CONSTRAINED_ID_RE.findall(tail)


def score_payload(ids: list[str], score: Callable[[str], float] = lambda _id: 70) -> dict:
    return {
        "candidates": [
            {
                "id": cid,
                "score": score(cid),
                "highlights": [f"Relevant experience for {cid}"],
                "reasoning": f"Candidate {cid} matches most of the stated requirements.",
                "matchedSkills": ["Python"],
            }
            for cid in ids
        ]
    }


class FakeProvider(LLMProvider):
    """Provider driven by plain callables.

    ``structured(prompt)`` returns a payload dict (validated against the
    requested schema) or raises; ``text(prompt)`` returns a string or raises.
    """

    def __init__(
        self,
        structured: Callable[[str], dict] | None = None,
        text: Callable[[str], str] | None = None,
    ) -> None:
        super().__init__(api_key="test")
        self._structured = structured or (lambda prompt: score_payload(ids_in_prompt(prompt)))
        self._text = text or (lambda prompt: "OK")
        self.structured_calls: list[str] = []
        self.text_calls: list[str] = []

    @property
    def provider_id(self) -> str:
        return "fake"

    @property
    def default_model(self) -> str:
        return "fake-model"

    @property
    def env_var(self) -> None:
        return None

    async def generate_structured(self, prompt, schema, *, model, max_tokens, temperature):
        self.structured_calls.append(prompt)
        return schema.model_validate(self._structured(prompt))

    async def generate_text(self, prompt, *, model, max_tokens, temperature):
        self.text_calls.append(prompt)
        return self._text(prompt)

    @property
    def total_calls(self) -> int:
        return len(self.structured_calls) + len(self.text_calls)


def make_gateway(provider: LLMProvider) -> LLMGateway:
    return LLMGateway(provider, timeout=None)


class SleepRecorder:
    """Replacement for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
