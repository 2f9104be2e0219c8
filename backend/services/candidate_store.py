"""Read-only candidate dataset with a time-boxed in-memory cache."""

import json
import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path

from models.candidate import Candidate
from services.candidate_records import normalize_records
from services.candidate_search import deduplicate_candidates

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class CandidateDataError(RuntimeError):
    """The dataset file is missing or malformed."""


class CandidateStore:
    """Loads ``candidates.json`` and caches the parsed records.

    The cached collection is an immutable tuple that is replaced wholesale
    on reload or invalidation; records are never mutated in place.
    Freshness is checked against a monotonic clock.
    """

    def __init__(
        self,
        path: str | Path,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.path = Path(path)
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._candidates: tuple[Candidate, ...] | None = None
        self._loaded_at = 0.0

    def get_candidates(self) -> tuple[Candidate, ...]:
        """Return the cached dataset, reloading it when stale or empty."""
        with self._lock:
            now = self._clock()
            if self._candidates is not None and now - self._loaded_at < self.ttl_seconds:
                return self._candidates

            self._candidates = tuple(self._load())
            self._loaded_at = now
            return self._candidates

    def get_candidate(self, candidate_id: str) -> Candidate | None:
        for candidate in self.get_candidates():
            if candidate.id == candidate_id:
                return candidate
        return None

    def invalidate(self) -> None:
        with self._lock:
            self._candidates = None
            self._loaded_at = 0.0
        logger.info("Candidate cache invalidated")

    @property
    def is_cached(self) -> bool:
        return self._candidates is not None

    def _load(self) -> list[Candidate]:
        if not self.path.exists():
            raise CandidateDataError(f"Candidates data file not found at: {self.path}")

        try:
            rows = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CandidateDataError(f"Failed to load candidates: {e}") from e

        if not isinstance(rows, list):
            raise CandidateDataError("Candidates data must be an array")

        logger.info("Loading candidates from %s", self.path)
        return deduplicate_candidates(normalize_records(rows))
