"""Keyword search, de-duplication and summary statistics over candidates."""

import logging
import re
from collections import Counter

from models.candidate import Candidate
from models.responses import CandidateStats

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "is", "are", "was", "were", "be", "been", "have",
    "has", "had", "do", "does", "did", "will", "would", "could", "should",
})

MAX_KEYWORDS = 20


def normalize_text(text: str) -> str:
    """Lowercase, strip HTML tags and punctuation, collapse whitespace."""
    if not text:
        return ""
    text = text.lower().strip()
    text = re.sub(r"<[^>]*>", "", text)
    text = re.sub(r"[^\w\s.-]", " ", text)
    return re.sub(r"\s+", " ", text).strip()


def extract_keywords(text: str) -> list[str]:
    """First 20 distinct non-stop-words longer than two characters."""
    seen: dict[str, None] = {}
    for word in normalize_text(text).split():
        if len(word) > 2 and word not in STOP_WORDS:
            seen.setdefault(word, None)
    return list(seen)[:MAX_KEYWORDS]


def _candidate_text(candidate: Candidate) -> str:
    return " ".join([
        candidate.name,
        candidate.bio,
        *candidate.skills,
        candidate.location,
        *candidate.work_history,
        *candidate.education,
    ])


def search_candidates(
    candidates: tuple[Candidate, ...] | list[Candidate],
    query: str,
    limit: int = 50,
) -> list[Candidate]:
    """Rank candidates by the share of query keywords they (partially) match."""
    query_keywords = extract_keywords(query)
    if not query_keywords:
        return list(candidates[:limit])

    ranked = []
    for candidate in candidates:
        candidate_keywords = extract_keywords(_candidate_text(candidate))
        hits = sum(
            1
            for kw in query_keywords
            if any(ck in kw or kw in ck for ck in candidate_keywords)
        )
        if hits:
            ranked.append((hits / len(query_keywords), candidate))

    ranked.sort(key=lambda item: item[0], reverse=True)
    return [candidate for _, candidate in ranked[:limit]]


def deduplicate_candidates(candidates: tuple[Candidate, ...] | list[Candidate]) -> list[Candidate]:
    """Drop later records sharing a normalized (email, name) pair."""
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        key = f"{normalize_text(candidate.email)}_{normalize_text(candidate.name)}"
        if key in seen:
            logger.info("Duplicate candidate found: %s (%s)", candidate.name, candidate.email)
            continue
        seen.add(key)
        unique.append(candidate)
    return unique


def candidate_stats(candidates: tuple[Candidate, ...] | list[Candidate]) -> CandidateStats:
    if not candidates:
        return CandidateStats()

    skills: dict[str, None] = {}
    locations: Counter[str] = Counter()
    availability: Counter[str] = Counter()
    total_experience = 0

    for candidate in candidates:
        for skill in candidate.skills:
            skills.setdefault(skill, None)
        locations[candidate.location] += 1
        availability[candidate.availability or "not-available"] += 1
        total_experience += candidate.experience

    return CandidateStats(
        total_candidates=len(candidates),
        unique_skills=len(skills),
        top_skills=list(skills)[:20],
        locations=dict(locations),
        average_experience=round(total_experience / len(candidates), 2),
        availability_distribution=dict(availability),
    )
