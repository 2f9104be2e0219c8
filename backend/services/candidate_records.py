"""Normalization of raw dataset rows into Candidate records.

Rows come from an offline spreadsheet export: list-like columns are
pipe-separated strings, screening questions are spread over numbered
``questionN``/``answerN`` columns, and years of experience have to be
inferred from the free-text experience column.
"""

import logging
import re
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from models.candidate import Candidate, QuestionAnswer

logger = logging.getLogger(__name__)

MAX_QUESTIONS = 7
MIN_BIO_LENGTH = 20

_YEARS_RE = re.compile(r"(\d+)\+?\s*years?", re.IGNORECASE)


def split_field(value: Any) -> list[str]:
    """Split a pipe-separated column (or pass through a list) into items."""
    if not value:
        return []
    if isinstance(value, str):
        return [s.strip() for s in value.split("|")]
    if isinstance(value, list):
        return [str(s).strip() for s in value]
    return []


def extract_experience_years(experiences: str) -> int:
    """Infer total years of experience from the experience column.

    Uses the largest explicit "N years" mention; otherwise assumes two
    years per listed role, capped at 20.
    """
    if not experiences:
        return 0

    matches = _YEARS_RE.findall(experiences)
    if matches:
        return max(int(m) for m in matches)

    job_count = experiences.count("|") + 1
    return min(job_count * 2, 20)


def parse_creation_time(value: str | None) -> str | None:
    """Parse ``DD/MM/YYYY  HH:MM`` or ISO timestamps into ISO-8601."""
    if not value:
        return None

    if "/" in value:
        date_part, _, time_part = value.partition("  ")
        parts = date_part.split("/")
        if len(parts) == 3 and all(parts):
            day, month, year = parts
            iso = f"{year}-{month.zfill(2)}-{day.zfill(2)}"
            if time_part.strip():
                iso = f"{iso}T{time_part.strip()}"
            try:
                return datetime.fromisoformat(iso).isoformat()
            except ValueError:
                logger.warning("Failed to parse creation time: %s", value)
                return None

    try:
        return datetime.fromisoformat(value).isoformat()
    except ValueError:
        return None


def build_bio(row: dict[str, Any]) -> str:
    """Compose a bio from headline, summary, current title and top skills."""
    parts = []
    if row.get("headline"):
        parts.append(row["headline"])
    if row.get("summary"):
        parts.append(row["summary"])
    if row.get("jobTitle"):
        parts.append(f"Currently working as {row['jobTitle']}")

    skills = row.get("skills")
    if isinstance(skills, str) and skills:
        top = ", ".join(skills.split("|")[:5])
        if top:
            parts.append(f"Skills include: {top}")

    bio = ". ".join(parts)
    if len(bio) >= MIN_BIO_LENGTH:
        return bio[:2000]
    return (
        f"Professional with experience in {row.get('jobTitle') or 'software development'}. "
        "Skilled in various technologies and committed to delivering quality work."
    )


def _questions(row: dict[str, Any]) -> list[QuestionAnswer]:
    pairs = []
    for i in range(1, MAX_QUESTIONS + 1):
        question = row.get(f"question{i}")
        answer = row.get(f"answer{i}")
        if question and answer:
            pairs.append(QuestionAnswer(question=question, answer=answer))
    return pairs


def normalize_record(row: dict[str, Any], index: int) -> Candidate:
    """Convert one raw row into a validated Candidate.

    Raises pydantic.ValidationError if the row cannot form a valid record.
    """
    experiences = row.get("experiences")
    return Candidate(
        id=str(row.get("id") or f"generated-{index}"),
        name=row.get("name") or "",
        email=row.get("email") or f"candidate{index}@example.com",
        experience=extract_experience_years(experiences if isinstance(experiences, str) else ""),
        location=row.get("jobLocation") or row.get("location") or "Unknown",
        bio=build_bio(row),
        skills=split_field(row.get("skills")),
        education=split_field(row.get("educations")),
        work_history=split_field(experiences),
        questions=_questions(row),
        availability=row.get("availability"),
        job_title=row.get("jobTitle"),
        job_department=row.get("jobDepartment"),
        job_location=row.get("jobLocation"),
        headline=row.get("headline"),
        summary=row.get("summary"),
        creation_time=parse_creation_time(row.get("creationTime")),
        disqualified=row.get("disqualified") == "Yes",
    )


def normalize_records(rows: list[Any]) -> list[Candidate]:
    """Normalize every row, skipping (and logging) the invalid ones."""
    candidates = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            logger.warning("Invalid candidate data at index %d: not an object", index)
            continue
        try:
            candidates.append(normalize_record(row, index))
        except ValidationError as e:
            logger.warning("Invalid candidate data at index %d: %s", index, e)
    logger.info("Loaded %d valid candidates", len(candidates))
    return candidates
