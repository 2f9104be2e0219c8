"""Prompt templates for candidate scoring, plus response-shape validation."""

import json
from collections.abc import Sequence
from dataclasses import dataclass

from models.candidate import Candidate
from models.schemas.ai_score_response import AIScoreResponse
from models.weights import ScoringWeights
from services.llm.base import strip_code_fences

CONSTRAINED_BIO_CHARS = 100

SYSTEM_PROMPT = """You are an expert technical recruiter and hiring manager. Score each candidate objectively on how well they match the job description.

SCORING CRITERIA:
- Skills Match: how well technical skills align with the job requirements
- Experience Level: years of experience and depth of expertise
- Education Background: relevant degree and qualifications
- Portfolio/Projects: quality of work samples and projects
- Availability: how soon the candidate can start

SCORING GUIDELINES:
- 90-100: Exceptional match, ideal candidate
- 80-89: Strong match, definitely worth interviewing
- 70-79: Good match, worth considering
- 60-69: Moderate match, might work for some roles
- 50-59: Weak match, probably not suitable
- 0-49: Poor match, not recommended

RULES:
1. Be objective and consistent
2. Base scores only on the information provided
3. Give specific reasoning for every score
4. Score every candidate listed, using the exact ID given
5. Return ONLY valid JSON, no additional text or formatting

OUTPUT FORMAT:
{
  "candidates": [
    {
      "id": "<candidate id>",
      "score": <integer 0-100>,
      "highlights": ["<specific strength or gap>", "..."],
      "reasoning": "<2-3 sentence explanation>",
      "matchedSkills": ["<skill from the job found in the candidate>", "..."]
    }
  ]
}"""

# Extra guidance keyed on words in the job description
_FOCUS_RULES: list[tuple[tuple[str, ...], str]] = [
    (("senior", "lead"), "Evaluate leadership potential, architectural thinking, and mentoring capabilities."),
    (("junior", "entry"), "Prioritize learning potential, foundational skills, and growth mindset over years of experience."),
    (("remote",), "Consider remote work experience, communication skills, and ability to work independently."),
    (("startup",), "Value versatility, adaptability, and comfort with ambiguity and rapid change."),
]


def contextual_focus(job_description: str) -> list[str]:
    """Additional-focus lines triggered by the job description wording."""
    job = job_description.lower()
    return [
        f"ADDITIONAL FOCUS: {guidance}"
        for keywords, guidance in _FOCUS_RULES
        if any(k in job for k in keywords)
    ]


def _pct(value: float) -> str:
    return f"{value * 100:g}%"


def _weights_section(weights: ScoringWeights | None) -> str:
    if weights is None:
        return ""
    return (
        "\nCUSTOM SCORING WEIGHTS:\n"
        f"- Skills Match: {_pct(weights.skills_match)}\n"
        f"- Experience Level: {_pct(weights.experience_level)}\n"
        f"- Education: {_pct(weights.education)}\n"
        f"- Portfolio: {_pct(weights.portfolio)}\n"
        f"- Availability: {_pct(weights.availability)}"
    )


def format_candidate(candidate: Candidate) -> str:
    """Full description of one candidate for the structured prompt."""
    skills = ", ".join(candidate.skills) if candidate.skills else "Not specified"
    lines = [
        f"CANDIDATE: {candidate.name} (ID: {candidate.id})",
        f"Skills: {skills}",
        f"Experience: {candidate.experience} years",
        f"Location: {candidate.location}",
        f"Bio: {candidate.bio}",
        f"Availability: {candidate.availability or 'Not specified'}",
    ]
    if candidate.work_history:
        lines.append(f"Work History: {'; '.join(candidate.work_history)}")
    if candidate.education:
        lines.append(f"Education: {'; '.join(candidate.education)}")
    if candidate.questions:
        qa = "; ".join(f"Q: {q.question} A: {q.answer}" for q in candidate.questions)
        lines.append(f"Q&A: {qa}")
    return "\n".join(lines)


def build_structured_prompt(
    job_description: str,
    candidates: Sequence[Candidate],
    weights: ScoringWeights | None = None,
    contextual: bool = True,
) -> str:
    """Primary prompt: rubric, optional weights, every candidate in full."""
    rubric = SYSTEM_PROMPT
    if contextual:
        focus = contextual_focus(job_description)
        if focus:
            rubric = rubric + "\n" + "\n".join(focus)

    candidates_text = "\n\n".join(format_candidate(c) for c in candidates)

    return f"""{rubric}{_weights_section(weights)}

JOB DESCRIPTION: {job_description}

CANDIDATES TO EVALUATE:
{candidates_text}

Please evaluate each candidate and return the JSON response with scores, highlights, reasoning, and matched skills."""


def build_constrained_prompt(job_description: str, candidates: Sequence[Candidate]) -> str:
    """Fallback prompt: terse, free-text output that must itself be JSON."""
    lines = "\n".join(
        f"{c.id}: {c.name}, {','.join(c.skills)}, {c.experience}yr exp, "
        f"{c.bio[:CONSTRAINED_BIO_CHARS]}..."
        for c in candidates
    )

    return f"""You are a technical recruiter. Score these candidates 0-100 for this job.
Return ONLY this JSON structure, no other text:

{{
  "candidates": [
    {{
      "id": "candidate-id",
      "score": 85,
      "highlights": ["reason1", "reason2"],
      "reasoning": "brief explanation",
      "matchedSkills": ["skill1", "skill2"]
    }}
  ]
}}

JOB: {job_description}

CANDIDATES:
{lines}"""


@dataclass(frozen=True)
class ShapeError:
    """Why a free-text response did not have the expected shape."""
    reason: str


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _item_error(item: object) -> str | None:
    if not isinstance(item, dict):
        return "Each candidate must be an object"
    if not isinstance(item.get("id"), str) or not item["id"]:
        return "Each candidate must have valid 'id' string"
    score = item.get("score")
    if not _is_number(score) or not 0 <= score <= 100:
        return "Each candidate must have 'score' number between 0-100"
    if not isinstance(item.get("highlights"), list):
        return "Each candidate must have 'highlights' array"
    if not isinstance(item.get("reasoning"), str) or not item["reasoning"]:
        return "Each candidate must have 'reasoning' string"
    if not isinstance(item.get("matchedSkills"), list):
        return "Each candidate must have 'matchedSkills' array"
    return None


def validate_response_shape(raw_text: str) -> AIScoreResponse | ShapeError:
    """Check free-text model output against the expected JSON shape.

    Never raises: any problem is returned as a ShapeError naming the first
    offending rule.
    """
    try:
        parsed = json.loads(strip_code_fences(raw_text or ""))
    except json.JSONDecodeError as e:
        return ShapeError(f"Invalid JSON: {e}")

    if not isinstance(parsed, dict) or not isinstance(parsed.get("candidates"), list):
        return ShapeError("Response must have 'candidates' array")

    for item in parsed["candidates"]:
        reason = _item_error(item)
        if reason:
            return ShapeError(reason)

    try:
        return AIScoreResponse.model_validate(parsed)
    except ValueError as e:
        return ShapeError(f"Invalid candidate entry: {e}")
