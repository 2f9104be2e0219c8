"""Shared test configuration, pytest markers and fixtures."""

import json

import pytest

from fakes import SleepRecorder


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: calls a real LLM provider (needs API key)"
    )


RAW_RECORDS = [
    {
        "id": "a1",
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "headline": "Senior Python Engineer",
        "summary": "Builds data platforms and APIs",
        "jobTitle": "Staff Engineer",
        "jobLocation": "London",
        "skills": "Python|FastAPI|PostgreSQL|AWS",
        "educations": "BSc Mathematics|MSc Computer Science",
        "experiences": "Engineer at X, 8 years|Developer at Y",
        "question1": "Notice period?",
        "answer1": "Two weeks",
        "creationTime": "05/03/2024  14:30",
        "disqualified": "No",
    },
    {
        "id": "b2",
        "name": "Grace Hopper",
        "email": "grace@example.com",
        "headline": "Frontend developer focused on React",
        "skills": "React|TypeScript",
        "experiences": "Developer at A|Developer at B|Developer at C",
        "location": "Remote",
        "disqualified": "Yes",
    },
    {
        # no name: rejected by validation
        "id": "c3",
        "email": "nobody@example.com",
    },
]


@pytest.fixture
def dataset_file(tmp_path):
    path = tmp_path / "candidates.json"
    path.write_text(json.dumps(RAW_RECORDS), encoding="utf-8")
    return path


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()
