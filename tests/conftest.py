"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from note_enhancer.clients.llm_client import LLMClient, LLMResponse
from note_enhancer.models.enhancement import FactSnippet


@pytest.fixture
def sample_job_text() -> str:
    return (
        "So um I'm applying for the software engineering internship at Google. "
        "I built a web app with React and Firebase that about 2000 students use "
        "to find study groups, and I'm really excited about working on search."
    )


@pytest.fixture
def sample_cover_letter_text() -> str:
    return (
        "Dear Hiring Manager, I am writing to apply for the data analyst position "
        "at your company. I have two years of experience with SQL and Tableau."
    )


@pytest.fixture
def sample_greeting_text() -> str:
    return "hey how are you doing"


@pytest.fixture
def sample_snippets() -> list[FactSnippet]:
    return [
        FactSnippet(
            term="MIT",
            text=(
                "The Massachusetts Institute of Technology (MIT) is a private research "
                "university in Cambridge, Massachusetts. It is ranked #1 in the QS World University Rankings."
            ),
        ),
        FactSnippet(
            term="Stanford",
            text="Stanford has an endowment of $36.5 billion. It is a nice place.",
            source="duckduckgo",
        ),
    ]


@pytest.fixture
def mock_llm_client() -> AsyncMock:
    """Mock LLMClient that returns a fixed rewrite."""
    client = AsyncMock(spec=LLMClient)
    client.generate.return_value = LLMResponse(
        text="I am applying for the Software Engineering Internship at Google.",
        input_tokens=300,
        output_tokens=40,
    )
    return client
