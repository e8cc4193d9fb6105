"""Shared test configuration and fixtures.

No test talks to a real Ollama server: gateways are built on
``httpx.MockTransport`` with a per-test request handler.
"""

import json

import httpx
import pytest

from models.schemas.resume import StructuredResume
from services.ollama_client import ActiveModel, OllamaGateway


SAMPLE_RESUME_DATA = {
    "personal_info": {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "+44 20 7946 0958",
        "linkedin": "linkedin.com/in/ada",
        "github": "github.com/ada",
    },
    "education": [
        {
            "degree": "B.Sc. Mathematics",
            "institution": "University of London",
            "year": "2025",
            "score": "8.4 CGPA",
            "location": "London, UK",
        }
    ],
    "experience": [
        {
            "title": "Analyst",
            "company": "Analytical Engines Ltd",
            "duration": "2023 - Present",
            "description": "Wrote the first programs for the engine",
            "location": "Cambridge, UK",
        }
    ],
    "skills": ["Python", "SQL", "Docker", "Kubernetes", "React", "Pandas"],
}


@pytest.fixture
def resume() -> StructuredResume:
    return StructuredResume.model_validate(SAMPLE_RESUME_DATA)


@pytest.fixture
def chat_reply():
    """Build an Ollama /api/chat response whose content is ``content``."""

    def _reply(content) -> httpx.Response:
        if not isinstance(content, str):
            content = json.dumps(content)
        return httpx.Response(
            200,
            json={"model": "llama3.2", "message": {"role": "assistant", "content": content}},
        )

    return _reply


@pytest.fixture
def make_gateway():
    """Build an OllamaGateway whose HTTP traffic goes to ``handler``."""

    def _make(handler, model: str = "llama3.2", timeout: float = 5.0) -> OllamaGateway:
        return OllamaGateway(
            "http://ollama.test",
            ActiveModel(model),
            timeout=timeout,
            probe_timeout=1.0,
            transport=httpx.MockTransport(handler),
        )

    return _make
