"""
Shared pytest fixtures for the QuizWhiz test suite.
Generation clients and Supabase are replaced by in-memory fakes; no live services.
"""

import os

import pytest

# Keep settings deterministic regardless of the developer's .env
os.environ.setdefault("OPENAI_API_KEY", "")
os.environ.setdefault("GEMINI_API_KEY", "")
os.environ.setdefault("SUPABASE_URL", "")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "")

from app.services.quiz_pipeline import CountBounds, QuizGenerationPipeline  # noqa: E402
from fakes import FakeGenerationClient, FakeStore, make_pdf_bytes  # noqa: E402


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf_bytes()


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def make_pipeline():
    """Build a pipeline around a fake client loaded with the given responses."""

    def _make(*responses, fail_on_empty_result: bool = True, ratio: float = 0.5):
        client = FakeGenerationClient(*responses)
        pipeline = QuizGenerationPipeline(
            client,
            pdf_bounds=CountBounds(5, 1000),
            topic_bounds=CountBounds(5, 50),
            under_generation_ratio=ratio,
            fail_on_empty_result=fail_on_empty_result,
        )
        return pipeline, client

    return _make
