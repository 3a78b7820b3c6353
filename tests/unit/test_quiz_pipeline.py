"""
Unit tests for backend/app/services/quiz_pipeline.py
Tests: request guard (bounds, empty source) without client calls, assembly of
the strict result, total-failure policy in both settings, under-generation
warning, propagation of service failures, no caching between calls.
"""

from unittest.mock import MagicMock

import pytest

from app.config import Settings
from app.schemas.quiz import GeneratedQuizResult, SourceDocument
from app.services import quiz_pipeline
from app.services.errors import GenerationUnavailableError, InvalidRequestError, NoUsableContentError
from app.services.quiz_pipeline import CountBounds, QuizGenerationPipeline
from fakes import FakeGenerationClient, quiz_item

DOC = SourceDocument(data=b"%PDF-1.4 fake", name="cours.pdf")


def _quiz(n, facts=None):
    return {"quiz": [quiz_item(f"Q{i}") for i in range(n)], "flashFacts": facts or ["Un fait utile."]}


# ── Guard ────────────────────────────────────────────────────────────────────

class TestRequestGuard:

    async def test_count_below_minimum_rejected_without_service_call(self, make_pipeline):
        pipeline, client = make_pipeline(_quiz(5))
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_quiz_from_documents([DOC], 3)
        assert client.calls == []

    async def test_count_above_maximum_rejected_without_service_call(self, make_pipeline):
        pipeline, client = make_pipeline(_quiz(5))
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_quiz_from_documents([DOC], 1001)
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_quiz_from_topic("Football", 51)
        assert client.calls == []

    @pytest.mark.parametrize("count", ["10", 7.5, True, None])
    async def test_non_integer_count_rejected(self, make_pipeline, count):
        pipeline, client = make_pipeline(_quiz(5))
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_quiz_from_topic("Football", count)
        assert client.calls == []

    @pytest.mark.parametrize("documents", [None, []])
    async def test_no_documents_rejected(self, make_pipeline, documents):
        pipeline, client = make_pipeline(_quiz(5))
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_quiz_from_documents(documents, 10)
        assert client.calls == []

    async def test_empty_document_rejected(self, make_pipeline):
        pipeline, client = make_pipeline(_quiz(5))
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_quiz_from_documents([DOC, SourceDocument(data=b"")], 10)
        assert client.calls == []

    @pytest.mark.parametrize("topic", ["", "   ", None])
    async def test_no_topic_rejected(self, make_pipeline, topic):
        pipeline, client = make_pipeline(_quiz(5))
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_quiz(topic, 10)
        assert client.calls == []

    def test_guard_is_synchronous(self, make_pipeline):
        pipeline, _ = make_pipeline()
        with pytest.raises(InvalidRequestError):
            pipeline.check_documents_request([], 10)
        assert pipeline.check_topic_request("Football", 5) == 5

    def test_configured_bounds_are_used(self):
        settings = Settings(pdf_quiz_min_questions=2, pdf_quiz_max_questions=3)
        pipeline = QuizGenerationPipeline.from_settings(settings, FakeGenerationClient())
        assert pipeline.pdf_bounds == CountBounds(2, 3)
        assert pipeline.check_documents_request([DOC], 2) == 2
        with pytest.raises(InvalidRequestError):
            pipeline.check_documents_request([DOC], 4)

    async def test_invalid_request_wins_over_missing_provider(self):
        pipeline = QuizGenerationPipeline.from_settings(
            Settings(openai_api_key="", gemini_api_key="", ai_provider="auto")
        )
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_quiz("Football", 3)
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_flash_facts("   ")
        with pytest.raises(GenerationUnavailableError):
            await pipeline.generate_quiz("Football", 10)


# ── Generation ───────────────────────────────────────────────────────────────

class TestGeneration:

    async def test_documents_are_sent_with_prompt_and_declared_schema(self, make_pipeline):
        pipeline, client = make_pipeline(_quiz(10))
        result = await pipeline.generate_quiz([DOC], 10)
        assert isinstance(result, GeneratedQuizResult)
        assert len(result.quiz) == 10
        assert result.flash_facts == ["Un fait utile."]
        call = client.calls[0]
        assert call["documents"] == [DOC]
        assert "exactly 10" in call["prompt"]
        assert "quiz" in call["response_schema"]["properties"]

    async def test_topic_goes_into_french_prompt(self, make_pipeline):
        pipeline, client = make_pipeline(_quiz(5))
        await pipeline.generate_quiz("  Agriculture Maroc ", 5)
        call = client.calls[0]
        assert call["documents"] == []
        assert "Agriculture Maroc" in call["prompt"]
        assert "EN FRANÇAIS" in call["prompt"]

    async def test_malformed_items_are_filtered_not_raised(self, make_pipeline):
        raw = {
            "quiz": [quiz_item("Q1"), quiz_item("Q2", options=["A", "B", "C"], answer="A"), quiz_item("Q3", answer="Z")],
            "flashFacts": ["", "Le Maroc a exporté 2M tonnes.", "Aucune information flash spécifique."],
        }
        pipeline, _ = make_pipeline(raw)
        result = await pipeline.generate_quiz_from_topic("Économie Maroc", 5)
        assert [q.question for q in result.quiz] == ["Q1"]
        assert result.flash_facts == ["Le Maroc a exporté 2M tonnes."]

    async def test_missing_facts_are_absent_not_empty(self, make_pipeline):
        pipeline, _ = make_pipeline({"quiz": [quiz_item(f"Q{i}") for i in range(5)], "flashFacts": []})
        result = await pipeline.generate_quiz_from_topic("Football", 5)
        assert result.flash_facts is None

    async def test_lenient_parse_tolerates_wrong_top_level_types(self, make_pipeline):
        pipeline, _ = make_pipeline({"quiz": [quiz_item()], "flashFacts": "pas une liste"})
        result = await pipeline.generate_quiz_from_topic("Football", 5)
        assert len(result.quiz) == 1
        assert result.flash_facts is None

    async def test_service_failure_propagates(self, make_pipeline):
        pipeline, client = make_pipeline(GenerationUnavailableError("down"))
        with pytest.raises(GenerationUnavailableError):
            await pipeline.generate_quiz([DOC], 10)
        assert len(client.calls) == 1

    async def test_identical_requests_are_not_cached(self, make_pipeline):
        pipeline, client = make_pipeline(_quiz(5), {"quiz": [quiz_item("Autre question")]})
        first = await pipeline.generate_quiz("Football", 5)
        second = await pipeline.generate_quiz("Football", 5)
        assert len(client.calls) == 2
        assert first.quiz != second.quiz


# ── Total failure policy ─────────────────────────────────────────────────────

class TestTotalFailurePolicy:

    JUNK = {"quiz": [quiz_item(question="")], "flashFacts": ["No information available."]}

    async def test_raises_when_policy_is_fatal(self, make_pipeline):
        pipeline, _ = make_pipeline(self.JUNK, fail_on_empty_result=True)
        with pytest.raises(NoUsableContentError):
            await pipeline.generate_quiz([DOC], 10)

    async def test_returns_empty_result_when_policy_is_soft(self, make_pipeline):
        pipeline, _ = make_pipeline(self.JUNK, fail_on_empty_result=False)
        result = await pipeline.generate_quiz([DOC], 10)
        assert result.quiz == []
        assert result.flash_facts is None

    async def test_empty_object_counts_as_total_failure(self, make_pipeline):
        pipeline, _ = make_pipeline({}, fail_on_empty_result=True)
        with pytest.raises(NoUsableContentError):
            await pipeline.generate_quiz("Football", 5)

    async def test_facts_without_questions_is_not_total_failure(self, make_pipeline):
        pipeline, _ = make_pipeline({"quiz": [], "flashFacts": ["Un fait."]}, fail_on_empty_result=True)
        result = await pipeline.generate_quiz("Football", 5)
        assert result.quiz == []
        assert result.flash_facts == ["Un fait."]


# ── Under-generation ─────────────────────────────────────────────────────────

class TestUnderGeneration:

    async def test_warns_but_returns(self, make_pipeline, monkeypatch):
        log = MagicMock()
        monkeypatch.setattr(quiz_pipeline, "logger", log)
        pipeline, _ = make_pipeline(_quiz(4))
        result = await pipeline.generate_quiz([DOC], 10)
        assert len(result.quiz) == 4
        messages = [c.args[0] for c in log.warning.call_args_list]
        assert "Fewer quiz questions than requested" in messages

    async def test_ratio_is_configurable(self, make_pipeline, monkeypatch):
        log = MagicMock()
        monkeypatch.setattr(quiz_pipeline, "logger", log)
        pipeline, _ = make_pipeline(_quiz(7), ratio=0.8)
        await pipeline.generate_quiz([DOC], 10)
        assert log.warning.called

    async def test_no_warning_when_enough(self, make_pipeline, monkeypatch):
        log = MagicMock()
        monkeypatch.setattr(quiz_pipeline, "logger", log)
        pipeline, _ = make_pipeline(_quiz(6))
        await pipeline.generate_quiz([DOC], 10)
        assert not log.warning.called


# ── Flash facts ──────────────────────────────────────────────────────────────

class TestFlashFacts:

    async def test_generates_filtered_facts(self, make_pipeline):
        pipeline, client = make_pipeline({"flashFacts": ["Fait 1.", "aucune information disponible", "Fait 2."]})
        result = await pipeline.generate_flash_facts("Finance du Maroc")
        assert result.flash_facts == ["Fait 1.", "Fait 2."]
        assert client.calls[0]["label"] == "flash facts"

    async def test_no_usable_facts_is_soft(self, make_pipeline):
        pipeline, _ = make_pipeline({"flashFacts": []})
        result = await pipeline.generate_flash_facts("Football")
        assert result.flash_facts is None

    async def test_empty_topic_rejected(self, make_pipeline):
        pipeline, client = make_pipeline({"flashFacts": ["x"]})
        with pytest.raises(InvalidRequestError):
            await pipeline.generate_flash_facts("  ")
        assert client.calls == []
