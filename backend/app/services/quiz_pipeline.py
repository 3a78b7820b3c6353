"""Quiz generation pipeline: request guard, generation call, validation and result assembly.

Contract:
- Requests with no source material or a question count outside the configured
  bounds raise InvalidRequestError before the generation client is touched
  (or even built, when the pipeline holds a client factory).
- Client failures propagate as GenerationUnavailableError. There is no retry.
- Malformed questions and placeholder flash facts are dropped, never raised.
- When nothing at all survives (no question and no flash fact), the result is
  governed by `fail_on_empty_result`: True raises NoUsableContentError, False
  returns an empty quiz with `flash_facts=None`.
- Results are never cached; identical requests are expected to differ.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Union

from app.config import Settings
from app.schemas.quiz import FlashFactsResult, GeneratedQuizResult, RawGeneration, SourceDocument
from app.services import prompts
from app.services.ai_service import GenerationClient, build_generation_client
from app.services.errors import InvalidRequestError, NoUsableContentError
from app.services.quiz_validator import filter_flash_facts, filter_quiz_items, is_under_generated
from app.utils.logging_config import get_logger

logger = get_logger("pipeline")


@dataclass(frozen=True)
class CountBounds:
    """Inclusive bounds on the number of questions a caller may request."""

    minimum: int
    maximum: int

    def check(self, requested_count: Any) -> int:
        if isinstance(requested_count, bool) or not isinstance(requested_count, int):
            raise InvalidRequestError("Number of questions must be an integer.")
        if requested_count < self.minimum or requested_count > self.maximum:
            raise InvalidRequestError(
                f"Number of questions must be between {self.minimum} and {self.maximum}."
            )
        return requested_count


class QuizGenerationPipeline:
    """Turns documents or a topic into a validated quiz using an injected generation client."""

    def __init__(
        self,
        client: Optional[GenerationClient] = None,
        pdf_bounds: CountBounds = CountBounds(5, 1000),
        topic_bounds: CountBounds = CountBounds(5, 50),
        under_generation_ratio: float = 0.5,
        fail_on_empty_result: bool = True,
        client_factory: Optional[Callable[[], GenerationClient]] = None,
    ):
        if client is None and client_factory is None:
            raise ValueError("A generation client or a client factory is required.")
        self._client = client
        self._client_factory = client_factory
        self.pdf_bounds = pdf_bounds
        self.topic_bounds = topic_bounds
        self.under_generation_ratio = under_generation_ratio
        self.fail_on_empty_result = fail_on_empty_result

    @classmethod
    def from_settings(
        cls, settings: Settings, client: Optional[GenerationClient] = None
    ) -> "QuizGenerationPipeline":
        """Without an explicit client, one is built from settings on first generation call."""
        return cls(
            client,
            pdf_bounds=CountBounds(settings.pdf_quiz_min_questions, settings.pdf_quiz_max_questions),
            topic_bounds=CountBounds(settings.topic_quiz_min_questions, settings.topic_quiz_max_questions),
            under_generation_ratio=settings.under_generation_ratio,
            fail_on_empty_result=settings.fail_on_empty_result,
            client_factory=lambda: build_generation_client(settings),
        )

    @property
    def client(self) -> GenerationClient:
        # Only reached after a guard passed; a missing provider raises GenerationUnavailableError here
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    # ---------- Guards (no I/O) ----------

    def check_documents_request(self, documents: Optional[Sequence[SourceDocument]], requested_count: Any) -> int:
        if not documents:
            raise InvalidRequestError("No PDF documents provided.")
        if any(not doc.data for doc in documents):
            raise InvalidRequestError("One of the PDF documents is empty.")
        return self.pdf_bounds.check(requested_count)

    def check_topic_request(self, topic: Optional[str], requested_count: Any) -> int:
        if not (topic or "").strip():
            raise InvalidRequestError("A topic is required.")
        return self.topic_bounds.check(requested_count)

    # ---------- Generation ----------

    async def generate_quiz(
        self,
        documents_or_topic: Union[str, Sequence[SourceDocument], None],
        requested_count: Any,
    ) -> GeneratedQuizResult:
        """Generate from a topic string or from one or more documents."""
        if isinstance(documents_or_topic, str):
            return await self.generate_quiz_from_topic(documents_or_topic, requested_count)
        return await self.generate_quiz_from_documents(documents_or_topic, requested_count)

    async def generate_quiz_from_documents(
        self, documents: Optional[Sequence[SourceDocument]], requested_count: Any
    ) -> GeneratedQuizResult:
        count = self.check_documents_request(documents, requested_count)
        prompt = prompts.build_pdf_quiz_prompt(len(documents), count)
        logger.info("Generating quiz from documents", documents=len(documents), requested=count)
        raw = await self.client.generate(
            prompt, documents=list(documents), response_schema=prompts.QUIZ_OUTPUT_SCHEMA, label="quiz"
        )
        return self._assemble(raw, count, source=f"{len(documents)} document(s)")

    async def generate_quiz_from_topic(self, topic: Optional[str], requested_count: Any) -> GeneratedQuizResult:
        count = self.check_topic_request(topic, requested_count)
        topic = topic.strip()
        logger.info("Generating quiz from topic", topic=topic, requested=count)
        raw = await self.client.generate(
            prompts.build_topic_quiz_prompt(topic, count),
            response_schema=prompts.QUIZ_OUTPUT_SCHEMA,
            label="quiz",
        )
        return self._assemble(raw, count, source=topic)

    async def generate_flash_facts(self, topic: Optional[str]) -> FlashFactsResult:
        """Standalone flash facts. An empty outcome is not an error: `flash_facts` is None."""
        topic = (topic or "").strip()
        if not topic:
            raise InvalidRequestError("A topic is required.")
        raw = await self.client.generate(
            prompts.build_flash_facts_prompt(topic),
            response_schema=prompts.FLASH_FACTS_OUTPUT_SCHEMA,
            label="flash facts",
        )
        facts = filter_flash_facts(RawGeneration.model_validate(raw).flash_facts)
        if facts is None:
            logger.warning("No usable flash facts generated", topic=topic)
        return FlashFactsResult(topic=topic, flash_facts=facts)

    # ---------- Assembly ----------

    def _assemble(self, raw: Dict[str, Any], requested_count: int, source: str) -> GeneratedQuizResult:
        parsed = RawGeneration.model_validate(raw or {})
        outcome = filter_quiz_items(parsed.quiz)
        facts = filter_flash_facts(parsed.flash_facts)
        valid = len(outcome.questions)

        if valid and is_under_generated(valid, requested_count, self.under_generation_ratio):
            logger.warning(
                "Fewer quiz questions than requested",
                source=source,
                generated=valid,
                requested=requested_count,
                rejected=outcome.rejected,
            )
        if not valid and facts is None:
            logger.warning("Generation produced no usable content", source=source, rejected=outcome.rejected)
            if self.fail_on_empty_result:
                raise NoUsableContentError(
                    "The AI could not generate usable quiz questions from this source. "
                    "Try another document, another topic, or fewer questions."
                )
        elif not valid:
            logger.warning("Generation produced no valid quiz questions", source=source, rejected=outcome.rejected)

        return GeneratedQuizResult(quiz=outcome.questions, flash_facts=facts)
