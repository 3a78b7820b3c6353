"""Grading of quiz attempts and AI explanations for wrong answers."""

from typing import Dict, List, Mapping, Optional, Sequence

from app.schemas.quiz import (
    AttemptScore,
    EducationalFeedback,
    FeedbackItem,
    IncorrectAnswer,
    QuizQuestion,
    RawFeedback,
)
from app.services import prompts
from app.services.ai_service import GenerationClient
from app.services.errors import GenerationUnavailableError, InvalidRequestError
from app.utils.logging_config import get_logger

logger = get_logger("feedback")

EXPLANATION_UNAVAILABLE = "Explication non disponible."
SUGGESTION_UNAVAILABLE = "Suggestion d'étude non disponible."
EXPLANATION_FETCH_FAILED = "Impossible de récupérer l'explication pour le moment."


def score_attempt(quiz: Sequence[QuizQuestion], user_answers: Mapping[int, str]) -> AttemptScore:
    """Count exact matches. Every question must have an answer."""
    if not quiz:
        raise InvalidRequestError("The quiz has no questions.")
    unknown = sorted(i for i in user_answers if not 0 <= i < len(quiz))
    if unknown:
        raise InvalidRequestError(
            f"Answers were given for questions that do not exist: {', '.join(str(i) for i in unknown)}."
        )
    missing = [i for i in range(len(quiz)) if i not in user_answers]
    if missing:
        raise InvalidRequestError(
            f"Please answer all {len(quiz)} questions before submitting. "
            f"You answered {len(quiz) - len(missing)}."
        )
    score = 0
    incorrect: List[IncorrectAnswer] = []
    for index, question in enumerate(quiz):
        answer = user_answers[index]
        if answer == question.answer:
            score += 1
        else:
            incorrect.append(
                IncorrectAnswer(
                    index=index,
                    question=question.question,
                    user_answer=answer,
                    correct_answer=question.answer,
                )
            )
    return AttemptScore(score=score, total_questions=len(quiz), incorrect=incorrect)


def _text_or(value, default: str) -> str:
    return value.strip() if isinstance(value, str) and value.strip() else default


async def provide_educational_feedback(
    client: GenerationClient,
    question: str,
    user_answer: str,
    correct_answer: str,
    context: str,
) -> EducationalFeedback:
    """Explanation and study suggestion in French for one wrong answer."""
    raw = await client.generate(
        prompts.build_feedback_prompt(question, user_answer, correct_answer, context),
        response_schema=prompts.FEEDBACK_OUTPUT_SCHEMA,
        label="feedback",
    )
    if not raw:
        raise GenerationUnavailableError("The AI could not generate feedback.")
    parsed = RawFeedback.model_validate(raw)
    return EducationalFeedback(
        explanation=_text_or(parsed.explanation, EXPLANATION_UNAVAILABLE),
        study_suggestion=_text_or(parsed.study_suggestion, SUGGESTION_UNAVAILABLE),
    )


def default_context(item: IncorrectAnswer, source_title: Optional[str] = None) -> str:
    source = f'the document set "{source_title}"' if source_title else "an uploaded document or a general-knowledge topic"
    return (
        f'The user was asked: "{item.question}". They answered "{item.user_answer}", '
        f'but the correct answer was "{item.correct_answer}". '
        f"This question was generated in French from {source}. Please provide an explanation in French."
    )


async def explain_incorrect_answers(
    client: GenerationClient,
    incorrect: Sequence[IncorrectAnswer],
    source_title: Optional[str] = None,
) -> List[FeedbackItem]:
    """Feedback for each wrong answer, one request at a time.

    A failed request yields the fallback explanation for that item only.
    """
    items: List[FeedbackItem] = []
    failures: Dict[int, str] = {}
    for item in incorrect:
        try:
            feedback = await provide_educational_feedback(
                client,
                item.question,
                item.user_answer,
                item.correct_answer,
                default_context(item, source_title),
            )
            explanation, suggestion = feedback.explanation, feedback.study_suggestion
        except GenerationUnavailableError as e:
            failures[item.index] = str(e)
            explanation, suggestion = EXPLANATION_FETCH_FAILED, None
        items.append(
            FeedbackItem(
                question=item.question,
                user_answer=item.user_answer,
                correct_answer=item.correct_answer,
                explanation=explanation,
                study_suggestion=suggestion,
            )
        )
    if failures:
        logger.warning("Feedback unavailable for some questions", failed=len(failures), errors=failures)
    return items
