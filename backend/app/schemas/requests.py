"""Request schemas for API validation."""

from typing import Dict, List

from pydantic import BaseModel, Field, field_validator

from app.schemas.quiz import QuizQuestion

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class GenerateQuizFromPdfRequest(BaseModel):
    """Request for quiz generation from a PDF library entry. Bounds are checked by the pipeline."""

    num_questions: int = Field(10, description="Desired number of questions")


class GenerateTopicQuizRequest(BaseModel):
    """Request for a general-knowledge quiz."""

    topic: str = Field(..., description="General-knowledge topic, in French")
    num_questions: int = Field(10, description="Desired number of questions")


class FlashFactsRequest(BaseModel):
    """Request for standalone flash facts."""

    topic: str = Field(..., description="General-knowledge topic, in French")


class FeedbackRequest(BaseModel):
    """Request for an explanation of one wrong answer."""

    question: str = Field(..., min_length=1)
    user_answer: str = Field(..., min_length=1)
    correct_answer: str = Field(..., min_length=1)
    context: str = ""


class SubmitAttemptRequest(BaseModel):
    """A finished quiz: the questions as served plus the user's answers keyed by question index."""

    email: str = Field(..., pattern=EMAIL_PATTERN)
    quiz_title: str = Field("Quiz", max_length=200)
    quiz: List[QuizQuestion] = Field(..., min_length=1)
    user_answers: Dict[int, str]
    include_feedback: bool = True

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()


class RegisterRequest(BaseModel):
    """Registration by name and email."""

    name: str = Field(..., min_length=2, max_length=100)
    email: str = Field(..., pattern=EMAIL_PATTERN)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()
