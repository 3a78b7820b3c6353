"""Response schemas for API responses."""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from app.schemas.quiz import FeedbackItem, QuizQuestion

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None


class PdfEntryResponse(BaseModel):
    """A PDF library entry, without document payloads."""

    id: str
    title: str
    file_sources: List[str]
    created_at: Optional[str] = None


class QuizResponse(BaseModel):
    """Response for quiz generation."""

    quiz: List[QuizQuestion]
    flash_facts: Optional[List[str]] = None
    requested_count: int
    count: int
    source_title: Optional[str] = None


class FlashFactsResponse(BaseModel):
    topic: str
    flash_facts: Optional[List[str]] = None


class FeedbackResponse(BaseModel):
    explanation: str
    study_suggestion: str


class AttemptResponse(BaseModel):
    """Graded attempt, with explanations for wrong answers when requested."""

    attempt_id: Optional[str] = None
    score: int
    total_questions: int
    feedback: List[FeedbackItem] = []


class AttemptSummary(BaseModel):
    id: str
    score: int
    total_questions: int
    attempted_at: Optional[str] = None
    quiz_title: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    name: str
    email: str
    attempts: List[AttemptSummary] = []
