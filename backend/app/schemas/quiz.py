"""Quiz domain models: strict contracts returned to callers and lenient parse targets for AI output."""

import base64
import binascii
import re
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w-]+=[^;,]*)*;base64,(?P<data>.*)$", re.S)


class SourceDocument(BaseModel):
    """Opaque document handed to the generation service as-is."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = "application/pdf"
    name: str = "document.pdf"

    @classmethod
    def from_data_uri(cls, uri: str, name: str = "document.pdf") -> "SourceDocument":
        """Decode a `data:<mime>;base64,<payload>` URI."""
        match = _DATA_URI_RE.match((uri or "").strip())
        if not match:
            raise ValueError("Document is not a base64 data URI")
        try:
            data = base64.b64decode(re.sub(r"\s+", "", match.group("data")), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Document payload is not valid base64: {e}") from e
        return cls(data=data, mime_type=match.group("mime") or "application/pdf", name=name)

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{base64.b64encode(self.data).decode('ascii')}"


class QuizQuestion(BaseModel):
    """A validated multiple-choice question. The answer is always one of the four options."""

    model_config = ConfigDict(frozen=True)

    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=4, max_length=4)
    answer: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _answer_is_an_option(self) -> "QuizQuestion":
        if self.answer not in self.options:
            raise ValueError("answer must be one of the options")
        return self


class GeneratedQuizResult(BaseModel):
    """Filtered quiz plus optional flash facts. `flash_facts` is None when no usable fact survived."""

    quiz: List[QuizQuestion] = Field(default_factory=list)
    flash_facts: Optional[List[str]] = None


class FlashFactsResult(BaseModel):
    """Standalone flash facts for a topic."""

    topic: str
    flash_facts: Optional[List[str]] = None


# ---------- Lenient parse targets ----------


def _list_or_none(value: Any) -> Optional[list]:
    return value if isinstance(value, list) else None


class RawQuizItem(BaseModel):
    """One quiz entry as the model produced it. Nothing is required or typed."""

    model_config = ConfigDict(extra="ignore")

    question: Any = None
    options: Any = None
    answer: Any = None


class RawGeneration(BaseModel):
    """Top-level AI output. Collections that are not lists are treated as absent."""

    model_config = ConfigDict(extra="ignore")

    quiz: Optional[List[Any]] = None
    flash_facts: Optional[List[Any]] = Field(
        default=None, validation_alias=AliasChoices("flashFacts", "flash_facts")
    )

    @field_validator("quiz", "flash_facts", mode="before")
    @classmethod
    def _only_lists(cls, value: Any) -> Optional[list]:
        return _list_or_none(value)


class RawFeedback(BaseModel):
    model_config = ConfigDict(extra="ignore")

    explanation: Any = None
    study_suggestion: Any = Field(
        default=None, validation_alias=AliasChoices("studySuggestion", "study_suggestion")
    )


# ---------- Attempts and feedback ----------


class EducationalFeedback(BaseModel):
    explanation: str
    study_suggestion: str


class FeedbackItem(BaseModel):
    """Explanation for one wrongly answered question."""

    question: str
    user_answer: str
    correct_answer: str
    explanation: str
    study_suggestion: Optional[str] = None


class IncorrectAnswer(BaseModel):
    index: int
    question: str
    user_answer: str
    correct_answer: str


class AttemptScore(BaseModel):
    """Outcome of grading a submitted quiz."""

    score: int
    total_questions: int
    incorrect: List[IncorrectAnswer] = Field(default_factory=list)
