"""Validation and filtering of raw AI output into the strict quiz contract.

Nothing here repairs an entry: a question is either kept verbatim or dropped.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from app.schemas.quiz import QuizQuestion, RawQuizItem
from app.utils.logging_config import get_logger

logger = get_logger("validator")

OPTIONS_PER_QUESTION = 4

# Placeholder sentences models emit instead of an empty list. Matched as case-insensitive substrings.
FLASH_FACT_DENY_LIST = (
    "no specific flash information could be extracted",
    "no specific information could be extracted",
    "no information available",
    "no relevant information",
    "aucune information flash spécifique",
    "aucune information spécifique",
    "aucune information disponible",
    "aucune information pertinente",
    "information non disponible",
)


@dataclass
class QuizFilterOutcome:
    """Questions that passed validation plus how many were dropped."""

    questions: List[QuizQuestion] = field(default_factory=list)
    rejected: int = 0


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_valid_quiz_item(item: RawQuizItem) -> bool:
    """True when the item already satisfies every QuizQuestion invariant."""
    if not _is_filled(item.question) or not _is_filled(item.answer):
        return False
    options = item.options
    if not isinstance(options, list) or len(options) != OPTIONS_PER_QUESTION:
        return False
    if not all(_is_filled(o) for o in options):
        return False
    if len({o.strip().casefold() for o in options}) != OPTIONS_PER_QUESTION:
        return False
    return item.answer in options


def filter_quiz_items(raw_items: Optional[Sequence[Any]]) -> QuizFilterOutcome:
    """Keep well-formed questions in their original order; count the rest."""
    outcome = QuizFilterOutcome()
    for raw in raw_items or []:
        if not isinstance(raw, dict):
            outcome.rejected += 1
            continue
        item = RawQuizItem.model_validate(raw)
        if not is_valid_quiz_item(item):
            outcome.rejected += 1
            continue
        try:
            outcome.questions.append(
                QuizQuestion(question=item.question, options=list(item.options), answer=item.answer)
            )
        except ValidationError:
            outcome.rejected += 1
    if outcome.rejected:
        logger.info("Dropped malformed quiz items", rejected=outcome.rejected, kept=len(outcome.questions))
    return outcome


def is_boilerplate(fact: str) -> bool:
    lowered = fact.casefold()
    return any(phrase in lowered for phrase in FLASH_FACT_DENY_LIST)


def filter_flash_facts(raw_facts: Optional[Sequence[Any]]) -> Optional[List[str]]:
    """Trimmed, non-placeholder facts, or None when nothing usable is left."""
    kept: List[str] = []
    for raw in raw_facts or []:
        if not _is_filled(raw):
            continue
        fact = raw.strip()
        if is_boilerplate(fact):
            continue
        kept.append(fact)
    if raw_facts and len(kept) < len(raw_facts):
        logger.info("Dropped unusable flash facts", rejected=len(raw_facts) - len(kept), kept=len(kept))
    return kept or None


def is_under_generated(valid_count: int, requested_count: int, ratio: float) -> bool:
    """True when fewer than `ratio` of the requested questions survived."""
    return valid_count < max(1, requested_count * ratio)
