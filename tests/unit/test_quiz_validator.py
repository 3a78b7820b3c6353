"""
Unit tests for backend/app/services/quiz_validator.py
Tests: quiz item filtering (shape, answer membership, order, no mutation),
flash fact deny-list, absent-vs-empty facts, under-generation threshold.
"""

import copy

import pytest

from app.schemas.quiz import QuizQuestion
from app.services.quiz_validator import (
    filter_flash_facts,
    filter_quiz_items,
    is_boilerplate,
    is_under_generated,
)
from fakes import quiz_item


# ── Concrete scenarios ───────────────────────────────────────────────────────

class TestScenarios:

    def test_empty_question_is_dropped(self):
        raw = [
            {"question": "Q1", "options": ["A", "B", "C", "D"], "answer": "B"},
            {"question": "", "options": ["A", "B", "C", "D"], "answer": "A"},
        ]
        outcome = filter_quiz_items(raw)
        assert outcome.questions == [QuizQuestion(question="Q1", options=["A", "B", "C", "D"], answer="B")]
        assert outcome.rejected == 1

    def test_french_placeholder_and_blank_facts_are_dropped(self):
        raw = ["", "Le Maroc a exporté 2M tonnes.", "Aucune information flash spécifique."]
        assert filter_flash_facts(raw) == ["Le Maroc a exporté 2M tonnes."]

    def test_three_options_leaves_empty_quiz(self):
        outcome = filter_quiz_items([{"question": "Q", "options": ["A", "B", "C"], "answer": "A"}])
        assert outcome.questions == []
        assert outcome.rejected == 1


# ── Quiz item rules ──────────────────────────────────────────────────────────

MALFORMED_ITEMS = [
    pytest.param({"options": ["A", "B", "C", "D"], "answer": "A"}, id="missing-question"),
    pytest.param({"question": "   ", "options": ["A", "B", "C", "D"], "answer": "A"}, id="blank-question"),
    pytest.param({"question": "Q", "answer": "A"}, id="missing-options"),
    pytest.param({"question": "Q", "options": "A,B,C,D", "answer": "A"}, id="options-not-a-list"),
    pytest.param({"question": "Q", "options": ["A", "B", "C", "D", "E"], "answer": "A"}, id="five-options"),
    pytest.param({"question": "Q", "options": ["A", "", "C", "D"], "answer": "A"}, id="empty-option"),
    pytest.param({"question": "Q", "options": ["A", 2, "C", "D"], "answer": "A"}, id="non-string-option"),
    pytest.param({"question": "Q", "options": ["A", "a ", "C", "D"], "answer": "A"}, id="duplicate-options"),
    pytest.param({"question": "Q", "options": ["A", "B", "C", "D"]}, id="missing-answer"),
    pytest.param({"question": "Q", "options": ["A", "B", "C", "D"], "answer": ""}, id="empty-answer"),
    pytest.param({"question": "Q", "options": ["A", "B", "C", "D"], "answer": "E"}, id="answer-not-an-option"),
    pytest.param({"question": 42, "options": ["A", "B", "C", "D"], "answer": "A"}, id="non-string-question"),
    pytest.param("just a string", id="not-an-object"),
    pytest.param(None, id="null-entry"),
]


class TestQuizItems:

    @pytest.mark.parametrize("item", MALFORMED_ITEMS)
    def test_malformed_item_is_rejected(self, item):
        outcome = filter_quiz_items([item])
        assert outcome.questions == []
        assert outcome.rejected == 1

    def test_keeps_well_formed_items_in_original_order(self):
        good = [quiz_item(f"Q{i}", answer="C") for i in range(5)]
        bad = [quiz_item("", answer="C"), quiz_item("Bad", options=["A", "B"], answer="A")]
        raw = [bad[0], good[0], good[1], bad[1], good[2], good[3], good[4]]
        outcome = filter_quiz_items(raw)
        assert [q.question for q in outcome.questions] == ["Q0", "Q1", "Q2", "Q3", "Q4"]
        assert outcome.rejected == 2

    def test_does_not_mutate_or_repair_values(self):
        item = {"question": "  Quelle est la capitale ?  ", "options": ["Rabat ", "Fès", "Tanger", "Oujda"], "answer": "Rabat "}
        raw = [copy.deepcopy(item)]
        outcome = filter_quiz_items(raw)
        assert raw == [item]
        kept = outcome.questions[0]
        assert kept.question == item["question"]
        assert kept.options == item["options"]
        assert kept.answer == "Rabat "

    def test_answer_must_match_option_exactly(self):
        outcome = filter_quiz_items([quiz_item(options=["Rabat", "Fès", "Tanger", "Oujda"], answer="rabat")])
        assert outcome.questions == []

    def test_unknown_fields_are_ignored(self):
        item = dict(quiz_item(), explanation="because", difficulty="easy")
        outcome = filter_quiz_items([item])
        assert len(outcome.questions) == 1

    def test_none_input_yields_empty_outcome(self):
        outcome = filter_quiz_items(None)
        assert outcome.questions == []
        assert outcome.rejected == 0

    def test_every_kept_question_satisfies_shape_invariant(self):
        raw = [quiz_item(f"Q{i}", answer=letter) for i, letter in enumerate("ABCD")] + MALFORMED_ITEMS_RAW
        for question in filter_quiz_items(raw).questions:
            assert len(question.options) == 4
            assert all(o.strip() for o in question.options)
            assert len({o.strip().casefold() for o in question.options}) == 4
            assert question.answer in question.options


MALFORMED_ITEMS_RAW = [p.values[0] for p in MALFORMED_ITEMS]


# ── Flash facts ──────────────────────────────────────────────────────────────

class TestFlashFacts:

    @pytest.mark.parametrize(
        "phrase",
        [
            "No specific flash information could be extracted from the provided document(s).",
            "NO INFORMATION AVAILABLE",
            "Désolé, aucune information disponible sur ce sujet.",
            "Aucune Information Spécifique n'a pu être trouvée.",
        ],
    )
    def test_placeholder_is_never_returned(self, phrase):
        assert is_boilerplate(phrase)
        assert filter_flash_facts([phrase, "Casablanca est la plus grande ville du Maroc."]) == [
            "Casablanca est la plus grande ville du Maroc."
        ]

    def test_all_placeholders_yield_absent(self):
        assert filter_flash_facts(["Aucune information flash spécifique.", "   ", ""]) is None

    def test_empty_or_missing_input_yields_absent(self):
        assert filter_flash_facts([]) is None
        assert filter_flash_facts(None) is None

    def test_non_strings_are_dropped_and_strings_trimmed(self):
        assert filter_flash_facts([None, 12, {"fact": "x"}, "  Un fait.  "]) == ["Un fait."]

    def test_real_facts_are_kept_in_order(self):
        facts = ["Premier fait.", "Deuxième fait.", "Troisième fait."]
        assert filter_flash_facts(facts) == facts


# ── Under-generation ─────────────────────────────────────────────────────────

class TestUnderGeneration:

    @pytest.mark.parametrize(
        "valid, requested, ratio, expected",
        [
            (4, 10, 0.5, True),
            (5, 10, 0.5, False),
            (7, 10, 0.8, True),
            (8, 10, 0.8, False),
            (0, 1, 0.5, True),
            (1, 1, 0.5, False),
        ],
    )
    def test_threshold(self, valid, requested, ratio, expected):
        assert is_under_generated(valid, requested, ratio) is expected
