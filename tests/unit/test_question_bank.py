"""
Unit tests for the chapter question bank.
"""

import json

import pytest

from config import get_settings
from learniverse.quiz import question_bank
from learniverse.quiz.question_bank import QuestionBank, chapter_key


@pytest.fixture(scope="module")
def bank(bank_path):
    return QuestionBank.load(bank_path)


class TestChapterKey:
    def test_composite_key(self):
        assert chapter_key(8001, 1) == "8001-1"
        assert chapter_key("8001", "3") == "8001-3"


class TestShippedBank:
    def test_chapters(self, bank):
        assert bank.chapter_keys() == ["8001-1", "8001-2", "8001-3"]
        assert "8001-2" in bank

    def test_first_chapter_covers_every_type(self, bank):
        questions = bank.load_questions(8001, 1)
        assert len(questions) == 14
        assert {q.type for q in questions} == {
            "multiple-choice",
            "fill-blank",
            "matching",
            "unscramble",
            "hidden-word",
            "true-false",
            "word-sequence",
        }

    def test_bank_order_preserved(self, bank):
        ids = [q.id for q in bank.load_questions(8001, 1)]
        assert ids[:4] == [1, 2, 3, 4]
        assert ids[-1] == 43

    def test_invalid_question_dropped(self, bank):
        """The packed unscramble in chapter 3 has no per-word letter groups."""
        ids = [q.id for q in bank.load_questions(8001, 3)]
        assert ids == [1, 4, 6, 9]

    def test_unknown_chapter_is_empty(self, bank):
        assert bank.load_questions(9999, 1) == []
        assert bank.get("9999-1") is None
        assert bank.describe("9999-1") is None

    def test_load_questions_returns_copy(self, bank):
        questions = bank.load_questions(8001, 2)
        questions.clear()
        assert len(bank.load_questions(8001, 2)) == 5

    def test_describe(self, bank):
        breakdown = bank.describe("8001-1")
        assert breakdown.total_questions == 14
        assert breakdown.question_types["multiple-choice"] == 3
        assert breakdown.question_types["matching"] == 2
        assert "math" in breakdown.themes
        assert breakdown.difficulties["hard"] == 1


class TestLoading:
    def test_exclude_types(self, bank_path):
        bank = QuestionBank.load(bank_path, exclude_types=["hidden-word"])
        questions = bank.load_questions(8001, 1)
        assert len(questions) == 13
        assert all(q.type != "hidden-word" for q in questions)

    def test_missing_file_gives_empty_bank(self, tmp_path):
        bank = QuestionBank.load(tmp_path / "nope.json")
        assert len(bank) == 0
        assert bank.load_questions(8001, 1) == []

    def test_unknown_type_is_kept(self):
        bank = QuestionBank.from_dict(
            {"1-1": [{"id": 1, "type": "drawing", "text": "Draw a roof"}]}
        )
        questions = bank.load_questions(1, 1)
        assert [q.type for q in questions] == ["drawing"]

    def test_malformed_and_duplicate_records_skipped(self):
        bank = QuestionBank.from_dict(
            {
                "1-1": [
                    {"type": "fill-blank", "text": "No id"},
                    {"id": "x", "type": "fill-blank", "text": "Bad id", "answer": "y"},
                    {"id": 1, "type": "fill-blank", "text": "First", "answer": "cat"},
                    {"id": 1, "type": "fill-blank", "text": "Again", "answer": "dog"},
                ]
            }
        )
        questions = bank.load_questions(1, 1)
        assert [q.text for q in questions] == ["First"]

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(
            json.dumps({"5-2": [{"id": 7, "type": "TRUE-FALSE", "text": "Sky is blue", "answer": "true"}]}),
            encoding="utf-8",
        )
        bank = QuestionBank.load(path)
        assert bank.question_count == 1
        assert bank.load_questions(5, 2)[0].type == "true-false"


class TestConfiguredBank:
    @pytest.fixture(autouse=True)
    def fresh_caches(self):
        get_settings.cache_clear()
        question_bank.get_question_bank.cache_clear()
        yield
        get_settings.cache_clear()
        question_bank.get_question_bank.cache_clear()

    def test_load_questions_by_key(self):
        questions = question_bank.load_questions("8001-2")
        assert len(questions) == 5
        assert question_bank.load_questions("9999-1") == []

    def test_bank_loaded_once(self):
        assert question_bank.get_question_bank() is question_bank.get_question_bank()

    def test_excluded_types_setting(self, monkeypatch):
        monkeypatch.setenv("LEARNIVERSE_EXCLUDED_QUESTION_TYPES", "hidden-word")
        questions = question_bank.load_questions("8001-1")
        assert questions
        assert "hidden-word" not in {q.type for q in questions}
