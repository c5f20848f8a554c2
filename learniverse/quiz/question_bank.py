"""
Question Bank: chapter quiz loader.

Loads chapter question sets from a JSON file shaped like:

    {"<storyId>-<chapterNumber>": [ {question}, ... ], ...}

Features:
- Lookup by chapter key or by (story id, chapter number)
- Optional exclusion of question types on load
- Per-chapter breakdown by type, theme and difficulty
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from loguru import logger

from config import get_settings
from learniverse.quiz.models import Question
from learniverse.quiz.questions import get_handler


def chapter_key(story_id: int | str, chapter_number: int | str) -> str:
    """Composite key '<storyId>-<chapterNumber>'."""
    return f"{story_id}-{chapter_number}"


@dataclass
class ChapterBreakdown:
    """Question counts for one chapter."""

    chapter_key: str
    total_questions: int
    question_types: dict[str, int] = field(default_factory=dict)
    themes: list[str] = field(default_factory=list)
    difficulties: dict[str, int] = field(default_factory=dict)


class QuestionBank:
    """
    Read-only collection of chapter question sets.

    Usage:
        bank = QuestionBank.load(Path("chapter_questions.json"))
        questions = bank.load_questions(8001, 1)
    """

    def __init__(self, chapters: dict[str, list[Question]] | None = None):
        self._chapters: dict[str, tuple[Question, ...]] = {
            key: tuple(questions) for key, questions in (chapters or {}).items()
        }

    @classmethod
    def load(cls, path: Path, exclude_types: Iterable[str] = ()) -> QuestionBank:
        """
        Load a bank from a JSON file.

        Args:
            path: JSON file mapping chapter keys to question lists
            exclude_types: Question types to leave out

        Returns:
            QuestionBank instance (empty if the file does not exist)
        """
        path = Path(path)
        if not path.exists():
            logger.warning(f"Question bank not found: {path}")
            return cls()

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        bank = cls.from_dict(data, exclude_types=exclude_types)
        logger.info(f"Loaded {bank.question_count} questions in {len(bank)} chapters from {path.name}")
        return bank

    @classmethod
    def from_dict(cls, data: dict, exclude_types: Iterable[str] = ()) -> QuestionBank:
        """Build a bank from already-parsed JSON, skipping bad records."""
        excluded = {t.strip().lower() for t in exclude_types}
        chapters: dict[str, list[Question]] = {}

        for key, records in data.items():
            questions: list[Question] = []
            seen_ids: set[int] = set()
            for record in records or []:
                try:
                    question = Question.from_dict(record)
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(f"Skipping malformed question in {key}: {e}")
                    continue

                if question.type in excluded:
                    continue
                if question.id in seen_ids:
                    logger.warning(f"Skipping duplicate question id {question.id} in {key}")
                    continue

                handler = get_handler(question.type)
                if handler is None:
                    logger.warning(f"Question {question.id} in {key} has unsupported type '{question.type}'")
                elif not handler.validate(question):
                    logger.warning(f"Skipping invalid {question.type} question {question.id} in {key}")
                    continue

                seen_ids.add(question.id)
                questions.append(question)
            chapters[str(key)] = questions

        return cls(chapters)

    def __len__(self) -> int:
        return len(self._chapters)

    def __contains__(self, key: object) -> bool:
        return key in self._chapters

    @property
    def question_count(self) -> int:
        return sum(len(q) for q in self._chapters.values())

    def chapter_keys(self) -> list[str]:
        return list(self._chapters)

    def get(self, key: str) -> list[Question] | None:
        """Questions for a chapter key, or None if the chapter is unknown."""
        questions = self._chapters.get(key)
        return list(questions) if questions is not None else None

    def load_questions(self, story_id: int | str, chapter_number: int | str) -> list[Question]:
        """
        Questions for a story chapter.

        Returns an empty list when there is no quiz for the chapter; callers
        show a "no questions" screen rather than failing.
        """
        return self.get(chapter_key(story_id, chapter_number)) or []

    def describe(self, key: str) -> ChapterBreakdown | None:
        """Counts by type, theme and difficulty for one chapter."""
        questions = self._chapters.get(key)
        if questions is None:
            return None
        themes: list[str] = []
        for q in questions:
            if q.theme and q.theme not in themes:
                themes.append(q.theme)
        return ChapterBreakdown(
            chapter_key=key,
            total_questions=len(questions),
            question_types=dict(Counter(q.type for q in questions)),
            themes=themes,
            difficulties=dict(Counter(q.difficulty for q in questions if q.difficulty)),
        )


@lru_cache(maxsize=1)
def get_question_bank() -> QuestionBank:
    """Get the configured question bank (loaded once)."""
    settings = get_settings()
    return QuestionBank.load(settings.question_bank_path, settings.get_excluded_types())


def load_questions(key: str) -> list[Question]:
    """Questions for a chapter key from the configured bank; empty if absent."""
    return get_question_bank().get(key) or []
