"""
Domain models for chapter quizzes.

Questions are read-only reference data loaded from the question bank.
Analytics records and summaries are produced by a QuizSession.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class MatchingItem:
    """One term/definition pair of a matching question."""

    term: str
    definition: str

    @classmethod
    def from_dict(cls, data: dict) -> MatchingItem:
        """Accept both the bank's item/match keys and term/definition."""
        return cls(
            term=str(data.get("term", data.get("item", ""))),
            definition=str(data.get("definition", data.get("match", ""))),
        )


@dataclass(frozen=True)
class Question:
    """
    A single quiz question.

    The `type` discriminant selects the handler that presents and checks it.
    Type-specific fields are empty when they do not apply.
    """

    id: int
    type: str
    text: str
    answer: str | tuple[str, ...] | None = None

    # Type-specific content
    options: tuple[str, ...] = ()
    items: tuple[MatchingItem, ...] = ()
    letters: str = ""
    grid: tuple[str, ...] = ()
    words: tuple[str, ...] = ()
    word_sequence: tuple[str, ...] = ()

    # Metadata
    theme: str | None = None
    difficulty: str | None = None
    tags: tuple[str, ...] = ()
    explanation: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        """
        Create a Question from a question bank record.

        Args:
            data: Dictionary from the JSON bank

        Returns:
            Question instance

        Raises:
            KeyError: if id, type or text is missing
            ValueError: if id is not an integer
        """
        answer = data.get("answer")
        if isinstance(answer, list):
            answer = tuple(str(a) for a in answer)
        elif answer is not None:
            answer = str(answer)

        return cls(
            id=int(data["id"]),
            type=str(data["type"]).strip().lower(),
            text=data["text"],
            answer=answer,
            options=tuple(str(o) for o in data.get("options") or []),
            items=tuple(MatchingItem.from_dict(i) for i in data.get("items") or []),
            letters=data.get("letters") or "",
            grid=tuple(data.get("grid") or []),
            words=tuple(str(w) for w in data.get("words") or []),
            word_sequence=tuple(str(w) for w in data.get("wordSequence") or data.get("word_sequence") or []),
            theme=data.get("theme"),
            difficulty=data.get("difficulty"),
            tags=tuple(data.get("tags") or []),
            explanation=data.get("explanation"),
        )

    @property
    def sequence_tokens(self) -> tuple[str, ...]:
        """Tokens to reorder for word-sequence questions."""
        return self.word_sequence or self.options

    @property
    def answer_list(self) -> list[str]:
        """Canonical answer as a list, whatever shape it was stored in."""
        if self.answer is None:
            return []
        if isinstance(self.answer, tuple):
            return list(self.answer)
        return [self.answer]


@dataclass
class AnalyticsRecord:
    """Timed outcome of one scored (non-skipped) question."""

    question_id: int
    time_spent_seconds: int
    correct: bool
    answer: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the keys the reading app reports upstream."""
        return {
            "questionId": self.question_id,
            "timeSpent": self.time_spent_seconds,
            "correct": self.correct,
            "answer": self.answer,
        }

    @classmethod
    def from_dict(cls, data: dict) -> AnalyticsRecord:
        return cls(
            question_id=int(data.get("questionId", data.get("question_id"))),
            time_spent_seconds=int(data.get("timeSpent", data.get("time_spent_seconds", 0))),
            correct=bool(data.get("correct", False)),
            answer=data.get("answer"),
        )


@dataclass
class AnalyticsSummary:
    """Results of a finished quiz."""

    score: int
    total: int
    average_time_seconds: int
    flagged_count: int
    skipped_count: int
    records: list[AnalyticsRecord] = field(default_factory=list)

    @property
    def accuracy_percent(self) -> int:
        if not self.total:
            return 0
        return round(self.score / self.total * 100)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["records"] = [r.to_dict() for r in self.records]
        return data
