"""
Base protocol and types for question handlers.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from rich.console import Console

from learniverse.quiz.models import Question


@dataclass
class AnswerResult:
    """Result of checking an answer."""
    correct: bool
    feedback: str
    user_answer: str
    correct_answer: str
    explanation: str | None = None


def normalize(value: Any) -> str:
    """Trim and case-fold a scalar answer for comparison."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return " ".join(str(value).split()).casefold()


def matches_scalar(answer: Any, expected: Any) -> bool:
    """Scalar predicate: non-empty and equal after trimming and case-folding."""
    given = normalize(answer)
    return bool(given) and given == normalize(expected)


def normalize_list(value: Any) -> list[str] | None:
    """Normalize an ordered answer. Returns None when it is not a list."""
    if isinstance(value, str):
        value = value.split()
    if not isinstance(value, (list, tuple)):
        return None
    return [normalize(v) for v in value]


def describe_answer(value: Any) -> str:
    """Human readable rendering of any answer shape."""
    if value is None:
        return "(no answer)"
    if isinstance(value, dict):
        return ", ".join(f"{k} -> {v}" for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)


class QuestionHandler(Protocol):
    """Protocol for question type handlers."""

    def validate(self, question: Question) -> bool:
        """Check if the question has the fields for this type. Returns True if valid."""
        ...

    def present(self, question: Question, console: Console) -> None:
        """Display the question to the learner."""
        ...

    def get_input(self, question: Question, console: Console, workspace: Any = None) -> Any:
        """Get the learner's answer. Returns the raw answer value."""
        ...

    def check(self, question: Question, answer: Any) -> AnswerResult:
        """Validate the answer and return result. Never raises on bad input."""
        ...

    def hint(self, question: Question, attempt: int) -> str | None:
        """Get progressive hint for attempt N. Returns None if no hint available."""
        ...
