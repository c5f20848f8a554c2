"""
Question type handlers for chapter quizzes.

Each question type has its own module with:
- validate(): Check the question carries the fields its type needs
- present(): Display the question to the learner
- get_input(): Capture the learner's answer
- check(): Decide correctness (pure predicate)
- hint(): Provide progressive hints
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import QuestionHandler


class QuestionType(str, Enum):
    """Supported question types."""
    MULTIPLE_CHOICE = "multiple-choice"
    FILL_BLANK = "fill-blank"
    MATCHING = "matching"
    UNSCRAMBLE = "unscramble"
    HIDDEN_WORD = "hidden-word"
    TRUE_FALSE = "true-false"
    WORD_SEQUENCE = "word-sequence"


# Handler registry - populated by @register decorator
HANDLERS: dict[QuestionType, "QuestionHandler"] = {}


def register(question_type: QuestionType):
    """Decorator to register a question handler."""
    def decorator(cls):
        HANDLERS[question_type] = cls()
        return cls
    return decorator


def get_handler(question_type: str | QuestionType) -> "QuestionHandler | None":
    """Get the handler for a question type, or None if unsupported."""
    if isinstance(question_type, str) and not isinstance(question_type, QuestionType):
        try:
            question_type = QuestionType(question_type.strip().lower())
        except ValueError:
            return None
    return HANDLERS.get(question_type)


# Import handlers to trigger registration
from . import multiple_choice
from . import true_false
from . import fill_blank
from . import matching
from . import unscramble
from . import word_sequence
from . import hidden_word

__all__ = [
    "QuestionType",
    "HANDLERS",
    "get_handler",
    "register",
]
