"""
Fill-in-the-blank question handler.

The learner types the missing word. Matching ignores case and
surrounding whitespace.
"""

from typing import Any

from rich.console import Console
from rich.prompt import Prompt

from learniverse.delivery.visuals import get_prompt, question_panel
from learniverse.quiz.models import Question

from . import QuestionType, register
from .base import AnswerResult, describe_answer, matches_scalar


@register(QuestionType.FILL_BLANK)
class FillBlankHandler:
    """Handler for fill-in-the-blank questions."""

    def validate(self, question: Question) -> bool:
        return isinstance(question.answer, str) and bool(question.answer.strip())

    def present(self, question: Question, console: Console) -> None:
        console.print(question_panel(question.text, "FILL IN THE BLANK"))

    def get_input(self, question: Question, console: Console, workspace: Any = None) -> str:
        return Prompt.ask(get_prompt("fill_blank", "Your answer"), default="").strip()

    def check(self, question: Question, answer: Any) -> AnswerResult:
        is_correct = matches_scalar(answer, question.answer)
        return AnswerResult(
            correct=is_correct,
            feedback="Correct! Good job!" if is_correct else "Not quite.",
            user_answer=describe_answer(answer),
            correct_answer=describe_answer(question.answer),
            explanation=question.explanation,
        )

    def hint(self, question: Question, attempt: int) -> str | None:
        """Reveal the first letter, then the length."""
        if not isinstance(question.answer, str) or not question.answer:
            return None
        word = question.answer.strip()
        if attempt == 1:
            return f"It starts with '{word[0].upper()}'"
        if attempt == 2:
            return f"It has {len(word)} letters"
        return None
