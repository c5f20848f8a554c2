"""
True/False question handler.

Binary choice questions. The learner responds T/F to a statement.
"""

from typing import Any

from rich.console import Console
from rich.prompt import Prompt

from learniverse.delivery.visuals import get_prompt, question_panel
from learniverse.quiz.models import Question

from . import QuestionType, register
from .base import AnswerResult, describe_answer, matches_scalar, normalize


@register(QuestionType.TRUE_FALSE)
class TrueFalseHandler:
    """Handler for true/false questions."""

    def validate(self, question: Question) -> bool:
        """Check the canonical answer is 'true' or 'false'."""
        return normalize(question.answer) in ("true", "false")

    def present(self, question: Question, console: Console) -> None:
        """Display the statement to evaluate."""
        console.print(question_panel(question.text, "TRUE OR FALSE"))

    def get_input(self, question: Question, console: Console, workspace: Any = None) -> str:
        """Get T/F response from the learner."""
        while True:
            response = Prompt.ask(get_prompt("true_false", "[T/F]"), default="").strip().lower()
            if response in ("t", "true"):
                return "true"
            if response in ("f", "false"):
                return "false"
            console.print("[yellow]Please enter T or F[/yellow]")

    def check(self, question: Question, answer: Any) -> AnswerResult:
        """Check if the learner's answer matches the canonical one."""
        is_correct = matches_scalar(answer, question.answer)
        return AnswerResult(
            correct=is_correct,
            feedback="Correct! Good job!" if is_correct else "Not quite.",
            user_answer=describe_answer(answer),
            correct_answer=normalize(question.answer).capitalize(),
            explanation=question.explanation,
        )

    def hint(self, question: Question, attempt: int) -> str | None:
        """Hints for true/false - usually the start of the explanation."""
        if attempt == 1 and question.explanation:
            words = question.explanation.split()
            if len(words) > 5:
                return f"Think about: {' '.join(words[:5])}..."
        return None
