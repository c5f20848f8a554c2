"""
Multiple choice question handler.

Options are labelled a, b, c, ... and the canonical answer is the label
of the correct option.
"""

import random
from typing import Any

from rich.console import Console
from rich.prompt import Prompt

from learniverse.delivery.visuals import get_prompt, question_panel
from learniverse.quiz.models import Question

from . import QuestionType, register
from .base import AnswerResult, describe_answer, matches_scalar, normalize


def option_label(index: int) -> str:
    """0 -> 'a', 1 -> 'b', ..."""
    return chr(97 + index)


@register(QuestionType.MULTIPLE_CHOICE)
class MultipleChoiceHandler:
    """Handler for multiple choice questions."""

    def validate(self, question: Question) -> bool:
        """Need at least two options and an answer label among them."""
        if len(question.options) < 2 or not isinstance(question.answer, str):
            return False
        labels = {option_label(i) for i in range(len(question.options))}
        return normalize(question.answer) in labels

    def present(self, question: Question, console: Console) -> None:
        """Display the question with its lettered options."""
        body = question.text + "\n"
        for i, option in enumerate(question.options):
            body += f"\n  [bold]{option_label(i)})[/bold] {option}"
        console.print(question_panel(body, "CHOOSE ONE"))

    def get_input(self, question: Question, console: Console, workspace: Any = None) -> str:
        """Accept a letter (a-d) or an option number (1-4)."""
        labels = [option_label(i) for i in range(len(question.options))]
        while True:
            response = Prompt.ask(get_prompt("choice", f"[{labels[0]}-{labels[-1]}]")).strip().lower()
            if response in labels:
                return response
            if response.isdigit() and 1 <= int(response) <= len(labels):
                return labels[int(response) - 1]
            console.print(f"[yellow]Please enter a letter from {labels[0]} to {labels[-1]}[/yellow]")

    def check(self, question: Question, answer: Any) -> AnswerResult:
        """Correct when the chosen label equals the canonical label."""
        is_correct = matches_scalar(answer, question.answer)
        return AnswerResult(
            correct=is_correct,
            feedback="Correct! Good job!" if is_correct else "Not quite.",
            user_answer=describe_answer(answer),
            correct_answer=self._correct_text(question),
            explanation=question.explanation,
        )

    def hint(self, question: Question, attempt: int) -> str | None:
        """First hint eliminates one wrong option."""
        if attempt != 1 or len(question.options) < 3:
            return None
        correct = normalize(question.answer)
        wrong = [i for i in range(len(question.options)) if option_label(i) != correct]
        if not wrong:
            return None
        eliminated = random.Random(question.id).choice(wrong)
        return f"It is NOT {option_label(eliminated)}) {question.options[eliminated]}"

    def _correct_text(self, question: Question) -> str:
        label = normalize(question.answer)
        for i, option in enumerate(question.options):
            if option_label(i) == label:
                return f"{label}) {option}"
        return describe_answer(question.answer)
