"""
Word sequence question handler.

Shuffled words or events are put back in order. The learner enters the
new order as positions, e.g. "3 1 2 4".
"""

from typing import Any

from rich.console import Console
from rich.prompt import Prompt

from learniverse.delivery.visuals import get_prompt, question_panel
from learniverse.quiz.editors import WordSequenceEditor
from learniverse.quiz.models import Question

from . import QuestionType, register
from .base import AnswerResult, describe_answer
from .unscramble import sequences_match


@register(QuestionType.WORD_SEQUENCE)
class WordSequenceHandler:
    """Handler for word sequence questions."""

    def validate(self, question: Question) -> bool:
        tokens = question.sequence_tokens
        return len(tokens) >= 2 and sorted(tokens) == sorted(question.answer_list)

    def present(self, question: Question, console: Console) -> None:
        console.print(question_panel(question.text, "PUT IN ORDER"))

    def get_input(self, question: Question, console: Console, workspace: Any = None) -> list[str]:
        """Show the shuffled tokens and read a permutation."""
        editor = workspace if isinstance(workspace, WordSequenceEditor) else WordSequenceEditor(question)
        while True:
            for i, token in enumerate(editor.order, 1):
                console.print(f"  [{i}] {token}")
            response = Prompt.ask(get_prompt("sequence", "order e.g. 2 1 3"), default="").strip()
            parts = response.replace(",", " ").split()
            if parts and all(p.isdigit() for p in parts):
                if editor.arrange([int(p) - 1 for p in parts]):
                    return editor.order
            console.print(f"[yellow]Enter each number from 1 to {len(editor.order)} once[/yellow]")

    def check(self, question: Question, answer: Any) -> AnswerResult:
        expected = question.answer_list
        is_correct = sequences_match(answer, expected)
        return AnswerResult(
            correct=is_correct,
            feedback="Correct! Perfect sequence." if is_correct else "Not quite.",
            user_answer=describe_answer(answer),
            correct_answer=" → ".join(expected),
            explanation=question.explanation,
        )

    def hint(self, question: Question, attempt: int) -> str | None:
        expected = question.answer_list
        if not expected:
            return None
        if attempt == 1:
            return f"First: {expected[0]}"
        if attempt == 2:
            return f"Last: {expected[-1]}"
        return None
