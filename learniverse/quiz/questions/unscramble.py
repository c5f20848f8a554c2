"""
Unscramble question handler.

Scrambled words are shown as letter tiles; the learner types each word
in its slot. Order matters: slot i is compared with answer i.
"""

from typing import Any

from rich.console import Console
from rich.prompt import Prompt

from learniverse.delivery.visuals import get_prompt, question_panel
from learniverse.quiz.editors import UnscrambleEditor
from learniverse.quiz.models import Question

from . import QuestionType, register
from .base import AnswerResult, describe_answer, normalize_list


def sequences_match(answer: Any, expected: list[str]) -> bool:
    """Element-wise equality; a length mismatch is never correct."""
    given = normalize_list(answer)
    if given is None or not expected or len(given) != len(expected):
        return False
    return given == normalize_list(expected)


@register(QuestionType.UNSCRAMBLE)
class UnscrambleHandler:
    """Handler for unscramble questions."""

    def validate(self, question: Question) -> bool:
        """One scrambled group per expected word."""
        tiles = question.letters.split()
        return bool(tiles) and len(tiles) == len(question.answer_list)

    def present(self, question: Question, console: Console) -> None:
        console.print(question_panel(question.text, "UNSCRAMBLE"))

    def get_input(self, question: Question, console: Console, workspace: Any = None) -> list[str]:
        """Ask for each unscrambled word in turn."""
        editor = workspace if isinstance(workspace, UnscrambleEditor) else UnscrambleEditor(question)
        for slot, tile in enumerate(editor.tiles):
            letters = " ".join(tile.upper())
            console.print(f"  [bold cyan]{slot + 1}.[/bold cyan] {letters}")
            word = Prompt.ask(get_prompt("unscramble", f"[{slot + 1}/{len(editor.tiles)}]"), default=editor.entries[slot])
            editor.set_word(slot, word)
        return list(editor.entries)

    def check(self, question: Question, answer: Any) -> AnswerResult:
        expected = question.answer_list
        is_correct = sequences_match(answer, expected)
        return AnswerResult(
            correct=is_correct,
            feedback="Correct! Good job!" if is_correct else "Not quite.",
            user_answer=describe_answer(answer),
            correct_answer=" ".join(expected),
            explanation=question.explanation,
        )

    def hint(self, question: Question, attempt: int) -> str | None:
        """Reveal the first letter of the next word per attempt."""
        expected = question.answer_list
        if 1 <= attempt <= len(expected):
            word = expected[attempt - 1]
            return f"Word {attempt} starts with '{word[0].upper()}'"
        return None
