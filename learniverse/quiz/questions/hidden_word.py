"""
Hidden word (word search) question handler.

Words are found one at a time on the grid; the question is complete once
every target word has been found. Selection is done by giving the first
and last cell of a word, e.g. "1,1 1,7".
"""

import re
from typing import Any

from rich.console import Console
from rich.prompt import Prompt

from learniverse.delivery.visuals import get_prompt, question_panel, render_word_grid
from learniverse.quiz.editors import HiddenWordEditor
from learniverse.quiz.models import Question
from learniverse.quiz.word_search import found_word_set, parse_grid

from . import QuestionType, register
from .base import AnswerResult

CELL_PATTERN = re.compile(r"(\d+)\s*,\s*(\d+)")


@register(QuestionType.HIDDEN_WORD)
class HiddenWordHandler:
    """Handler for word search questions."""

    def validate(self, question: Question) -> bool:
        """Each target word must fit inside the grid."""
        grid = parse_grid(question.grid)
        if not grid or not question.words:
            return False
        longest = max(len(grid), max(len(row) for row in grid))
        return all(2 <= len(w.strip()) <= longest for w in question.words)

    def present(self, question: Question, console: Console) -> None:
        words = ", ".join(w.upper() for w in question.words)
        console.print(question_panel(f"{question.text}\n\n[dim]Words: {words}[/dim]", "WORD SEARCH"))

    def get_input(self, question: Question, console: Console, workspace: Any = None) -> dict:
        """Let the learner select runs until every word is found or they stop."""
        editor = workspace if isinstance(workspace, HiddenWordEditor) else HiddenWordEditor(question)
        console.print("[dim]Enter the first and last cell as row,col (e.g. 1,1 1,7). 'done' to stop.[/dim]")
        while not editor.is_complete:
            console.print(render_word_grid(editor))
            response = Prompt.ask(get_prompt("word_search", f"{len(editor.remaining_words)} left"), default="done")
            if response.strip().lower() == "done":
                break
            cells = [(int(r) - 1, int(c) - 1) for r, c in CELL_PATTERN.findall(response)]
            if len(cells) != 2:
                console.print("[yellow]Give two cells, like 2,1 2,8[/yellow]")
                continue
            found = editor.select(cells[0], cells[1])
            if found:
                console.print(f"[bold green]Found {found.word}![/bold green]")
            else:
                console.print("[dim]No word there. Try again.[/dim]")
        if editor.is_complete:
            console.print(render_word_grid(editor))
        return editor.to_answer()

    def check(self, question: Question, answer: Any) -> AnswerResult:
        """Complete when the found words cover every target word."""
        targets = {w.strip().upper() for w in question.words}
        found = found_word_set(answer) & targets
        is_correct = bool(targets) and found == targets
        missing = sorted(targets - found)
        return AnswerResult(
            correct=is_correct,
            feedback="You found them all!" if is_correct else f"{len(found)}/{len(targets)} words found",
            user_answer=", ".join(sorted(found)) or "(none)",
            correct_answer=", ".join(w.upper() for w in question.words),
            explanation=f"Still hidden: {', '.join(missing)}" if missing else question.explanation,
        )

    def hint(self, question: Question, attempt: int) -> str | None:
        """Say which row the first word starts on."""
        if attempt != 1 or not question.words:
            return None
        grid = parse_grid(question.grid)
        word = question.words[0].strip().upper()
        for r, row in enumerate(grid):
            line = "".join(row)
            if word in line or word[::-1] in line:
                return f"Look along row {r + 1} for {word}"
        return f"{word} starts with '{word[0]}'"
