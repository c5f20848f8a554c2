"""
Matching question handler.

The learner matches terms to definitions. Definitions are shuffled,
the learner provides pairs like "1A 2B 3C". A match is only correct when
every term has its right definition; there is no partial credit.
"""

from typing import Any

from rich.console import Console
from rich.prompt import Prompt

from learniverse.delivery.visuals import get_prompt, question_panel
from learniverse.quiz.editors import MatchingEditor
from learniverse.quiz.models import Question

from . import QuestionType, register
from .base import AnswerResult, describe_answer, normalize


def canonical_mapping(question: Question) -> dict[str, str]:
    """Term -> definition, from the items or from 'term=definition' answers."""
    if question.items:
        return {item.term: item.definition for item in question.items}
    return parse_pairs(question.answer_list)


def parse_pairs(value: Any) -> dict[str, str]:
    """Turn a mapping or a list of 'term=definition' strings into a dict."""
    if isinstance(value, dict):
        return {str(k): str(v) for k, v in value.items() if v is not None}
    pairs: dict[str, str] = {}
    if isinstance(value, (list, tuple)):
        for entry in value:
            if isinstance(entry, str) and "=" in entry:
                term, _, definition = entry.partition("=")
                pairs[term] = definition
    return pairs


def is_match_correct(answer: Any, question: Question) -> bool:
    """Total over every term and every pair correct."""
    expected = {normalize(t): normalize(d) for t, d in canonical_mapping(question).items()}
    if not expected:
        return False
    given = {normalize(t): normalize(d) for t, d in parse_pairs(answer).items()}
    return all(given.get(term) and given[term] == definition for term, definition in expected.items())


@register(QuestionType.MATCHING)
class MatchingHandler:
    """Handler for matching questions."""

    def validate(self, question: Question) -> bool:
        """Check there are at least two pairs."""
        return len(canonical_mapping(question)) >= 2

    def present(self, question: Question, console: Console) -> None:
        console.print(question_panel(question.text, "MATCH PAIRS"))

    def get_input(self, question: Question, console: Console, workspace: Any = None) -> dict:
        """Display terms/shuffled definitions and read matches like '1A 2B'."""
        editor = workspace if isinstance(workspace, MatchingEditor) else MatchingEditor(question)
        console.print("\n[bold cyan]TERMS:[/bold cyan]")
        for i, term in enumerate(editor.terms, 1):
            console.print(f"  [{i}] {term}")

        # Snapshot: assignments below swap editor.definitions in place
        shown = list(editor.definitions)
        console.print("\n[bold cyan]DEFINITIONS:[/bold cyan]")
        for i, definition in enumerate(shown):
            console.print(f"  ({chr(65 + i)}) {definition}")

        console.print("\n[dim]Match terms to definitions (e.g., 1A 2B 3C)[/dim]")
        user_input = Prompt.ask(get_prompt("matching"), default="").strip().upper()

        for match in user_input.split():
            if len(match) >= 2 and match[:-1].isdigit():
                term_idx = int(match[:-1]) - 1
                def_idx = ord(match[-1]) - ord("A")
                if 0 <= term_idx < len(editor.terms) and 0 <= def_idx < len(shown):
                    editor.assign(term_idx, editor.definitions.index(shown[def_idx]))
        return editor.mapping()

    def check(self, question: Question, answer: Any) -> AnswerResult:
        """Check matching pairs."""
        expected = canonical_mapping(question)
        is_correct = is_match_correct(answer, question)
        given = {normalize(t): normalize(d) for t, d in parse_pairs(answer).items()}
        right = sum(1 for t, d in expected.items() if given.get(normalize(t)) == normalize(d))

        return AnswerResult(
            correct=is_correct,
            feedback="Correct! Good job!" if is_correct else f"{right}/{len(expected)} pairs matched",
            user_answer=describe_answer(parse_pairs(answer)),
            correct_answer="\n".join(f"{t} -> {d}" for t, d in expected.items()),
            explanation=question.explanation,
        )

    def hint(self, question: Question, attempt: int) -> str | None:
        """Progressive hints: reveal one pair per attempt."""
        pairs = list(canonical_mapping(question).items())
        if 1 <= attempt <= min(2, len(pairs) - 1):
            term, definition = pairs[attempt - 1]
            return f"'{term}' goes with '{definition}'"
        return None
