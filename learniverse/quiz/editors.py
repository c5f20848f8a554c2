"""
Answer editors for reorder and matching style questions.

An editor is the working state of the question currently on screen:
the shuffled presentation order, the learner's arrangement so far, and
for hidden-word questions the word search engine. It is built once when
the question becomes current (same question + seed -> same order) and
thrown away on navigation. Every interaction writes the full answer
back through the `write` callback.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

from loguru import logger

from learniverse.quiz.models import Question
from learniverse.quiz.word_search import FoundWord, WordSearchEngine

AnswerWriter = Callable[[Any], None]


def question_rng(question: Question, seed: int | None = None) -> random.Random:
    """Deterministic RNG for a question's presentation order."""
    return random.Random(f"{seed}:{question.id}:{question.type}")


def _shuffled(items: list[str], rng: random.Random, avoid: list[str] | None = None) -> list[str]:
    """Shuffle, rotating once if the result gives the answer away."""
    result = list(items)
    rng.shuffle(result)
    if avoid is not None and len(result) > 1 and result == list(avoid):
        result = result[1:] + result[:1]
    return result


class MatchingEditor:
    """
    Terms stay in bank order; definitions are shuffled and reordered by
    the learner. The definition sitting in slot i is matched to term i.
    """

    def __init__(
        self,
        question: Question,
        write: AnswerWriter | None = None,
        seed: int | None = None,
        initial: Any = None,
    ):
        pairs = [(item.term, item.definition) for item in question.items]
        if not pairs:
            pairs = [(a.partition("=")[0], a.partition("=")[2]) for a in question.answer_list if "=" in a]
        self.terms = [term for term, _ in pairs]
        canonical = [definition for _, definition in pairs]
        self.definitions = _shuffled(canonical, question_rng(question, seed), avoid=canonical)
        self._write = write
        if isinstance(initial, dict):
            self._restore(initial)

    def mapping(self) -> dict[str, str]:
        """Current term -> definition assignment."""
        return dict(zip(self.terms, self.definitions))

    def move(self, from_index: int, to_index: int) -> None:
        """Drag the definition at from_index into position to_index."""
        if not (0 <= from_index < len(self.definitions) and 0 <= to_index < len(self.definitions)):
            return
        definition = self.definitions.pop(from_index)
        self.definitions.insert(to_index, definition)
        self._commit()

    def assign(self, term_index: int, definition_index: int) -> None:
        """Put the definition at definition_index into term_index's slot (swap)."""
        if not (0 <= term_index < len(self.terms) and 0 <= definition_index < len(self.definitions)):
            return
        defs = self.definitions
        defs[term_index], defs[definition_index] = defs[definition_index], defs[term_index]
        self._commit()

    def _restore(self, mapping: dict) -> None:
        remaining = list(self.definitions)
        ordered: list[str | None] = []
        for term in self.terms:
            chosen = mapping.get(term)
            if chosen in remaining:
                remaining.remove(chosen)
                ordered.append(chosen)
            else:
                ordered.append(None)
        self.definitions = [d if d is not None else remaining.pop(0) for d in ordered]

    def _commit(self) -> None:
        if self._write:
            self._write(self.mapping())


class WordSequenceEditor:
    """Shuffled tokens the learner puts back in order."""

    def __init__(
        self,
        question: Question,
        write: AnswerWriter | None = None,
        seed: int | None = None,
        initial: Any = None,
    ):
        tokens = list(question.sequence_tokens)
        self.tokens = _shuffled(tokens, question_rng(question, seed), avoid=question.answer_list)
        self._write = write
        if isinstance(initial, (list, tuple)):
            restored = [str(t) for t in initial]
            if sorted(restored) == sorted(self.tokens):
                self.tokens = restored

    @property
    def order(self) -> list[str]:
        return list(self.tokens)

    def move(self, from_index: int, to_index: int) -> None:
        """Drag the token at from_index to to_index."""
        if not (0 <= from_index < len(self.tokens) and 0 <= to_index < len(self.tokens)):
            return
        token = self.tokens.pop(from_index)
        self.tokens.insert(to_index, token)
        self._commit()

    def arrange(self, positions: list[int]) -> bool:
        """
        Reorder by a full permutation of current positions (0-based).

        Returns False and leaves the order untouched if positions is not a
        permutation.
        """
        if sorted(positions) != list(range(len(self.tokens))):
            return False
        self.tokens = [self.tokens[i] for i in positions]
        self._commit()
        return True

    def _commit(self) -> None:
        if self._write:
            self._write(self.order)


class UnscrambleEditor:
    """One text slot per scrambled word."""

    def __init__(
        self,
        question: Question,
        write: AnswerWriter | None = None,
        seed: int | None = None,
        initial: Any = None,
    ):
        rng = question_rng(question, seed)
        answers = question.answer_list
        tiles = question.letters.split() or list(answers)
        # Words the bank left unscrambled get their letters shuffled here
        self.tiles = []
        for i, tile in enumerate(tiles):
            expected = answers[i] if i < len(answers) else None
            if expected and tile.upper() == expected.upper() and len(tile) > 1:
                tile = "".join(_shuffled(list(tile), rng, avoid=list(tile)))
            self.tiles.append(tile)
        self.entries: list[str] = [""] * len(self.tiles)
        self._write = write
        if isinstance(initial, (list, tuple)):
            for i, value in enumerate(initial[: len(self.entries)]):
                self.entries[i] = str(value)

    def set_word(self, slot: int, text: str) -> None:
        if not 0 <= slot < len(self.entries):
            return
        self.entries[slot] = text.strip()
        self._commit()

    def _commit(self) -> None:
        if self._write:
            self._write(list(self.entries))


class HiddenWordEditor(WordSearchEngine):
    """Word search engine that writes found words (with cells) back as the answer."""

    def __init__(
        self,
        question: Question,
        write: AnswerWriter | None = None,
        seed: int | None = None,
        initial: Any = None,
        on_found: Callable[[FoundWord], None] | None = None,
    ):
        super().__init__(question.grid, question.words, on_found=self._handle_found)
        self._write = write
        self._notify = on_found
        self.last_found: FoundWord | None = None
        if initial is not None:
            self.restore(initial)

    def _handle_found(self, found: FoundWord) -> None:
        self.last_found = found
        if self._write:
            self._write(self.to_answer())
        if self._notify:
            self._notify(found)


EDITORS: dict[str, type] = {
    "matching": MatchingEditor,
    "word-sequence": WordSequenceEditor,
    "unscramble": UnscrambleEditor,
    "hidden-word": HiddenWordEditor,
}


def create_workspace(
    question: Question,
    write: AnswerWriter | None = None,
    seed: int | None = None,
    initial: Any = None,
) -> Any:
    """Build the editor for a question, or None for single-value types."""
    editor_cls = EDITORS.get(question.type)
    if editor_cls is None:
        return None
    logger.debug(f"Building {editor_cls.__name__} for question {question.id}")
    return editor_cls(question, write=write, seed=seed, initial=initial)
