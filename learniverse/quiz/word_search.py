"""
Word search selection engine for hidden-word questions.

The learner drags across a straight run of grid cells (horizontal,
vertical or diagonal). On release the letters are compared against every
target word that has not been found yet, forwards and reversed.

States:
    Idle -> pointer_down(unclaimed cell) -> Selecting(anchor, path)
    Selecting -> pointer_move(cell on a straight line from anchor) -> Selecting
    Selecting -> pointer_up() -> evaluate -> Idle

Cells that belong to a found word are claimed and can never be selected
again. Out-of-range coordinates are ignored.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from loguru import logger

Cell = tuple[int, int]

MIN_SELECTION_LENGTH = 2


@dataclass(frozen=True)
class FoundWord:
    """A target word located on the grid, cells in reading order."""

    word: str
    cells: tuple[Cell, ...]
    reversed: bool = False


def parse_grid(rows: Iterable[str]) -> list[list[str]]:
    """
    Parse grid rows into a letter matrix.

    Rows may be space separated ('O C T A') or packed ('OCTA').
    """
    grid = []
    for row in rows:
        letters = row.split() if " " in row.strip() else list(row.strip())
        grid.append([letter.upper() for letter in letters])
    return grid


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def line_between(start: Cell, end: Cell) -> list[Cell] | None:
    """
    Cells on the straight line from start to end inclusive.

    Returns None when the two cells are not on a horizontal, vertical or
    45-degree diagonal line.
    """
    dr = end[0] - start[0]
    dc = end[1] - start[1]
    if dr != 0 and dc != 0 and abs(dr) != abs(dc):
        return None
    step_r, step_c = _sign(dr), _sign(dc)
    length = max(abs(dr), abs(dc)) + 1
    return [(start[0] + i * step_r, start[1] + i * step_c) for i in range(length)]


class WordSearchEngine:
    """Selection state for one hidden-word question."""

    def __init__(
        self,
        grid: Sequence[str],
        words: Iterable[str],
        on_found: Callable[[FoundWord], None] | None = None,
    ):
        self.grid = parse_grid(grid)
        self.words = [w.strip().upper() for w in words if w.strip()]
        self._on_found = on_found

        self.selection_start: Cell | None = None
        self.selection_end: Cell | None = None
        self.selected_cells: list[Cell] = []
        self.found_words: dict[str, FoundWord] = {}
        self._claimed: dict[Cell, str] = {}

    # ------------------------------------------------------------------
    # Grid helpers
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return len(self.grid)

    def in_bounds(self, cell: Cell) -> bool:
        row, col = cell
        return 0 <= row < len(self.grid) and 0 <= col < len(self.grid[row])

    def letter_at(self, cell: Cell) -> str:
        return self.grid[cell[0]][cell[1]]

    def is_claimed(self, cell: Cell) -> bool:
        return cell in self._claimed

    @property
    def is_selecting(self) -> bool:
        return self.selection_start is not None

    @property
    def is_complete(self) -> bool:
        """True once every target word has been found."""
        return all(word in self.found_words for word in self.words)

    @property
    def remaining_words(self) -> list[str]:
        return [w for w in self.words if w not in self.found_words]

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, cell: Cell) -> None:
        """Start a selection anchored at cell."""
        if not self.in_bounds(cell) or self.is_claimed(cell):
            return
        self.selection_start = cell
        self.selection_end = cell
        self.selected_cells = [cell]

    def pointer_move(self, cell: Cell) -> None:
        """Extend the selection to cell if it forms a straight unclaimed run."""
        if self.selection_start is None or not self.in_bounds(cell):
            return
        path = line_between(self.selection_start, cell)
        if path is None:
            return
        if any(self.is_claimed(c) or not self.in_bounds(c) for c in path):
            return
        self.selection_end = cell
        self.selected_cells = path

    def pointer_up(self) -> FoundWord | None:
        """Evaluate the current selection and return to idle."""
        path = self.selected_cells
        self._clear_selection()

        if len(path) < MIN_SELECTION_LENGTH:
            return None

        letters = "".join(self.letter_at(c) for c in path)
        for word in self.remaining_words:
            if letters == word:
                return self._claim(word, path, reversed_match=False)
            if letters[::-1] == word:
                return self._claim(word, list(reversed(path)), reversed_match=True)

        if letters in self.found_words or letters[::-1] in self.found_words:
            logger.debug(f"Word search: '{letters}' already found, ignoring")
        return None

    def select(self, start: Cell, end: Cell) -> FoundWord | None:
        """Convenience: press on start, drag to end, release."""
        self.pointer_down(start)
        self.pointer_move(end)
        return self.pointer_up()

    def _clear_selection(self) -> None:
        self.selection_start = None
        self.selection_end = None
        self.selected_cells = []

    def _claim(self, word: str, cells: list[Cell], reversed_match: bool) -> FoundWord:
        found = FoundWord(word=word, cells=tuple(cells), reversed=reversed_match)
        self.found_words[word] = found
        for cell in cells:
            self._claimed[cell] = word
        logger.debug(f"Word search: found '{word}' at {cells[0]}..{cells[-1]}")
        if self._on_found:
            self._on_found(found)
        return found

    # ------------------------------------------------------------------
    # Answer export / restore
    # ------------------------------------------------------------------

    def to_answer(self) -> dict[str, Any]:
        """Answer value stored in the session: found words with their cells."""
        return {
            "found": {
                word: [list(cell) for cell in found.cells]
                for word, found in self.found_words.items()
            }
        }

    def restore(self, answer: Any) -> None:
        """
        Rehydrate found words from a stored answer.

        Accepts the dict produced by to_answer() (cells restored and claimed)
        or a plain list of words (marked found without highlighting).
        """
        if isinstance(answer, dict):
            found = answer.get("found") or {}
            if isinstance(found, dict):
                for word, cells in found.items():
                    self._restore_word(word, cells)
                return
            answer = found
        if isinstance(answer, (list, tuple)):
            for word in answer:
                self._restore_word(word, None)

    def _restore_word(self, word: Any, cells: Any) -> None:
        word = str(word).strip().upper()
        if word not in self.words or word in self.found_words:
            return
        valid: list[Cell] = []
        if isinstance(cells, (list, tuple)):
            for cell in cells:
                if not (isinstance(cell, (list, tuple)) and len(cell) == 2):
                    continue
                try:
                    candidate = (int(cell[0]), int(cell[1]))
                except (TypeError, ValueError):
                    continue
                if self.in_bounds(candidate):
                    valid.append(candidate)
        self.found_words[word] = FoundWord(word=word, cells=tuple(valid))
        for cell in valid:
            self._claimed[cell] = word


def found_word_set(answer: Any) -> set[str]:
    """Extract the set of found words from any stored hidden-word answer."""
    if isinstance(answer, dict):
        answer = answer.get("found") or []
    if isinstance(answer, dict):
        return {str(w).strip().upper() for w in answer}
    if isinstance(answer, (list, tuple, set)):
        return {str(w).strip().upper() for w in answer}
    return set()
