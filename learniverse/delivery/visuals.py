"""
Learniverse terminal visuals.

Rich panels and helpers for presenting quiz questions, feedback,
progress and results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich import box
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from learniverse.quiz.models import AnalyticsSummary
    from learniverse.quiz.word_search import WordSearchEngine

# =============================================================================
# COLOR THEME
# =============================================================================

LEARNIVERSE_THEME = {
    "primary": "#2563EB",  # Learniverse blue
    "success": "#10B981",  # Emerald - correct answers
    "warning": "#F59E0B",  # Amber - hints and flags
    "error": "#EF4444",  # Red - incorrect
    "dim": "#94A3B8",  # Slate - secondary text
    "found": "#0D9488",  # Teal - found word cells
    "selected": "#FACC15",  # Yellow - current selection
}

STYLES = {
    "primary": Style(color=LEARNIVERSE_THEME["primary"], bold=True),
    "success": Style(color=LEARNIVERSE_THEME["success"], bold=True),
    "warning": Style(color=LEARNIVERSE_THEME["warning"], bold=True),
    "error": Style(color=LEARNIVERSE_THEME["error"], bold=True),
    "dim": Style(color=LEARNIVERSE_THEME["dim"]),
}

PROMPTS = {
    "choice": "Pick an answer",
    "true_false": "True or false",
    "fill_blank": "Fill the blank",
    "matching": "Your matches",
    "unscramble": "Unscrambled word",
    "sequence": "New order",
    "word_search": "Word cells",
    "action": "What next",
    "default": "Answer",
}


def get_prompt(kind: str, suffix: str = "") -> str:
    """
    Get the styled prompt for a kind of input.

    Args:
        kind: Prompt key, e.g. "choice"
        suffix: Optional suffix like "[a-d]"

    Returns:
        Formatted prompt string
    """
    base = PROMPTS.get(kind.lower(), PROMPTS["default"])
    if suffix:
        return f"[cyan]{base}[/cyan] {suffix}"
    return f"[cyan]{base}[/cyan]"


def format_timer(seconds: int) -> str:
    """Format elapsed seconds as mm:ss."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def question_panel(body: str, title: str) -> Panel:
    """Panel wrapping a question's prompt."""
    return Panel(
        body,
        title=f"[bold cyan]{title}[/bold cyan]",
        border_style="cyan",
        box=box.HEAVY,
        padding=(1, 2),
    )


def render_quiz_header(
    chapter_number: int,
    index: int,
    total: int,
    elapsed_seconds: int,
    flagged: bool = False,
) -> Panel:
    """
    Header with chapter title, "Question i of n", progress bar and timer.

    Args:
        chapter_number: Chapter the quiz belongs to
        index: Current question index (0-based)
        total: Number of questions
        elapsed_seconds: Time on the current question
        flagged: Whether the current question is flagged for review
    """
    width = 20
    filled = int((index + 1) / max(1, total) * width)

    txt = Text()
    txt.append(f"Chapter {chapter_number} Comprehension Quiz", style=STYLES["primary"])
    txt.append(f"   Question {index + 1} of {total}", style=STYLES["dim"])
    txt.append(f"   ⏱ {format_timer(elapsed_seconds)}", style=Style(color=LEARNIVERSE_THEME["warning"]))
    if flagged:
        txt.append("   ⚑ flagged", style=STYLES["warning"])
    txt.append("\n")
    txt.append("█" * filled, style=Style(color=LEARNIVERSE_THEME["success"]))
    txt.append("░" * (width - filled), style=STYLES["dim"])

    return Panel(txt, padding=(0, 1), border_style=Style(color=LEARNIVERSE_THEME["primary"]), box=box.ROUNDED)


def render_feedback_panel(
    passed: bool,
    correct_answer: str,
    feedback: str = "",
    explanation: str | None = None,
) -> Panel:
    """
    Feedback shown between scoring and auto-advance.

    Args:
        passed: Whether the answer was correct
        correct_answer: The canonical answer, shown when wrong
        feedback: Handler feedback line
        explanation: Optional explanation text
    """
    color = LEARNIVERSE_THEME["success"] if passed else LEARNIVERSE_THEME["error"]
    content = Text()
    if passed:
        content.append("✓ Correct! Good job!", style=STYLES["success"])
    else:
        content.append("✗ Incorrect. ", style=STYLES["error"])
        content.append("The correct answer was: ", style=STYLES["dim"])
        content.append(correct_answer, style=Style(bold=True))
    if feedback and not passed:
        content.append(f"\n{feedback}", style=STYLES["dim"])
    if explanation:
        content.append("\n\n")
        content.append("Why: ", style=STYLES["warning"])
        content.append(explanation, style=STYLES["dim"])

    return Panel(content, border_style=Style(color=color), box=box.HEAVY, padding=(1, 2))


def render_hint_panel(hint: str) -> Panel:
    return Panel(f"💡 {hint}", border_style=Style(color=LEARNIVERSE_THEME["warning"]), box=box.ROUNDED)


def render_unsupported_panel(question_type: str) -> Panel:
    """Placeholder for question types without a handler."""
    return Panel(
        f"Question type not supported yet ([italic]{question_type}[/italic])",
        border_style=STYLES["dim"],
        box=box.ROUNDED,
    )


def results_message(score: int, total: int) -> str:
    """Encouragement line for the results screen."""
    if total and score == total:
        return "Perfect score! You've mastered this chapter!"
    if score > total / 2:
        return "Good work! You're understanding the key concepts."
    return "Keep practicing! Reread the chapter to improve your understanding."


def render_results_panel(chapter_number: int, summary: AnalyticsSummary) -> Panel:
    """
    End-of-quiz results: score, average time per question and accuracy.

    Args:
        chapter_number: Chapter the quiz belongs to
        summary: Aggregated session analytics
    """
    text = Text(justify="center")
    text.append(f"{summary.score}/{summary.total}\n\n", style=STYLES["primary"])
    text.append("Avg. Time per Question  ", style=STYLES["dim"])
    text.append(f"{format_timer(summary.average_time_seconds)}\n", style=Style(bold=True))
    text.append("Accuracy  ", style=STYLES["dim"])
    text.append(f"{summary.accuracy_percent}%\n", style=Style(bold=True))
    if summary.flagged_count:
        text.append(f"Flagged for review: {summary.flagged_count}\n", style=STYLES["warning"])
    if summary.skipped_count:
        text.append(f"Skipped: {summary.skipped_count}\n", style=STYLES["dim"])
    text.append("\n")
    text.append(results_message(summary.score, summary.total))

    border = LEARNIVERSE_THEME["success"] if summary.accuracy_percent >= 50 else LEARNIVERSE_THEME["warning"]
    return Panel(
        text,
        title=f"[bold]Chapter {chapter_number} Quiz Results[/bold]",
        border_style=Style(color=border),
        box=box.HEAVY,
        padding=(1, 2),
    )


def render_empty_chapter_panel(chapter_key: str) -> Panel:
    return Panel(
        f"There are no questions for this chapter ([dim]{chapter_key}[/dim]).\nContinue to the next chapter!",
        title="[bold]No Questions Available[/bold]",
        border_style=STYLES["dim"],
        box=box.ROUNDED,
        padding=(1, 2),
    )


def render_word_grid(engine: WordSearchEngine) -> Table:
    """
    Word search grid with found cells and the active selection highlighted.

    Row and column headers are 1-based to match the input format.
    """
    selected = set(engine.selected_cells)
    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 1))
    table.add_column("", style=STYLES["dim"], justify="right")
    width = max((len(row) for row in engine.grid), default=0)
    for col in range(width):
        table.add_column(str(col + 1), justify="center")

    for r, row in enumerate(engine.grid):
        cells = []
        for c, letter in enumerate(row):
            if engine.is_claimed((r, c)):
                cells.append(f"[bold {LEARNIVERSE_THEME['found']}]{letter}[/]")
            elif (r, c) in selected:
                cells.append(f"[bold {LEARNIVERSE_THEME['selected']}]{letter}[/]")
            else:
                cells.append(letter)
        table.add_row(str(r + 1), *cells)
    return table
