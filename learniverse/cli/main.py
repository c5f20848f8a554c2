"""
Typer CLI for the Learniverse chapter quizzes.

Commands:
    learniverse quiz 8001 1        - Take the quiz for story 8001, chapter 1
    learniverse resume             - Continue the most recent saved quiz
    learniverse chapters           - List chapters that have quizzes
    learniverse inspect 8001-1     - Show a chapter's questions and answers
    learniverse report             - Summarise past quiz results

Usage:
    learniverse --help
    learniverse quiz 8001 1 --no-delay
    learniverse --log-level DEBUG chapters
"""

from __future__ import annotations

import sys
import time
from datetime import datetime
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from config import get_settings
from learniverse.delivery.visuals import (
    format_timer,
    get_prompt,
    render_empty_chapter_panel,
    render_feedback_panel,
    render_hint_panel,
    render_quiz_header,
    render_results_panel,
    render_unsupported_panel,
)
from learniverse.quiz.question_bank import QuestionBank, chapter_key, get_question_bank, load_questions
from learniverse.quiz.questions import get_handler
from learniverse.quiz.questions.base import describe_answer
from learniverse.quiz.session import BlockingScheduler, QuizSession, summarize
from learniverse.quiz.session_store import SessionStore, create_session_state, restore_session
from learniverse.quiz.telemetry import QuizAnalyticsLogger, build_report

app = typer.Typer(
    name="learniverse",
    help="Learniverse: chapter comprehension quizzes",
    no_args_is_help=True,
)
console = Console()

ACTIONS = {
    "a": "answer",
    "h": "hint",
    "f": "flag",
    "s": "skip",
    "p": "previous",
    "q": "quit",
}


# =============================================================================
# Setup
# =============================================================================


def configure_logging(level: str) -> None:
    """Route loguru to stderr at the given level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def _load_bank() -> QuestionBank:
    return get_question_bank()


def _chapter_number(key: str) -> str:
    return key.rsplit("-", 1)[-1]


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Override the configured log level (DEBUG, INFO, WARNING...)",
    ),
) -> None:
    """
    Learniverse chapter quizzes.

    Take a quiz after reading a chapter, pick up where you left off, or
    look at how past quizzes went.
    """
    configure_logging(log_level or get_settings().log_level)


# =============================================================================
# Quiz Player
# =============================================================================


class QuizPlayer:
    """
    Interactive terminal loop around a QuizSession.

    Feedback is drawn inside the blocking scheduler's wait, so it stays on
    screen for the configured delay before the session advances.
    """

    def __init__(
        self,
        key: str,
        session: QuizSession,
        store: SessionStore,
        analytics: QuizAnalyticsLogger,
        session_id: Optional[str] = None,
        delay: float = 1.5,
        started_at: Optional[datetime] = None,
    ):
        self.key = key
        self.started_at = started_at or datetime.now()
        self.session = session
        self.store = store
        self.analytics = analytics
        self.session_id = session_id
        self.hints_used: dict[int, int] = {}

        session.feedback_delay = delay
        session.scheduler = BlockingScheduler(sleep=self._show_feedback)
        session.on_complete = self._record
        session.on_close = lambda: logger.debug(f"Closed quiz for {key}")

    def run(self) -> None:
        session = self.session
        try:
            while not session.is_terminal:
                if not self._step():
                    return
        except KeyboardInterrupt:
            console.print("\n[yellow]Quiz interrupted.[/yellow]")
            self._save_and_close()
            return

        summary = session.finish()
        console.print(render_results_panel(int(_chapter_number(self.key)), summary))
        if self.session_id:
            self.store.delete(self.session_id)
        session.close()

    def _step(self) -> bool:
        """Run one action on the current question. False once the learner quits."""
        session = self.session
        question = session.current_question
        handler = get_handler(question.type)

        console.print()
        console.print(
            render_quiz_header(
                int(_chapter_number(self.key)),
                session.current_index,
                session.total,
                session.elapsed_seconds,
                flagged=session.is_flagged(question.id),
            )
        )
        if handler is None:
            console.print(render_unsupported_panel(question.type))
        else:
            handler.present(question, console)

        console.print(r"[dim]\[a]nswer  \[h]int  \[f]lag  \[s]kip  \[p]revious  \[q]uit & save[/dim]")
        choice = Prompt.ask(get_prompt("action"), choices=list(ACTIONS), default="a", show_choices=False)
        action = ACTIONS[choice]

        if action == "answer":
            if handler is not None:
                value = handler.get_input(question, console, session.workspace)
                session.set_answer(question.id, value)
            session.score_and_advance()
        elif action == "hint":
            self._hint(question, handler)
        elif action == "flag":
            flagged = session.toggle_flag(question.id)
            console.print("[yellow]⚑ Flagged for review[/yellow]" if flagged else "[dim]Flag removed[/dim]")
        elif action == "skip":
            session.skip(question.id)
        elif action == "previous":
            if not session.go_to_previous():
                console.print("[dim]Already at the first question.[/dim]")
        elif action == "quit":
            self._save_and_close()
            return False
        return True

    def _hint(self, question, handler) -> None:
        attempt = self.hints_used.get(question.id, 0) + 1
        hint = handler.hint(question, attempt) if handler is not None else None
        if hint is None:
            console.print("[dim]No more hints for this question.[/dim]")
            return
        self.hints_used[question.id] = attempt
        console.print(render_hint_panel(hint))

    def _show_feedback(self, delay: float) -> None:
        result = self.session.last_result
        if result is not None:
            console.print(
                render_feedback_panel(
                    result.correct,
                    result.correct_answer,
                    result.feedback,
                    result.explanation,
                )
            )
        time.sleep(delay)

    def _record(self, records) -> None:
        types = {q.id: q.type for q in self.session.questions}
        self.analytics.record_quiz(
            self.key,
            summarize(self.session),
            types,
            set(self.session.flagged),
            config=get_settings().get_quiz_config(),
            started_at=self.started_at,
        )

    def _save_and_close(self) -> None:
        state = create_session_state(
            self.key,
            self.session,
            session_id=self.session_id,
            expiry_hours=self.store.expiry_hours,
            started_at=self.started_at,
        )
        self.store.save(state)
        self.session.close()
        console.print("[green]Progress saved.[/green] Run [cyan]learniverse resume[/cyan] to continue.")


def _parse_started_at(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring unreadable start time in saved quiz: {value!r}")
        return None


def _player_parts(no_delay: bool) -> tuple[SessionStore, QuizAnalyticsLogger, float]:
    settings = get_settings()
    store = SessionStore(settings.session_dir, settings.session_expiry_hours)
    analytics = QuizAnalyticsLogger(settings.telemetry_dir)
    delay = 0.0 if no_delay else settings.feedback_delay_seconds
    return store, analytics, delay


# =============================================================================
# Commands
# =============================================================================


@app.command()
def quiz(
    story_id: int = typer.Argument(..., help="Story ID, e.g. 8001"),
    chapter: int = typer.Argument(..., help="Chapter number"),
    no_delay: bool = typer.Option(False, "--no-delay", help="Advance straight after feedback"),
) -> None:
    """
    Take a chapter comprehension quiz.

    Answer each question, ask for hints, flag questions for review, skip,
    or go back. Quit at any point to save and resume later.
    """
    key = chapter_key(story_id, chapter)
    questions = _load_bank().load_questions(story_id, chapter)
    if not questions:
        console.print(render_empty_chapter_panel(key))
        return

    store, analytics, delay = _player_parts(no_delay)
    store.cleanup_expired()
    session = QuizSession(questions, shuffle_seed=get_settings().shuffle_seed)
    QuizPlayer(key, session, store, analytics, delay=delay).run()


@app.command()
def resume(
    no_delay: bool = typer.Option(False, "--no-delay", help="Advance straight after feedback"),
) -> None:
    """Continue the most recent saved quiz."""
    store, analytics, delay = _player_parts(no_delay)
    state = store.get_latest()
    if state is None:
        console.print("[yellow]No saved quiz to resume.[/yellow]")
        return

    questions = load_questions(state.chapter_key)
    if not questions:
        console.print(f"[red]Chapter {state.chapter_key} is no longer in the question bank.[/red]")
        store.delete(state.session_id)
        raise typer.Exit(1)

    session = restore_session(state, questions, shuffle_seed=get_settings().shuffle_seed)
    console.print(
        f"[green]Resuming {state.chapter_key}[/green] at question "
        f"{session.current_index + 1} of {session.total}"
    )
    QuizPlayer(
        state.chapter_key,
        session,
        store,
        analytics,
        session_id=state.session_id,
        delay=delay,
        started_at=_parse_started_at(state.started_at),
    ).run()


@app.command()
def chapters() -> None:
    """List chapters that have a quiz."""
    bank = _load_bank()
    if not len(bank):
        console.print("[yellow]The question bank is empty.[/yellow]")
        return

    table = Table(title="Chapter Quizzes")
    table.add_column("Chapter", style="cyan")
    table.add_column("Questions", justify="right")
    table.add_column("Types", style="dim")

    for key in bank.chapter_keys():
        breakdown = bank.describe(key)
        types = ", ".join(f"{t} ({n})" for t, n in breakdown.question_types.items())
        table.add_row(key, str(breakdown.total_questions), types)

    console.print(table)


@app.command()
def inspect(
    key: str = typer.Argument(..., help="Chapter key, e.g. 8001-1"),
) -> None:
    """Show every question in a chapter with its answer."""
    bank = _load_bank()
    breakdown = bank.describe(key)
    if breakdown is None:
        console.print(f"[red]No chapter {key} in the question bank.[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Chapter {key}: {breakdown.total_questions} questions")
    table.add_column("ID", justify="right")
    table.add_column("Type", style="cyan")
    table.add_column("Question")
    table.add_column("Answer", style="green")
    table.add_column("Theme", style="dim")
    table.add_column("Difficulty", style="dim")

    for question in bank.get(key):
        supported = get_handler(question.type) is not None
        type_label = question.type if supported else f"[red]{question.type}[/red]"
        if question.type == "hidden-word":
            answer = ", ".join(w.upper() for w in question.words)
        else:
            answer = describe_answer(question.answer)
        table.add_row(
            str(question.id),
            type_label,
            question.text,
            answer,
            question.theme or "",
            question.difficulty or "",
        )

    console.print(table)
    if breakdown.themes:
        console.print(f"[dim]Themes: {', '.join(breakdown.themes)}[/dim]")


@app.command()
def report() -> None:
    """Summarise results from past quizzes."""
    summary = build_report(get_settings().telemetry_dir)
    if not summary.quizzes:
        console.print("[yellow]No quizzes taken yet.[/yellow]")
        return

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("Quizzes finished", str(summary.quizzes))
    table.add_row("Days active", str(summary.days))
    table.add_row("Questions answered", str(summary.questions_answered))
    table.add_row("Accuracy", f"{summary.accuracy_percent:.1f}%")
    table.add_row("Avg. time per question", format_timer(summary.average_time_seconds))
    console.print(table)

    chapters_table = Table(title="By Chapter")
    chapters_table.add_column("Chapter", style="cyan")
    chapters_table.add_column("Attempts", justify="right")
    chapters_table.add_column("Best", justify="right")
    for key, stats in sorted(summary.chapters.items()):
        chapters_table.add_row(key, str(stats["attempts"]), f"{stats['best_score']}/{stats['total']}")
    console.print(chapters_table)


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    run()
