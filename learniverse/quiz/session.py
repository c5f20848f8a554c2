"""
Quiz Session: controller for one learner's attempt at a chapter quiz.

Holds the mutable state of an in-progress quiz (current index, answers,
flags, skips, per-question timer, analytics log) and exposes the
navigation and scoring operations a front end drives.

Lifecycle:
    created at index 0 -> answer / flag / skip / score / previous ...
    -> terminal (results) once the last question is scored or skipped
    -> finish() aggregates analytics and calls on_complete exactly once
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from loguru import logger

from learniverse.quiz.editors import create_workspace
from learniverse.quiz.models import AnalyticsRecord, AnalyticsSummary, Question
from learniverse.quiz.questions import get_handler
from learniverse.quiz.questions.base import AnswerResult, describe_answer


class QuizSessionError(RuntimeError):
    """Raised when the host drives a session in a way its state does not allow."""


# =============================================================================
# Feedback scheduling
# =============================================================================


class Scheduler(Protocol):
    """Runs a callback after a delay. The returned handle may expose cancel()."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Any:
        ...


class ImmediateScheduler:
    """Runs callbacks straight away, ignoring the delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        callback()


class BlockingScheduler:
    """
    Waits for the delay, then runs the callback. Used by the terminal player.

    `sleep` is called even for a zero delay, so a front end can use it to
    draw feedback before the session advances.
    """

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self._sleep = sleep

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        self._sleep(max(0.0, delay))
        callback()


# =============================================================================
# Session
# =============================================================================


class QuizSession:
    """
    State and operations for a single quiz attempt.

    Args:
        questions: Ordered questions for this attempt (not modified)
        on_complete: Called once with the analytics log when finish() runs
        on_close: Called when the host abandons the session
        scheduler: Runs the post-scoring advance after feedback_delay
        feedback_delay: Seconds feedback stays visible before advancing
        clock: Monotonic clock used for per-question timing
        shuffle_seed: Mixed into editor shuffles
    """

    def __init__(
        self,
        questions: Sequence[Question],
        on_complete: Callable[[list[AnalyticsRecord]], None] | None = None,
        on_close: Callable[[], None] | None = None,
        scheduler: Scheduler | None = None,
        feedback_delay: float = 1.5,
        clock: Callable[[], float] = time.monotonic,
        shuffle_seed: int | None = None,
    ):
        self.questions: tuple[Question, ...] = tuple(questions)
        self.on_complete = on_complete
        self.on_close = on_close
        self.scheduler: Scheduler = scheduler or ImmediateScheduler()
        self.feedback_delay = feedback_delay
        self.shuffle_seed = shuffle_seed
        self._clock = clock

        self.current_index = 0
        self.answers: dict[int, Any] = {}
        self.flagged: set[int] = set()
        self.skipped: set[int] = set()
        self.analytics: list[AnalyticsRecord] = []

        self.showing_feedback = False
        self.last_result: AnswerResult | None = None
        self.is_terminal = not self.questions
        self.is_closed = False

        self._completed = False
        self._summary: AnalyticsSummary | None = None
        self._pending_advance: Any = None
        self._question_started_at = self._clock()
        self._workspace: Any = None
        self._workspace_index: int | None = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Question | None:
        if self.is_terminal or not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.questions) - 1

    @property
    def score(self) -> int:
        """Correct answers so far, derived from the analytics log."""
        return sum(1 for record in self.analytics if record.correct)

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds since the current question became active."""
        return max(0, int(self._clock() - self._question_started_at))

    @property
    def scored_ids(self) -> set[int]:
        return {record.question_id for record in self.analytics}

    def is_flagged(self, question_id: int) -> bool:
        return question_id in self.flagged

    @property
    def workspace(self) -> Any:
        """
        Ephemeral editor for the current question.

        Built on first access after every navigation and seeded with the
        stored answer, so revisiting a question restores its arrangement.
        """
        question = self.current_question
        if question is None:
            return None
        if self._workspace_index != self.current_index:
            qid = question.id
            self._workspace = create_workspace(
                question,
                write=lambda value: self.set_answer(qid, value),
                seed=self.shuffle_seed,
                initial=self.answers.get(qid),
            )
            self._workspace_index = self.current_index
        return self._workspace

    # ------------------------------------------------------------------
    # Answer capture
    # ------------------------------------------------------------------

    def set_answer(self, question_id: int, value: Any) -> bool:
        """
        Overwrite the in-progress answer for a question.

        No validation happens here. Answers become read-only once the
        question has been scored; later writes are ignored and return False.
        """
        self._ensure_open()
        if question_id in self.scored_ids:
            logger.debug(f"Question {question_id} already scored, answer kept")
            return False
        self.answers[question_id] = value
        return True

    def toggle_flag(self, question_id: int) -> bool:
        """
        Flag or unflag a question for review. Returns the new flag state.

        Raises:
            QuizSessionError: if no question in this quiz has the id
        """
        self._ensure_open()
        if not any(q.id == question_id for q in self.questions):
            raise QuizSessionError(f"No question {question_id} in this quiz")
        if question_id in self.flagged:
            self.flagged.discard(question_id)
            return False
        self.flagged.add(question_id)
        return True

    # ------------------------------------------------------------------
    # Scoring and navigation
    # ------------------------------------------------------------------

    def skip(self, question_id: int | None = None) -> None:
        """Skip the current question without an analytics record and advance."""
        question = self._require_current()
        if question_id is None:
            question_id = question.id
        elif question_id != question.id:
            raise QuizSessionError(f"Question {question_id} is not the current question")
        if self.showing_feedback:
            raise QuizSessionError("Cannot skip while feedback is showing")
        if question_id not in self.scored_ids:
            self.skipped.add(question_id)
        logger.debug(f"Skipped question {question_id}")
        self._advance()

    def score_and_advance(self) -> AnswerResult:
        """
        Score the current answer, log it, and schedule the advance.

        Missing or malformed answers are scored as incorrect. Unsupported
        question types are skipped.

        Scoring is final: a question revisited with go_to_previous() and
        scored again shows its original result and adds no second
        analytics record, so each question has at most one record.
        """
        question = self._require_current()
        if self.showing_feedback:
            raise QuizSessionError("Feedback is already showing")

        handler = get_handler(question.type)
        if handler is None:
            logger.warning(f"Question {question.id} has unsupported type '{question.type}', skipping")
            result = AnswerResult(
                correct=False,
                feedback="Question type not supported yet",
                user_answer="",
                correct_answer=describe_answer(question.answer),
            )
            self.skip(question.id)
            return result

        answer = self.answers.get(question.id)
        existing = next((r for r in self.analytics if r.question_id == question.id), None)
        result = evaluate(question, answer)

        if existing is None:
            self.analytics.append(
                AnalyticsRecord(
                    question_id=question.id,
                    time_spent_seconds=self.elapsed_seconds,
                    correct=result.correct,
                    answer=answer,
                )
            )
            self.skipped.discard(question.id)
            logger.debug(f"Scored question {question.id}: correct={result.correct}")
        else:
            result.correct = existing.correct

        self.last_result = result
        self.showing_feedback = True
        self._pending_advance = self.scheduler.call_later(self.feedback_delay, self._end_feedback)
        return result

    def go_to_previous(self) -> bool:
        """Step back one question. Returns False when not allowed."""
        self._ensure_open()
        if self.is_terminal:
            raise QuizSessionError("Quiz is finished")
        if self.current_index == 0 or self.showing_feedback:
            return False
        self._move_to(self.current_index - 1)
        return True

    def finish(self) -> AnalyticsSummary:
        """
        Aggregate analytics into a summary and notify the host once.

        Raises:
            QuizSessionError: if the quiz has not reached its results state
        """
        if not self.is_terminal:
            raise QuizSessionError("finish() is only valid once the quiz is over")
        if self._summary is None:
            self._summary = summarize(self)
        if not self._completed:
            self._completed = True
            logger.info(f"Quiz finished: {self._summary.score}/{self._summary.total}")
            if self.on_complete:
                self.on_complete(list(self.analytics))
        return self._summary

    def close(self) -> None:
        """Abandon the session: cancel pending work and notify the host."""
        if self.is_closed:
            return
        cancel = getattr(self._pending_advance, "cancel", None)
        if callable(cancel):
            cancel()
        self._pending_advance = None
        self.is_closed = True
        self._workspace = None
        logger.debug("Quiz session closed")
        if self.on_close:
            self.on_close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _end_feedback(self) -> None:
        self._pending_advance = None
        if self.is_closed:
            return
        self.showing_feedback = False
        self._advance()

    def _advance(self) -> None:
        if self.is_last_question:
            self.is_terminal = True
            self._workspace = None
            self._workspace_index = None
            logger.debug("Reached results state")
        else:
            self._move_to(self.current_index + 1)

    def _move_to(self, index: int) -> None:
        self.current_index = index
        self._question_started_at = self._clock()
        self._workspace = None
        self._workspace_index = None

    def _ensure_open(self) -> None:
        if self.is_closed:
            raise QuizSessionError("Session is closed")

    def _require_current(self) -> Question:
        self._ensure_open()
        question = self.current_question
        if question is None:
            raise QuizSessionError("Quiz is finished")
        return question


def evaluate(question: Question, answer: Any) -> AnswerResult:
    """Run the correctness predicate for a question's type."""
    handler = get_handler(question.type)
    if handler is None:
        raise QuizSessionError(f"No handler for question type '{question.type}'")
    try:
        return handler.check(question, answer)
    except (TypeError, ValueError, AttributeError, KeyError) as e:
        logger.warning(f"Malformed answer for question {question.id}: {e}")
        return AnswerResult(
            correct=False,
            feedback="Not quite.",
            user_answer=describe_answer(answer),
            correct_answer=describe_answer(question.answer),
        )


def summarize(session: QuizSession) -> AnalyticsSummary:
    """Build the results summary for a session."""
    records = list(session.analytics)
    total_time = sum(r.time_spent_seconds for r in records)
    # Half-up rounding
    average = int(total_time / len(records) + 0.5) if records else 0
    return AnalyticsSummary(
        score=session.score,
        total=session.total,
        average_time_seconds=average,
        flagged_count=len(session.flagged),
        skipped_count=len(session.skipped),
        records=records,
    )
