"""
Quiz analytics log.

Writes one JSONL file per quiz attempt plus a per-day summary, so progress
can be reviewed offline (the data behind the parent dashboard).

File Structure:
    ~/.learniverse/telemetry/
        sessions/
            2026-01-15_8001-1_ab12cd34.jsonl  # One event per line
        summaries/
            2026-01-15_daily.json            # Daily aggregations

Event Types:
    - session_start: Chapter key, question count and quiz settings
    - interaction: One scored question
    - session_end: Score, accuracy and average time
"""

from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger

from learniverse.quiz.models import AnalyticsRecord, AnalyticsSummary


# =============================================================================
# Event Schemas
# =============================================================================


@dataclass
class InteractionEvent:
    """One scored question."""

    question_id: int
    question_type: str
    is_correct: bool
    time_spent_seconds: int
    answer: Any = None
    flagged: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class QuizReport:
    """Aggregated progress across daily summaries."""

    days: int = 0
    quizzes: int = 0
    questions_answered: int = 0
    correct: int = 0
    total_time_seconds: int = 0
    chapters: dict[str, dict[str, int]] = field(default_factory=dict)

    @property
    def accuracy_percent(self) -> float:
        if not self.questions_answered:
            return 0.0
        return round(self.correct / self.questions_answered * 100, 1)

    @property
    def average_time_seconds(self) -> int:
        if not self.questions_answered:
            return 0
        return int(self.total_time_seconds / self.questions_answered + 0.5)


# =============================================================================
# Analytics Logger
# =============================================================================


class QuizAnalyticsLogger:
    """
    JSONL logger for quiz attempts.

    Usage:
        analytics = QuizAnalyticsLogger(settings.telemetry_dir)
        analytics.start_session("8001-1", total_questions=14)
        analytics.log_interaction(InteractionEvent(...))
        analytics.end_session(summary)
    """

    def __init__(self, log_dir: Path | None = None):
        self.log_dir = Path(log_dir) if log_dir else Path.home() / ".learniverse" / "telemetry"
        self.sessions_dir = self.log_dir / "sessions"
        self.summaries_dir = self.log_dir / "summaries"

        self.session_id: str | None = None
        self.session_file: Path | None = None
        self.session_start: datetime | None = None
        self.chapter_key: str | None = None

        self.sessions_dir.mkdir(parents=True, exist_ok=True)
        self.summaries_dir.mkdir(parents=True, exist_ok=True)

    def start_session(
        self,
        chapter_key: str,
        total_questions: int,
        config: dict[str, Any] | None = None,
        started_at: datetime | None = None,
    ) -> str:
        """
        Open a new attempt file and write its start event.

        Args:
            chapter_key: Chapter the quiz belongs to
            total_questions: Number of questions in the quiz
            config: Quiz settings in effect (delay, seed, exclusions)
            started_at: When the attempt began, if earlier than now

        Returns:
            Session ID
        """
        self.session_id = str(uuid.uuid4())[:8]
        self.session_start = started_at.astimezone(timezone.utc) if started_at else datetime.now(timezone.utc)
        self.chapter_key = chapter_key

        date_str = self.session_start.strftime("%Y-%m-%d")
        self.session_file = self.sessions_dir / f"{date_str}_{chapter_key}_{self.session_id}.jsonl"

        self._write_event(
            "session_start",
            {
                "chapter_key": chapter_key,
                "total_questions": total_questions,
                "started_at": self.session_start.isoformat(),
                "config": config or {},
            },
        )
        logger.debug(f"Analytics session started: {self.session_id}")
        return self.session_id

    def log_interaction(self, event: InteractionEvent) -> None:
        if not self.session_id:
            logger.warning("log_interaction called without active session")
            return
        self._write_event("interaction", event.to_dict())

    def end_session(self, summary: AnalyticsSummary) -> dict[str, Any] | None:
        """
        Write the end event and fold the attempt into the daily summary.

        Returns:
            The session_end payload, or None without an active session
        """
        if not self.session_id or not self.session_start:
            logger.warning("end_session called without active session")
            return None

        ended_at = datetime.now(timezone.utc)
        payload = {
            "chapter_key": self.chapter_key,
            "started_at": self.session_start.isoformat(),
            "ended_at": ended_at.isoformat(),
            "duration_seconds": int((ended_at - self.session_start).total_seconds()),
            "score": summary.score,
            "total": summary.total,
            "answered": len(summary.records),
            "accuracy_percent": summary.accuracy_percent,
            "average_time_seconds": summary.average_time_seconds,
            "total_time_seconds": sum(r.time_spent_seconds for r in summary.records),
            "flagged": summary.flagged_count,
            "skipped": summary.skipped_count,
        }
        self._write_event("session_end", payload)
        self._update_daily_summary(payload)

        logger.debug(f"Analytics session ended: {self.session_id} ({summary.score}/{summary.total})")

        self.session_id = None
        self.session_file = None
        self.session_start = None
        self.chapter_key = None
        return payload

    def record_quiz(
        self,
        chapter_key: str,
        summary: AnalyticsSummary,
        question_types: dict[int, str] | None = None,
        flagged: set[int] | None = None,
        config: dict[str, Any] | None = None,
        started_at: datetime | None = None,
    ) -> dict[str, Any] | None:
        """
        Log a finished quiz in one go: start, one interaction per record, end.

        started_at is when the learner began; duration_seconds is measured
        from it.
        """
        question_types = question_types or {}
        flagged = flagged or set()
        self.start_session(chapter_key, summary.total, config, started_at)
        for record in summary.records:
            self.log_interaction(self._interaction(record, question_types, flagged))
        return self.end_session(summary)

    @staticmethod
    def _interaction(
        record: AnalyticsRecord,
        question_types: dict[int, str],
        flagged: set[int],
    ) -> InteractionEvent:
        return InteractionEvent(
            question_id=record.question_id,
            question_type=question_types.get(record.question_id, "unknown"),
            is_correct=record.correct,
            time_spent_seconds=record.time_spent_seconds,
            answer=record.answer,
            flagged=record.question_id in flagged,
        )

    def _write_event(self, event_type: str, payload: dict[str, Any]) -> None:
        if not self.session_file:
            return

        event = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "session": self.session_id,
            "type": event_type,
            **payload,
        }
        try:
            with open(self.session_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(event, default=str) + "\n")
        except OSError as e:
            logger.error(f"Failed to write analytics event: {e}")

    def _update_daily_summary(self, session: dict[str, Any]) -> None:
        """Update daily aggregation file."""
        summary_file = self.get_daily_summary_path(self.session_start)

        daily: dict[str, Any]
        if summary_file.exists():
            try:
                daily = json.loads(summary_file.read_text(encoding="utf-8"))
            except json.JSONDecodeError:
                logger.warning(f"Resetting corrupt daily summary {summary_file.name}")
                daily = self._create_empty_daily()
        else:
            daily = self._create_empty_daily()

        daily["sessions"].append(self.session_id)
        daily["questions_answered"] += session["answered"]
        daily["correct"] += session["score"]
        daily["total_time_seconds"] += session["total_time_seconds"]

        chapter = daily["chapters"].setdefault(session["chapter_key"], {"attempts": 0, "best_score": 0, "total": 0})
        chapter["attempts"] += 1
        chapter["best_score"] = max(chapter["best_score"], session["score"])
        chapter["total"] = session["total"]

        daily["last_updated"] = datetime.now(timezone.utc).isoformat()

        try:
            summary_file.write_text(json.dumps(daily, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to update daily summary: {e}")

    def _create_empty_daily(self) -> dict[str, Any]:
        start = self.session_start or datetime.now(timezone.utc)
        return {
            "date": start.strftime("%Y-%m-%d"),
            "sessions": [],
            "questions_answered": 0,
            "correct": 0,
            "total_time_seconds": 0,
            "chapters": {},
            "last_updated": datetime.now(timezone.utc).isoformat(),
        }

    def get_daily_summary_path(self, date: datetime | None = None) -> Path:
        d = date or datetime.now(timezone.utc)
        return self.summaries_dir / f"{d.strftime('%Y-%m-%d')}_daily.json"


# =============================================================================
# Report
# =============================================================================


def build_report(log_dir: Path) -> QuizReport:
    """Aggregate every daily summary under a telemetry directory."""
    report = QuizReport()
    summaries_dir = Path(log_dir) / "summaries"
    if not summaries_dir.exists():
        return report

    for path in sorted(summaries_dir.glob("*_daily.json")):
        try:
            daily = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning(f"Skipping unreadable summary {path.name}")
            continue

        report.days += 1
        report.quizzes += len(daily.get("sessions", []))
        report.questions_answered += daily.get("questions_answered", 0)
        report.correct += daily.get("correct", 0)
        report.total_time_seconds += daily.get("total_time_seconds", 0)

        for key, stats in daily.get("chapters", {}).items():
            merged = report.chapters.setdefault(key, {"attempts": 0, "best_score": 0, "total": 0})
            merged["attempts"] += stats.get("attempts", 0)
            merged["best_score"] = max(merged["best_score"], stats.get("best_score", 0))
            merged["total"] = stats.get("total", merged["total"])

    return report
