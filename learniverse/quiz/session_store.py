"""
Session state persistence for chapter quizzes.

Enables save/resume so a learner can leave a quiz and continue later.
Sessions are stored as JSON files in ~/.learniverse/sessions/

Hidden-word answers are stored with the cells of every found word, so a
resumed word search highlights exactly what was found before.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from learniverse.quiz.models import AnalyticsRecord, Question
from learniverse.quiz.session import QuizSession


@dataclass
class SessionState:
    """Serializable quiz session state."""

    session_id: str
    chapter_key: str
    started_at: str  # ISO format
    last_saved_at: str  # ISO format

    # Progress tracking
    current_index: int = 0
    question_ids: list[int] = field(default_factory=list)
    answers: dict[str, Any] = field(default_factory=dict)  # JSON keys are strings
    flagged: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    analytics: list[dict] = field(default_factory=list)

    # Expiry - sessions older than this are considered stale
    expiry_hours: int = 24

    def is_expired(self) -> bool:
        """Check if session has expired."""
        last_saved = datetime.fromisoformat(self.last_saved_at)
        return datetime.now() - last_saved > timedelta(hours=self.expiry_hours)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionState":
        """Create from dictionary."""
        return cls(**data)


class SessionStore:
    """
    Manages session persistence.

    Sessions are stored as JSON files with naming: {session_id}.json
    Only the most recent session is typically used for resume.
    """

    def __init__(self, session_dir: Path, expiry_hours: int = 24):
        self.session_dir = Path(session_dir)
        self.expiry_hours = expiry_hours
        self.session_dir.mkdir(parents=True, exist_ok=True)

    def save(self, state: SessionState) -> Path:
        """Save session state to disk."""
        state.last_saved_at = datetime.now().isoformat()
        filepath = self.session_dir / f"{state.session_id}.json"

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(state.to_dict(), f, indent=2)

        logger.debug(f"Saved quiz session {state.session_id} to {filepath}")
        return filepath

    def load(self, session_id: str) -> Optional[SessionState]:
        """Load a specific session by ID."""
        filepath = self.session_dir / f"{session_id}.json"
        if not filepath.exists():
            return None
        return self._read(filepath)

    def get_latest(self) -> Optional[SessionState]:
        """Get the most recent non-expired session."""
        sessions = self.list_sessions()
        return sessions[0] if sessions else None

    def delete(self, session_id: str) -> bool:
        """Delete a session file."""
        filepath = self.session_dir / f"{session_id}.json"
        if filepath.exists():
            filepath.unlink()
            return True
        return False

    def cleanup_expired(self) -> int:
        """Remove expired and corrupted session files."""
        removed = 0
        for filepath in self.session_dir.glob("*.json"):
            state = self._read(filepath)
            if state is None or state.is_expired():
                filepath.unlink()
                removed += 1
        return removed

    def list_sessions(self) -> list[SessionState]:
        """List all non-expired sessions, newest first."""
        sessions = []
        for filepath in self.session_dir.glob("*.json"):
            state = self._read(filepath)
            if state is not None and not state.is_expired():
                sessions.append(state)
        return sorted(sessions, key=lambda x: x.last_saved_at, reverse=True)

    def _read(self, filepath: Path) -> Optional[SessionState]:
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            return SessionState.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable session file {filepath.name}: {e}")
            return None


def create_session_state(
    chapter_key: str,
    session: QuizSession,
    session_id: Optional[str] = None,
    expiry_hours: int = 24,
    started_at: Optional[datetime] = None,
) -> SessionState:
    """Snapshot a live quiz session. started_at defaults to now."""
    now = datetime.now().isoformat()
    return SessionState(
        session_id=session_id or str(uuid.uuid4())[:8],
        chapter_key=chapter_key,
        started_at=started_at.isoformat() if started_at else now,
        last_saved_at=now,
        current_index=session.current_index,
        question_ids=[q.id for q in session.questions],
        answers={str(qid): value for qid, value in session.answers.items()},
        flagged=sorted(session.flagged),
        skipped=sorted(session.skipped),
        analytics=[record.to_dict() for record in session.analytics],
        expiry_hours=expiry_hours,
    )


def restore_session(state: SessionState, questions: list[Question], **session_kwargs: Any) -> QuizSession:
    """
    Rebuild a QuizSession from saved state.

    Questions that no longer exist in the bank are dropped from the saved
    answers, flags, skips and analytics.
    """
    session = QuizSession(questions, **session_kwargs)
    known = {q.id for q in session.questions}

    for key, value in state.answers.items():
        try:
            qid = int(key)
        except ValueError:
            continue
        if qid in known:
            session.answers[qid] = value
    session.flagged = {qid for qid in state.flagged if qid in known}
    session.skipped = {qid for qid in state.skipped if qid in known}
    session.analytics = [
        record
        for record in (AnalyticsRecord.from_dict(d) for d in state.analytics)
        if record.question_id in known
    ]
    if session.questions:
        session.current_index = min(max(state.current_index, 0), len(session.questions) - 1)
    return session
