"""
Quiz engine for chapter comprehension quizzes.

Components:
- questions: Modular question type handlers (multiple choice, matching, word search, ...)
- session: Quiz session controller (navigation, flags, skips, timing, scoring)
- question_bank: Chapter-keyed question sets loaded from JSON
- session_store: Session persistence for save/resume functionality
- telemetry: JSONL analytics log
"""

from .models import AnalyticsRecord, AnalyticsSummary, MatchingItem, Question
from .questions import HANDLERS, QuestionType, get_handler
from .session import BlockingScheduler, ImmediateScheduler, QuizSession, QuizSessionError
from .question_bank import QuestionBank, chapter_key, load_questions
from .session_store import SessionState, SessionStore, create_session_state, restore_session

# Supported types derived from registered handlers
SUPPORTED_TYPES = [t.value for t in HANDLERS]

__all__ = [
    "AnalyticsRecord",
    "AnalyticsSummary",
    "MatchingItem",
    "Question",
    "QuestionType",
    "HANDLERS",
    "get_handler",
    "SUPPORTED_TYPES",
    "QuizSession",
    "QuizSessionError",
    "BlockingScheduler",
    "ImmediateScheduler",
    "QuestionBank",
    "chapter_key",
    "load_questions",
    "SessionStore",
    "SessionState",
    "create_session_state",
    "restore_session",
]
