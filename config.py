"""
Configuration settings for the Learniverse quiz engine.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are read with the LEARNIVERSE_ prefix (e.g. LEARNIVERSE_LOG_LEVEL).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DATA_DIR = Path(__file__).parent / "learniverse" / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LEARNIVERSE_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Question Bank
    # ========================================
    question_bank_path: Path = Field(
        default=PACKAGE_DATA_DIR / "chapter_questions.json",
        description="JSON file mapping '<storyId>-<chapterNumber>' to question lists",
    )
    excluded_question_types: str = Field(
        default="",
        description="Comma-separated question types dropped when a chapter is loaded",
    )

    # ========================================
    # Quiz Session
    # ========================================
    feedback_delay_seconds: float = Field(
        default=1.5,
        ge=0.0,
        description="Seconds feedback stays on screen before auto-advancing",
    )
    shuffle_seed: int | None = Field(
        default=None,
        description="Optional seed mixed into per-question shuffles",
    )

    # ─── Persistence ────────────────────────────────────────────────────────────
    session_dir: Path = Field(
        default=Path.home() / ".learniverse" / "sessions",
        description="Directory holding saved (resumable) quiz sessions",
    )
    session_expiry_hours: int = Field(
        default=24,
        ge=1,
        description="Saved sessions older than this are considered stale",
    )
    telemetry_dir: Path = Field(
        default=Path.home() / ".learniverse" / "telemetry",
        description="Directory for JSONL quiz analytics",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="INFO",
        description="Log level for the loguru stderr sink",
    )

    def get_excluded_types(self) -> set[str]:
        """Parse the excluded question types into a set."""
        return {t.strip().lower() for t in self.excluded_question_types.split(",") if t.strip()}

    def get_quiz_config(self) -> dict[str, object]:
        """Get quiz session configuration as a dictionary."""
        return {
            "feedback_delay_seconds": self.feedback_delay_seconds,
            "shuffle_seed": self.shuffle_seed,
            "excluded_question_types": sorted(self.get_excluded_types()),
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
