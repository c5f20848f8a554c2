"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from learniverse.quiz.models import Question


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualHandle:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Holds scheduled callbacks until the test runs them."""

    def __init__(self):
        self.pending: list[ManualHandle] = []
        self.delays: list[float] = []

    def call_later(self, delay, callback):
        handle = ManualHandle(callback)
        self.pending.append(handle)
        self.delays.append(delay)
        return handle

    def run_pending(self) -> int:
        handles, self.pending = self.pending, []
        ran = 0
        for handle in handles:
            if not handle.cancelled:
                handle.callback()
                ran += 1
        return ran


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def bank_path(project_root):
    """The question bank shipped with the package."""
    return project_root / "learniverse" / "data" / "chapter_questions.json"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def mc_questions():
    """Three multiple choice questions, all with answer 'b'."""
    return [
        Question.from_dict(
            {
                "id": i,
                "type": "multiple-choice",
                "text": f"Question {i}?",
                "options": ["one", "two", "three", "four"],
                "answer": "b",
            }
        )
        for i in (1, 2, 3)
    ]


@pytest.fixture
def sample_matching_question():
    """Provide a sample matching question for testing."""
    return Question.from_dict(
        {
            "id": 12,
            "type": "matching",
            "text": "Match each material with its use:",
            "items": [
                {"item": "Metal", "match": "Durable for stop signs"},
                {"item": "Glass", "match": "Transparent for windows"},
                {"item": "Wood", "match": "Natural material for fences"},
            ],
        }
    )


@pytest.fixture
def sample_hidden_word_question():
    """Provide a small word search for testing."""
    return Question.from_dict(
        {
            "id": 4,
            "type": "hidden-word",
            "text": "Find the hidden words:",
            "grid": [
                "C A T X",
                "O D O G",
                "W X Y Z",
                "S U N Q",
            ],
            "words": ["CAT", "DOG", "SUN", "ZYX"],
        }
    )
