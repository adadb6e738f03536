"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Generator

import pytest

from quizgrader.config import RepeatAttemptPolicy, Settings, get_settings
from quizgrader.models import QuizDefinition, Submission
from quizgrader.scoring import InMemoryScoreStore


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ==============================================================================
# Sample Quiz Fixtures
# ==============================================================================


@pytest.fixture
def sample_quiz_data() -> dict[str, Any]:
    """General knowledge quiz with one question of each kind."""
    return {
        "id": "culture",
        "title": "General Knowledge Quiz",
        "description": "Test your general knowledge!",
        "creator_id": "alice",
        "questions": [
            {
                "id": "eiffel",
                "kind": "TRUE_FALSE",
                "text": "The Eiffel Tower is 330 metres tall.",
                "points": 1,
                "options": [
                    {"id": "vrai", "label": "Vrai", "is_correct": True},
                    {"id": "faux", "label": "Faux", "is_correct": False},
                ],
            },
            {
                "id": "borders",
                "kind": "MULTIPLE_CHOICE",
                "text": "Which countries border France?",
                "points": 3,
                "options": [
                    {"id": "es", "label": "Espagne", "is_correct": True},
                    {"id": "de", "label": "Allemagne", "is_correct": True},
                    {"id": "pl", "label": "Pologne", "is_correct": False},
                    {"id": "it", "label": "Italie", "is_correct": True},
                ],
            },
            {
                "id": "capital",
                "kind": "FREE_TEXT",
                "text": "What is the capital of Australia?",
                "points": 5,
                "options": [
                    {"id": "canberra", "label": "Canberra", "is_correct": True},
                ],
            },
        ],
    }


@pytest.fixture
def sample_quiz(sample_quiz_data: dict[str, Any]) -> QuizDefinition:
    """Validated general knowledge quiz (max 9 points)."""
    return QuizDefinition.model_validate(sample_quiz_data)


@pytest.fixture
def perfect_submission() -> Submission:
    """Submission answering every sample question correctly."""
    return Submission(
        answers={
            "eiffel": "vrai",
            "borders": ["it", "es", "de"],
            "capital": "Canberra",
        }
    )


@pytest.fixture
def partial_submission() -> Submission:
    """Submission with the multiple choice question missing one country."""
    return Submission(
        answers={
            "eiffel": "vrai",
            "borders": ["es", "de"],
            "capital": "  canberra ",
        }
    )


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Create test settings pointing at a temporary score file."""
    return Settings(
        repeat_attempt_policy=RepeatAttemptPolicy.KEEP_FIRST,
        score_store_path=temp_dir / "scores.json",
        default_user_id="tester",
        leaderboard_limit=10,
        log_level="DEBUG",
    )


@pytest.fixture
def cli_env(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point the CLI's cached settings at a temporary score file."""
    store_path = temp_dir / "cli-scores.json"
    monkeypatch.setenv("QUIZGRADER_SCORE_STORE_PATH", str(store_path))
    monkeypatch.setenv("QUIZGRADER_DEFAULT_USER_ID", "bob")
    get_settings.cache_clear()
    yield store_path
    get_settings.cache_clear()


# ==============================================================================
# Store Fixtures
# ==============================================================================


@pytest.fixture
def memory_store() -> InMemoryScoreStore:
    """Empty in-memory score store."""
    return InMemoryScoreStore()


# ==============================================================================
# File Fixtures
# ==============================================================================


@pytest.fixture
def quiz_file(temp_dir: Path, sample_quiz_data: dict[str, Any]) -> Path:
    """Sample quiz written as JSON."""
    file_path = temp_dir / "culture.json"
    file_path.write_text(json.dumps(sample_quiz_data), encoding="utf-8")
    return file_path


@pytest.fixture
def answers_file(temp_dir: Path) -> Path:
    """Perfect answers for the sample quiz, in request-body form."""
    file_path = temp_dir / "answers.json"
    file_path.write_text(
        json.dumps(
            {
                "answers": {
                    "eiffel": "vrai",
                    "borders": ["es", "de", "it"],
                    "capital": "canberra",
                }
            }
        ),
        encoding="utf-8",
    )
    return file_path
