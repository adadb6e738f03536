"""
Quiz and submission loading.

Reads quiz definitions and submissions from JSON files, with the same
encoding fallback the rest of the tooling uses for user-supplied files.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from quizgrader.models import QuizDefinition, Submission, SubmissionError


class QuizLoadError(Exception):
    """
    Raised when a quiz or submission file cannot be loaded.

    Contains detailed information about the failure cause.
    """

    def __init__(self, message: str, file_path: str | Path, cause: Exception | None = None):
        self.file_path = str(file_path)
        self.cause = cause
        super().__init__(f"Failed to load '{file_path}': {message}")


# Encodings to try in order of preference (utf-8-sig also reads plain UTF-8)
ENCODINGS: tuple[str, ...] = ("utf-8-sig", "latin-1")


def load_quiz(file_path: Path | str) -> QuizDefinition:
    """
    Load a quiz definition from a JSON file.

    A quiz without an ``id`` takes the file name (without suffix) as id.

    Args:
        file_path: Path to the quiz file.

    Returns:
        The validated QuizDefinition.

    Raises:
        QuizLoadError: If the file cannot be read or is not a valid quiz.
    """
    path = Path(file_path)
    data = _read_json(path)

    if not isinstance(data, dict):
        raise QuizLoadError("Quiz file must contain a JSON object", path)
    if not data.get("id"):
        data["id"] = path.stem

    try:
        return QuizDefinition.model_validate(data)
    except ValidationError as e:
        raise QuizLoadError(f"Invalid quiz definition: {e}", path, cause=e) from e


def load_submission(file_path: Path | str) -> Submission:
    """
    Load a submission from a JSON file.

    Args:
        file_path: Path to the submission file.

    Returns:
        The parsed Submission.

    Raises:
        QuizLoadError: If the file cannot be read or is not a valid submission.
    """
    path = Path(file_path)
    data = _read_json(path)

    try:
        return Submission.from_payload(data)
    except SubmissionError as e:
        raise QuizLoadError(str(e), path, cause=e) from e


def _read_json(path: Path) -> Any:
    """
    Read and decode a JSON file.

    Raises:
        QuizLoadError: If the file is missing, undecodable or not JSON.
    """
    if not path.exists():
        raise QuizLoadError("File does not exist", path)

    if not path.is_file():
        raise QuizLoadError("Path is not a file", path)

    content = _read_with_encoding_fallback(path)

    if not content.strip():
        raise QuizLoadError("File is empty or contains only whitespace", path)

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise QuizLoadError(f"Invalid JSON: {e}", path, cause=e) from e


def _read_with_encoding_fallback(path: Path) -> str:
    """Read file content, trying each supported encoding in turn."""
    last_error: Exception | None = None

    for encoding in ENCODINGS:
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError as e:
            last_error = e
            continue

    raise QuizLoadError(
        f"Could not decode file with any supported encoding: {ENCODINGS}",
        path,
        cause=last_error,
    )
