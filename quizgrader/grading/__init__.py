"""
Grading Engine Module.

Pure, deterministic scoring of quiz submissions against answer keys.
"""

from quizgrader.grading.engine import (
    QuizDefinitionError,
    check_definition,
    grade,
    grade_question,
    normalize_text,
)

__all__ = [
    "QuizDefinitionError",
    "check_definition",
    "grade",
    "grade_question",
    "normalize_text",
]
