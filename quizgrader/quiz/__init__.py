"""
Quiz Processing Module.

Provides loading and validation of quiz definitions and submissions.
"""

from quizgrader.quiz.loader import QuizLoadError, load_quiz, load_submission
from quizgrader.quiz.validator import QuizValidationError, QuizValidator

__all__ = [
    "QuizLoadError",
    "QuizValidationError",
    "QuizValidator",
    "load_quiz",
    "load_submission",
]
