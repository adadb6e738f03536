"""
Quiz validation module.

Checks quiz definitions before they are published: the structural
problems that would stop grading, plus the authoring rules a quiz
editor enforces (titles, prompts, option counts, points).
"""

from quizgrader.grading.engine import check_definition
from quizgrader.models import QuestionDefinition, QuestionKind, QuizDefinition


class QuizValidationError(Exception):
    """Raised when quiz validation fails."""

    def __init__(self, issues: list[str]):
        self.issues = issues
        message = "Quiz validation failed:\n" + "\n".join(f"  - {i}" for i in issues)
        super().__init__(message)


class QuizValidator:
    """
    Validates quizzes for completeness and consistency.

    Checks:
    1. The quiz can be graded (see ``check_definition``)
    2. The quiz has a title and at least one question
    3. Every question has a prompt, positive points and sensible options
    4. Every question kind is one the grading engine supports
    """

    # Multiple choice questions need at least this many options
    MIN_CHOICE_OPTIONS = 2

    # True/false questions have exactly two options
    TRUE_FALSE_OPTIONS = 2

    def validate(self, quiz: QuizDefinition) -> tuple[bool, list[str]]:
        """
        Validate a quiz and return any issues found.

        Args:
            quiz: The quiz to validate.

        Returns:
            Tuple of (is_valid, list of issues).
        """
        issues: list[str] = []

        issues.extend(check_definition(quiz))

        issues.extend(self._validate_structure(quiz))

        for i, question in enumerate(quiz.questions, start=1):
            issues.extend(self._validate_question(question, i))

        return len(issues) == 0, issues

    def validate_or_raise(self, quiz: QuizDefinition) -> None:
        """
        Validate a quiz and raise if invalid.

        Args:
            quiz: The quiz to validate.

        Raises:
            QuizValidationError: If validation fails.
        """
        is_valid, issues = self.validate(quiz)
        if not is_valid:
            raise QuizValidationError(issues)

    def _validate_structure(self, quiz: QuizDefinition) -> list[str]:
        """Validate basic quiz structure."""
        issues: list[str] = []

        if not quiz.title.strip():
            issues.append("Quiz title is empty")

        if not quiz.questions:
            issues.append("Quiz has no questions")

        return issues

    def _validate_question(self, question: QuestionDefinition, index: int) -> list[str]:
        """Validate the authoring rules for a single question."""
        issues: list[str] = []
        prefix = f"Question {index} ({question.id})"

        if not question.text.strip():
            issues.append(f"{prefix}: Question text is empty")

        if question.points <= 0:
            issues.append(f"{prefix}: Points must be greater than 0")

        if not question.is_supported:
            issues.append(f"{prefix}: Unsupported question kind '{question.kind}'")
            return issues

        if question.kind is QuestionKind.MULTIPLE_CHOICE:
            if len(question.options) < self.MIN_CHOICE_OPTIONS:
                issues.append(
                    f"{prefix}: Multiple choice needs at least {self.MIN_CHOICE_OPTIONS} options"
                )
            if any(not o.label.strip() for o in question.options):
                issues.append(f"{prefix}: An answer option is empty")

        elif question.kind is QuestionKind.TRUE_FALSE:
            if len(question.options) != self.TRUE_FALSE_OPTIONS:
                issues.append(
                    f"{prefix}: True/false needs exactly {self.TRUE_FALSE_OPTIONS} options"
                )

        elif question.kind is QuestionKind.FREE_TEXT:
            expected = question.correct_options[0].label if question.correct_options else ""
            if not expected.strip():
                issues.append(f"{prefix}: Expected answer is empty")

        return issues
