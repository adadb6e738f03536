"""
Grading engine - scores a submission against a quiz's answer keys.

Grading is a pure, single-pass transform: no I/O, no clock, no shared
state. Each question awards all of its points or none of them.

Matching rules per question kind:
- TRUE_FALSE: exactly one distinct option id selected, and it is the correct one
- MULTIPLE_CHOICE: the selected ids equal the set of correct ids
- FREE_TEXT: the text equals the canonical answer, ignoring case and spacing

Anomalies in the submission (missing answers, unknown ids, empty text,
unsupported kinds) score zero. Only a quiz definition that cannot be
interpreted raises QuizDefinitionError.
"""

from typing import Callable, Mapping

from quizgrader.models import (
    AnswerValue,
    GradingResult,
    QuestionDefinition,
    QuestionKind,
    QuestionResult,
    QuestionStatus,
    QuizDefinition,
    Submission,
)


class QuizDefinitionError(Exception):
    """Raised when a quiz definition is too broken to grade."""

    def __init__(self, errors: list[str], quiz_id: str | None = None):
        self.errors = errors
        self.quiz_id = quiz_id
        message = "Quiz definition is invalid:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(message)


# A matcher returns (is_correct, submitted labels for feedback)
Matcher = Callable[[QuestionDefinition, AnswerValue], tuple[bool, tuple[str, ...]]]


def normalize_text(text: str) -> str:
    """Trim, collapse whitespace runs to one space and casefold."""
    return " ".join(text.split()).casefold()


def _selected_ids(answer: AnswerValue) -> tuple[str, ...]:
    """Submitted option ids, duplicates removed, first occurrence order kept."""
    values = (answer,) if isinstance(answer, str) else answer
    return tuple(dict.fromkeys(values))


def _option_labels(question: QuestionDefinition, option_ids: tuple[str, ...]) -> tuple[str, ...]:
    """Labels for the given ids; ids matching no option are returned as-is."""
    labels = {o.id: o.label for o in question.options}
    return tuple(labels.get(option_id, option_id) for option_id in option_ids)


def _match_true_false(question: QuestionDefinition, answer: AnswerValue) -> tuple[bool, tuple[str, ...]]:
    selected = _selected_ids(answer)
    (correct,) = question.correct_options
    is_correct = len(selected) == 1 and selected[0] == correct.id
    return is_correct, _option_labels(question, selected)


def _match_multiple_choice(question: QuestionDefinition, answer: AnswerValue) -> tuple[bool, tuple[str, ...]]:
    selected = _selected_ids(answer)
    correct_ids = {o.id for o in question.correct_options}
    return set(selected) == correct_ids, _option_labels(question, selected)


def _match_free_text(question: QuestionDefinition, answer: AnswerValue) -> tuple[bool, tuple[str, ...]]:
    if isinstance(answer, str):
        text = answer
    elif len(answer) == 1:
        text = answer[0]
    else:
        return False, tuple(answer)

    (canonical,) = question.correct_options
    submitted = normalize_text(text)
    # Empty text never matches, not even an empty canonical answer
    is_correct = bool(submitted) and submitted == normalize_text(canonical.label)
    return is_correct, (text,)


_MATCHERS: dict[QuestionKind, Matcher] = {
    QuestionKind.TRUE_FALSE: _match_true_false,
    QuestionKind.MULTIPLE_CHOICE: _match_multiple_choice,
    QuestionKind.FREE_TEXT: _match_free_text,
}

_unmatched_kinds = set(QuestionKind) - set(_MATCHERS)
if _unmatched_kinds:
    raise RuntimeError(f"No matcher registered for question kinds: {sorted(_unmatched_kinds)}")


def check_definition(quiz: QuizDefinition) -> list[str]:
    """
    List the structural problems that make a quiz impossible to grade.

    Args:
        quiz: The quiz definition to inspect.

    Returns:
        Problems found, empty when the quiz can be graded.
    """
    errors: list[str] = []
    seen_ids: set[str] = set()

    for index, question in enumerate(quiz.questions, start=1):
        prefix = f"Question {index} ({question.id})"

        if question.id in seen_ids:
            errors.append(f"{prefix}: Duplicate question id")
        seen_ids.add(question.id)

        option_ids = [o.id for o in question.options]
        if len(option_ids) != len(set(option_ids)):
            errors.append(f"{prefix}: Duplicate answer option ids")

        correct_count = len(question.correct_options)
        kind = question.kind

        if kind in (QuestionKind.TRUE_FALSE, QuestionKind.MULTIPLE_CHOICE) and not question.options:
            errors.append(f"{prefix}: Choice question has no answer options")
        elif kind is QuestionKind.TRUE_FALSE and correct_count != 1:
            errors.append(
                f"{prefix}: True/false question needs exactly one correct option, found {correct_count}"
            )
        elif kind is QuestionKind.MULTIPLE_CHOICE and correct_count == 0:
            errors.append(f"{prefix}: Multiple choice question has no correct option")
        elif kind is QuestionKind.FREE_TEXT and correct_count != 1:
            errors.append(
                f"{prefix}: Free text question needs exactly one canonical answer, found {correct_count}"
            )

    return errors


def grade_question(question: QuestionDefinition, answer: AnswerValue | None) -> QuestionResult:
    """
    Grade one question.

    Args:
        question: A structurally valid question definition.
        answer: The submitted answer, or None when unanswered.

    Returns:
        QuestionResult awarding all or none of the question's points.
    """
    if not isinstance(question.kind, QuestionKind):
        submitted = () if answer is None else _selected_ids(answer)
        return QuestionResult(
            question_id=question.id,
            kind=question.kind,
            status=QuestionStatus.UNSUPPORTED_KIND,
            points=question.points,
            points_awarded=0,
            submitted_labels=submitted,
        )

    correct_labels = tuple(o.label for o in question.correct_options)

    if answer is None:
        status = QuestionStatus.UNANSWERED
        submitted = ()
    else:
        is_correct, submitted = _MATCHERS[question.kind](question, answer)
        status = QuestionStatus.CORRECT if is_correct else QuestionStatus.INCORRECT

    return QuestionResult(
        question_id=question.id,
        kind=question.kind.value,
        status=status,
        points=question.points,
        points_awarded=question.points if status is QuestionStatus.CORRECT else 0,
        correct_labels=correct_labels,
        submitted_labels=submitted,
    )


def grade(
    quiz: QuizDefinition,
    submission: Submission | Mapping[str, AnswerValue | None],
) -> GradingResult:
    """
    Grade a submission against a quiz.

    Args:
        quiz: The quiz definition, answer keys included.
        submission: The user's answers, as a Submission or a plain mapping
            of question id to answer (validated into a Submission).

    Returns:
        GradingResult with one QuestionResult per question, in quiz order.

    Raises:
        QuizDefinitionError: If the quiz definition is structurally invalid.
    """
    errors = check_definition(quiz)
    if errors:
        raise QuizDefinitionError(errors, quiz_id=quiz.id)

    if not isinstance(submission, Submission):
        submission = Submission(answers=dict(submission))
    answers = submission.answers

    return GradingResult(
        quiz_id=quiz.id,
        question_results=tuple(grade_question(q, answers.get(q.id)) for q in quiz.questions),
    )
