"""
Answer-key redaction.

Builds the views of quizzes and results that are safe to show someone
who has not yet submitted: no correctness flags, and no options at all
for free text questions (the only option there is the expected answer).
"""

from pydantic import BaseModel, ConfigDict, Field

from quizgrader.models import GradingResult, QuestionKind, QuizDefinition


class PublicOption(BaseModel):
    """An answer option without its correctness flag."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str


class PublicQuestion(BaseModel):
    """A question as shown to a quiz taker."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: str
    text: str
    points: int
    options: tuple[PublicOption, ...] | None = Field(
        default=None,
        description="Selectable options; None for free text questions",
    )


class PublicQuiz(BaseModel):
    """A quiz as shown to a quiz taker."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    creator_id: str | None
    max_points: int
    questions: tuple[PublicQuestion, ...]


def public_quiz_view(quiz: QuizDefinition) -> PublicQuiz:
    """Return the quiz with its answer keys stripped."""
    questions = []
    for question in quiz.questions:
        kind = question.kind.value if isinstance(question.kind, QuestionKind) else question.kind
        options = None
        if question.kind is not QuestionKind.FREE_TEXT:
            options = tuple(PublicOption(id=o.id, label=o.label) for o in question.options)
        questions.append(
            PublicQuestion(
                id=question.id,
                kind=kind,
                text=question.text,
                points=question.points,
                options=options,
            )
        )

    return PublicQuiz(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        creator_id=quiz.creator_id,
        max_points=quiz.max_points,
        questions=tuple(questions),
    )


def redact_result(result: GradingResult) -> GradingResult:
    """Return the result with every answer key label removed."""
    return result.model_copy(
        update={
            "question_results": tuple(
                r.model_copy(update={"correct_labels": ()}) for r in result.question_results
            )
        }
    )
