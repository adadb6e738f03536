"""
Pydantic models for the Quiz Grader system.

These models define the schemas for:
- Quiz definitions (questions, answer options, answer keys)
- Submissions (a user's answers, keyed by question id)
- Grading results with per-question outcomes

Quiz definitions accept the field names used by the quiz authoring API
(``content``, ``answers``, ``isCorrect``...) as well as the canonical ones.
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)


# ==============================================================================
# Quiz Definition Models
# ==============================================================================


class QuestionKind(str, Enum):
    """The closed set of question kinds the grading engine understands."""

    TRUE_FALSE = "TRUE_FALSE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    FREE_TEXT = "FREE_TEXT"


# Lookup keys are lower-cased with dashes and spaces turned into underscores
_KIND_ALIASES: dict[str, QuestionKind] = {
    "true_false": QuestionKind.TRUE_FALSE,
    "binarychoice": QuestionKind.TRUE_FALSE,
    "binary_choice": QuestionKind.TRUE_FALSE,
    "multiple_choice": QuestionKind.MULTIPLE_CHOICE,
    "mcq": QuestionKind.MULTIPLE_CHOICE,
    "multiselect": QuestionKind.MULTIPLE_CHOICE,
    "multi_select": QuestionKind.MULTIPLE_CHOICE,
    "free_text": QuestionKind.FREE_TEXT,
    "text": QuestionKind.FREE_TEXT,
    "freetext": QuestionKind.FREE_TEXT,
}

# Weights used when a question does not declare its points
DEFAULT_POINTS: dict[QuestionKind, int] = {
    QuestionKind.TRUE_FALSE: 1,
    QuestionKind.MULTIPLE_CHOICE: 3,
    QuestionKind.FREE_TEXT: 5,
}

_OPTION_KEYS = ("options", "answers", "answerOptions")


def coerce_kind(value: Any) -> Any:
    """Map a kind name or alias to QuestionKind, leaving unknown names as-is."""
    if isinstance(value, QuestionKind) or not isinstance(value, str):
        return value
    key = value.strip().lower().replace("-", "_").replace(" ", "_")
    return _KIND_ALIASES.get(key, value)


class AnswerOption(BaseModel):
    """
    A selectable answer for a question.

    For free text questions the option flagged correct holds the
    canonical expected text.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Option id, unique within its question")

    label: str = Field(
        ...,
        validation_alias=AliasChoices("label", "content", "text"),
        description="Display text of the option",
    )

    is_correct: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_correct", "isCorrect"),
        description="Whether this option is part of the answer key",
    )


class QuestionDefinition(BaseModel):
    """
    A single question with its answer key and point value.

    ``kind`` is a QuestionKind when recognised; any other string is kept
    verbatim so that a quiz holding a kind this version does not know can
    still be graded (that question scores zero).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Question id, unique within the quiz")

    kind: QuestionKind | str = Field(
        ...,
        validation_alias=AliasChoices("kind", "type"),
        description="Question kind",
    )

    text: str = Field(
        default="",
        validation_alias=AliasChoices("text", "content", "prompt"),
        description="The question prompt",
    )

    points: int = Field(..., ge=0, description="Points awarded for a correct answer")

    options: tuple[AnswerOption, ...] = Field(
        default=(),
        validation_alias=AliasChoices(*_OPTION_KEYS),
        description="Answer options in display order",
    )

    @model_validator(mode="before")
    @classmethod
    def fill_defaults(cls, data: Any) -> Any:
        """Default points by kind and give unnamed options positional ids."""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        kind = coerce_kind(data.get("kind", data.get("type")))
        if data.get("points") is None:
            data["points"] = DEFAULT_POINTS.get(kind, 0) if isinstance(kind, QuestionKind) else 0

        question_id = data.get("id") or "q"
        for key in _OPTION_KEYS:
            options = data.get(key)
            if not isinstance(options, (list, tuple)):
                continue
            filled = []
            for index, option in enumerate(options, start=1):
                if isinstance(option, dict) and not option.get("id"):
                    option = {**option, "id": f"{question_id}-a{index}"}
                filled.append(option)
            data[key] = filled
        return data

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        """Accept legacy and descriptive kind names."""
        return coerce_kind(v)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_supported(self) -> bool:
        """Whether the grading engine knows how to match this kind."""
        return isinstance(self.kind, QuestionKind)

    @property
    def correct_options(self) -> tuple[AnswerOption, ...]:
        """Options flagged correct, in display order."""
        return tuple(o for o in self.options if o.is_correct)


class QuizDefinition(BaseModel):
    """
    A quiz: metadata plus its ordered questions.

    Question order is display order only and never affects scoring.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Quiz identifier")

    title: str = Field(default="", description="Title of the quiz")

    description: str = Field(default="", description="Optional description")

    creator_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("creator_id", "creatorId"),
        description="User id of the quiz author",
    )

    is_public: bool = Field(
        default=True,
        validation_alias=AliasChoices("is_public", "isPublic"),
        description="Whether the quiz is listed publicly",
    )

    questions: tuple[QuestionDefinition, ...] = Field(
        default=(),
        description="Questions in display order",
    )

    @model_validator(mode="before")
    @classmethod
    def assign_question_ids(cls, data: Any) -> Any:
        """Give unnamed questions positional ids (q1, q2, ...)."""
        if not isinstance(data, dict):
            return data
        questions = data.get("questions")
        if not isinstance(questions, (list, tuple)):
            return data

        filled = []
        for index, question in enumerate(questions, start=1):
            if isinstance(question, dict) and not question.get("id"):
                question = {**question, "id": f"q{index}"}
            filled.append(question)
        return {**data, "questions": filled}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def max_points(self) -> int:
        """Sum of the points of every question."""
        return sum(q.points for q in self.questions)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def question_count(self) -> int:
        """Return the number of questions."""
        return len(self.questions)


# ==============================================================================
# Submission Models
# ==============================================================================


class SubmissionError(Exception):
    """Raised when a submission payload is not well-formed."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


# A selected option id, several selected ids, or free text
AnswerValue = str | tuple[str, ...]


class Submission(BaseModel):
    """
    A user's answers for one attempt, keyed by question id.

    Only the shape is validated here. Whether the ids and text make
    sense for a given question is decided by the grading engine.
    """

    model_config = ConfigDict(frozen=True)

    answers: dict[str, AnswerValue | None] = Field(
        default_factory=dict,
        description="Answer per question id; absent questions are unanswered",
    )

    def answer_for(self, question_id: str) -> AnswerValue | None:
        """Return the answer given for a question, or None when unanswered."""
        return self.answers.get(question_id)

    @classmethod
    def from_entries(cls, entries: Sequence[Any]) -> "Submission":
        """
        Build a submission from a list of per-question entries.

        Each entry is a mapping with ``questionId`` and one of
        ``answerIds`` (list), ``answerId`` (str) or ``freeText`` (str).

        Raises:
            SubmissionError: If an entry is not a mapping or lacks a question id.
        """
        answers: dict[str, Any] = {}
        for index, entry in enumerate(entries):
            if not isinstance(entry, Mapping):
                raise SubmissionError(f"Answer entry {index} must be an object")

            question_id = entry.get("questionId") or entry.get("question_id")
            if not question_id:
                raise SubmissionError(f"Answer entry {index} is missing questionId")

            if entry.get("answerIds") is not None:
                answers[question_id] = entry["answerIds"]
            elif entry.get("answerId") is not None:
                answers[question_id] = entry["answerId"]
            elif entry.get("freeText") is not None:
                answers[question_id] = entry["freeText"]

        return cls._build(answers)

    @classmethod
    def from_payload(cls, payload: Any) -> "Submission":
        """
        Build a submission from a decoded request body.

        Accepts ``{"answers": {...}}``, ``{"answers": [...]}``, a bare
        mapping of question id to answer, or a bare entry list.

        Raises:
            SubmissionError: If the payload has none of these shapes.
        """
        if isinstance(payload, Mapping) and "answers" in payload:
            payload = payload["answers"]

        if isinstance(payload, (list, tuple)):
            return cls.from_entries(payload)
        if isinstance(payload, Mapping):
            return cls._build(dict(payload))

        raise SubmissionError(
            f"Submission must be an object or a list, got {type(payload).__name__}"
        )

    @classmethod
    def _build(cls, answers: dict[str, Any]) -> "Submission":
        try:
            return cls(answers=answers)
        except ValidationError as e:
            raise SubmissionError(f"Malformed answers: {e}", cause=e) from e


# ==============================================================================
# Grading Result Models
# ==============================================================================


class QuestionStatus(str, Enum):
    """Outcome of grading a single question."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNANSWERED = "unanswered"
    UNSUPPORTED_KIND = "unsupported_kind"


class QuestionResult(BaseModel):
    """
    The grading outcome for one question.

    Carries the labels needed for feedback display: the answer key and
    what the user actually selected or typed.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    question_id: str = Field(..., description="Id of the graded question")

    kind: str = Field(..., description="Kind of the question as stored")

    status: QuestionStatus = Field(..., description="Grading outcome")

    points: int = Field(..., ge=0, description="Points the question is worth")

    points_awarded: int = Field(..., ge=0, description="Either 0 or points")

    correct_labels: tuple[str, ...] = Field(
        default=(),
        description="Labels of the answer key",
    )

    submitted_labels: tuple[str, ...] = Field(
        default=(),
        description="Labels (or raw ids / text) the user submitted",
    )

    @model_validator(mode="after")
    def validate_all_or_nothing(self) -> "QuestionResult":
        """A question awards either nothing or its full points."""
        expected = self.points if self.status is QuestionStatus.CORRECT else 0
        if self.points_awarded != expected:
            raise ValueError(
                f"Question {self.question_id} awarded {self.points_awarded} points, "
                f"expected {expected} for status {self.status.value}"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_correct(self) -> bool:
        """Whether the question was answered correctly."""
        return self.status is QuestionStatus.CORRECT


class GradingResult(BaseModel):
    """
    Complete grading result for one submission.

    Totals and percentage are derived from the per-question results so
    they cannot disagree with them. The result holds no timestamp or
    generated id: grading identical inputs gives equal results.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    quiz_id: str = Field(..., description="Id of the graded quiz")

    question_results: tuple[QuestionResult, ...] = Field(
        default=(),
        description="One result per question, in quiz order",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_score(self) -> int:
        """Sum of the points awarded."""
        return sum(r.points_awarded for r in self.question_results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def max_points(self) -> int:
        """Sum of the points of every question."""
        return sum(r.points for r in self.question_results)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percentage(self) -> int:
        """Score as a whole percentage, rounded half up; 0 for a pointless quiz."""
        if self.max_points == 0:
            return 0
        ratio = Decimal(100 * self.total_score) / Decimal(self.max_points)
        return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def correct_count(self) -> int:
        """Number of questions answered correctly."""
        return sum(1 for r in self.question_results if r.is_correct)

    def result_for(self, question_id: str) -> QuestionResult:
        """Return the result for a question id."""
        for result in self.question_results:
            if result.question_id == question_id:
                return result
        raise KeyError(question_id)
