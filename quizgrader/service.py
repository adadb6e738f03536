"""
Submission service - the boundary between a request and the grading engine.

Grades every submission, then decides whether the score is recorded:
a quiz creator's own attempts are graded for feedback but never stored,
and repeat attempts go through the configured repeat-attempt policy.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field

from quizgrader.config import RepeatAttemptPolicy, Settings, get_settings
from quizgrader.grading import grade
from quizgrader.models import GradingResult, QuestionStatus, QuizDefinition, Submission
from quizgrader.scoring import AttemptStatus, ScoreStore

LOG = logging.getLogger(__name__)

_MESSAGES: dict[AttemptStatus, str] = {
    AttemptStatus.FIRST_ATTEMPT: "Score recorded",
    AttemptStatus.IMPROVED: "New best score recorded",
    AttemptStatus.NOT_IMPROVED: "Previous score was higher, it has been kept",
    AttemptStatus.ALREADY_COMPLETED: "You have already completed this quiz, your first score stands",
    AttemptStatus.CREATOR: "Score not counted: you created this quiz",
}


class SubmissionOutcome(BaseModel):
    """What a submission produced: the grading and what was recorded."""

    model_config = ConfigDict(frozen=True)

    result: GradingResult = Field(..., description="Grading of this attempt")

    status: AttemptStatus = Field(..., description="How the attempt was handled")

    recorded: bool = Field(..., description="Whether this attempt's score was stored")

    previous_score: int | None = Field(
        default=None,
        description="Score stored before this attempt, if any",
    )

    message: str = Field(..., description="Message for the submitter")


class SubmissionService:
    """
    Grades submissions and records scores.

    The repeat-attempt policy comes from settings unless one is passed in.
    """

    def __init__(
        self,
        store: ScoreStore,
        settings: Settings | None = None,
        policy: RepeatAttemptPolicy | None = None,
    ):
        """
        Initialize the submission service.

        Args:
            store: Where scores are recorded.
            settings: Configuration settings. Uses global settings if not provided.
            policy: Override the configured repeat-attempt policy.
        """
        self._settings = settings or get_settings()
        self._store = store
        self._policy = policy or self._settings.repeat_attempt_policy

    @property
    def policy(self) -> RepeatAttemptPolicy:
        """The repeat-attempt policy in effect."""
        return self._policy

    def submit(
        self,
        quiz: QuizDefinition,
        submitter_id: str,
        submission: Submission,
    ) -> SubmissionOutcome:
        """
        Grade a submission and record the score when appropriate.

        Args:
            quiz: The quiz being answered.
            submitter_id: Id of the submitting user.
            submission: The user's answers.

        Returns:
            SubmissionOutcome with the grading result and recording status.

        Raises:
            QuizDefinitionError: If the quiz cannot be graded.
            RepeatAttemptRejected: If the REJECT policy refuses a repeat attempt.
        """
        result = grade(quiz, submission)
        self._report_unsupported(quiz, result)

        if quiz.creator_id is not None and quiz.creator_id == submitter_id:
            LOG.info("Quiz %s graded for its creator %s, score not recorded", quiz.id, submitter_id)
            return SubmissionOutcome(
                result=result,
                status=AttemptStatus.CREATOR,
                recorded=False,
                message=_MESSAGES[AttemptStatus.CREATOR],
            )

        outcome = self._store.record_attempt(
            submitter_id, quiz.id, result.total_score, self._policy
        )
        previous_score = outcome.previous.score if outcome.previous else None

        LOG.info(
            "Quiz %s submitted by %s: %d/%d (%s)",
            quiz.id,
            submitter_id,
            result.total_score,
            result.max_points,
            outcome.status.value,
        )

        return SubmissionOutcome(
            result=result,
            status=outcome.status,
            recorded=outcome.recorded,
            previous_score=previous_score,
            message=_MESSAGES[outcome.status],
        )

    def _report_unsupported(self, quiz: QuizDefinition, result: GradingResult) -> None:
        """Warn about questions scored zero because their kind is unknown."""
        for question_result in result.question_results:
            if question_result.status is QuestionStatus.UNSUPPORTED_KIND:
                LOG.warning(
                    "Quiz %s question %s has unsupported kind %r and was scored 0",
                    quiz.id,
                    question_result.question_id,
                    question_result.kind,
                )
