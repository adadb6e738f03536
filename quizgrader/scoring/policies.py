"""
Repeat-attempt policies.

Decide whether a newly graded attempt replaces the score already stored
for the same user and quiz. The policy is chosen by configuration
(``RepeatAttemptPolicy``) and applied by the score store.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Callable, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from quizgrader.config import RepeatAttemptPolicy


class ScoreRecord(BaseModel):
    """The stored score of one user on one quiz."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1, description="Submitter id")

    quiz_id: str = Field(..., min_length=1, description="Quiz id")

    score: int = Field(..., ge=0, description="Points scored")

    completed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the recorded attempt was submitted",
    )


class AttemptStatus(str, Enum):
    """What happened to a submitted attempt."""

    FIRST_ATTEMPT = "first_attempt"
    IMPROVED = "improved"
    NOT_IMPROVED = "not_improved"
    ALREADY_COMPLETED = "already_completed"
    CREATOR = "creator"  # Set by the submission service, never by a policy


class AttemptOutcome(NamedTuple):
    """Result of applying a policy to a new attempt."""

    status: AttemptStatus
    recorded: bool
    previous: ScoreRecord | None


class RepeatAttemptRejected(Exception):
    """Raised when a repeat submission is refused by the REJECT policy."""

    def __init__(self, user_id: str, quiz_id: str, previous_score: int):
        self.user_id = user_id
        self.quiz_id = quiz_id
        self.previous_score = previous_score
        super().__init__(
            f"User '{user_id}' already completed quiz '{quiz_id}' "
            f"(recorded score: {previous_score})"
        )


def _keep_first(existing: ScoreRecord, candidate: ScoreRecord) -> AttemptOutcome:
    return AttemptOutcome(AttemptStatus.ALREADY_COMPLETED, recorded=False, previous=existing)


def _keep_best(existing: ScoreRecord, candidate: ScoreRecord) -> AttemptOutcome:
    if candidate.score > existing.score:
        return AttemptOutcome(AttemptStatus.IMPROVED, recorded=True, previous=existing)
    return AttemptOutcome(AttemptStatus.NOT_IMPROVED, recorded=False, previous=existing)


def _reject(existing: ScoreRecord, candidate: ScoreRecord) -> AttemptOutcome:
    raise RepeatAttemptRejected(existing.user_id, existing.quiz_id, existing.score)


_RESOLVERS: dict[RepeatAttemptPolicy, Callable[[ScoreRecord, ScoreRecord], AttemptOutcome]] = {
    RepeatAttemptPolicy.KEEP_FIRST: _keep_first,
    RepeatAttemptPolicy.KEEP_BEST: _keep_best,
    RepeatAttemptPolicy.REJECT: _reject,
}


def resolve_attempt(
    policy: RepeatAttemptPolicy,
    existing: ScoreRecord | None,
    candidate: ScoreRecord,
) -> AttemptOutcome:
    """
    Apply a repeat-attempt policy.

    Args:
        policy: The configured policy.
        existing: The stored record for this user and quiz, if any.
        candidate: The record the new attempt would store.

    Returns:
        AttemptOutcome telling whether the candidate must be stored.

    Raises:
        RepeatAttemptRejected: If the policy refuses repeat submissions.
    """
    if existing is None:
        return AttemptOutcome(AttemptStatus.FIRST_ATTEMPT, recorded=True, previous=None)
    return _RESOLVERS[policy](existing, candidate)
