"""
Score Recording Module.

Stores per-user quiz scores and applies the repeat-attempt policy.
"""

from quizgrader.scoring.policies import (
    AttemptOutcome,
    AttemptStatus,
    RepeatAttemptRejected,
    ScoreRecord,
    resolve_attempt,
)
from quizgrader.scoring.store import (
    InMemoryScoreStore,
    JsonFileScoreStore,
    ScoreStore,
    ScoreStoreError,
)

__all__ = [
    "AttemptOutcome",
    "AttemptStatus",
    "InMemoryScoreStore",
    "JsonFileScoreStore",
    "RepeatAttemptRejected",
    "ScoreRecord",
    "ScoreStore",
    "ScoreStoreError",
    "resolve_attempt",
]
