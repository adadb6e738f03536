"""
Leaderboards built from recorded scores.

The global board sums each user's recorded scores; the per-quiz board
ranks the recorded scores of a single quiz.
"""

from collections import defaultdict
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from quizgrader.scoring import ScoreRecord, ScoreStore


class LeaderboardEntry(BaseModel):
    """One row of the global leaderboard."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(..., ge=1)
    user_id: str
    total_score: int = Field(..., ge=0)
    quizzes_completed: int = Field(..., ge=0)


class QuizLeaderboardEntry(BaseModel):
    """One row of a quiz's leaderboard."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(..., ge=1)
    user_id: str
    score: int = Field(..., ge=0)
    completed_at: datetime


def global_leaderboard(store: ScoreStore, limit: int = 100) -> list[LeaderboardEntry]:
    """
    Rank users by the sum of their recorded scores.

    Ties are ordered by user id so the ranking is stable.

    Args:
        store: Score store to read from.
        limit: Maximum number of rows.

    Returns:
        Leaderboard rows, best first.
    """
    totals: dict[str, int] = defaultdict(int)
    counts: dict[str, int] = defaultdict(int)
    for record in store.all_scores():
        totals[record.user_id] += record.score
        counts[record.user_id] += 1

    ranked = sorted(totals, key=lambda user_id: (-totals[user_id], user_id))[:limit]

    return [
        LeaderboardEntry(
            rank=rank,
            user_id=user_id,
            total_score=totals[user_id],
            quizzes_completed=counts[user_id],
        )
        for rank, user_id in enumerate(ranked, start=1)
    ]


def quiz_leaderboard(store: ScoreStore, quiz_id: str, limit: int = 100) -> list[QuizLeaderboardEntry]:
    """
    Rank the recorded scores of one quiz.

    Equal scores are ordered by completion time, earliest first.

    Args:
        store: Score store to read from.
        quiz_id: Quiz to rank.
        limit: Maximum number of rows.

    Returns:
        Leaderboard rows, best first.
    """
    records = sorted(
        store.scores_for_quiz(quiz_id),
        key=lambda r: (-r.score, r.completed_at, r.user_id),
    )[:limit]

    return [
        QuizLeaderboardEntry(
            rank=rank,
            user_id=record.user_id,
            score=record.score,
            completed_at=record.completed_at,
        )
        for rank, record in enumerate(records, start=1)
    ]


def user_history(store: ScoreStore, user_id: str) -> list[ScoreRecord]:
    """Return a user's recorded scores, most recent first."""
    return sorted(store.scores_for_user(user_id), key=lambda r: r.completed_at, reverse=True)
