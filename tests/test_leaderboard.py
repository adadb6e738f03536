"""
Unit tests for leaderboards and score history.
"""

from datetime import datetime, timedelta, timezone

from quizgrader.leaderboard import global_leaderboard, quiz_leaderboard, user_history
from quizgrader.scoring import InMemoryScoreStore, ScoreRecord

_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _put(store: InMemoryScoreStore, user_id: str, quiz_id: str, score: int, minutes: int = 0) -> None:
    store.put(
        ScoreRecord(
            user_id=user_id,
            quiz_id=quiz_id,
            score=score,
            completed_at=_BASE_TIME + timedelta(minutes=minutes),
        )
    )


class TestGlobalLeaderboard:
    """Tests for global_leaderboard."""

    def test_sums_scores_per_user(self, memory_store: InMemoryScoreStore) -> None:
        _put(memory_store, "bob", "culture", 6)
        _put(memory_store, "bob", "js", 7)
        _put(memory_store, "carol", "culture", 9)

        board = global_leaderboard(memory_store)

        assert [(e.rank, e.user_id, e.total_score, e.quizzes_completed) for e in board] == [
            (1, "bob", 13, 2),
            (2, "carol", 9, 1),
        ]

    def test_ties_ordered_by_user_id(self, memory_store: InMemoryScoreStore) -> None:
        _put(memory_store, "zoe", "culture", 5)
        _put(memory_store, "adam", "culture", 5)

        assert [e.user_id for e in global_leaderboard(memory_store)] == ["adam", "zoe"]

    def test_limit(self, memory_store: InMemoryScoreStore) -> None:
        for index in range(5):
            _put(memory_store, f"user{index}", "culture", index)

        board = global_leaderboard(memory_store, limit=2)

        assert [e.user_id for e in board] == ["user4", "user3"]

    def test_empty(self, memory_store: InMemoryScoreStore) -> None:
        assert global_leaderboard(memory_store) == []


class TestQuizLeaderboard:
    """Tests for quiz_leaderboard."""

    def test_ranks_one_quiz(self, memory_store: InMemoryScoreStore) -> None:
        _put(memory_store, "bob", "culture", 6)
        _put(memory_store, "carol", "culture", 9)
        _put(memory_store, "dave", "js", 20)

        board = quiz_leaderboard(memory_store, "culture")

        assert [(e.rank, e.user_id, e.score) for e in board] == [(1, "carol", 9), (2, "bob", 6)]

    def test_earlier_completion_wins_ties(self, memory_store: InMemoryScoreStore) -> None:
        _put(memory_store, "late", "culture", 9, minutes=10)
        _put(memory_store, "early", "culture", 9, minutes=1)

        assert [e.user_id for e in quiz_leaderboard(memory_store, "culture")] == ["early", "late"]


class TestUserHistory:
    """Tests for user_history."""

    def test_most_recent_first(self, memory_store: InMemoryScoreStore) -> None:
        _put(memory_store, "bob", "culture", 6, minutes=1)
        _put(memory_store, "bob", "js", 7, minutes=5)
        _put(memory_store, "carol", "js", 1, minutes=9)

        assert [r.quiz_id for r in user_history(memory_store, "bob")] == ["js", "culture"]
