"""
Integration tests for the full grading pipeline.

Tests end-to-end scenarios from quiz and answer files to recorded
scores, leaderboards and reports.
"""

import json
from pathlib import Path

from quizgrader.config import RepeatAttemptPolicy, Settings
from quizgrader.leaderboard import global_leaderboard, quiz_leaderboard
from quizgrader.output import ReportGenerator
from quizgrader.quiz import QuizValidator, load_quiz, load_submission
from quizgrader.redaction import redact_result
from quizgrader.scoring import AttemptStatus, JsonFileScoreStore
from quizgrader.service import SubmissionService


class TestFullPipeline:
    """Integration tests for the complete grading pipeline."""

    def test_full_grading_pipeline(
        self,
        quiz_file: Path,
        answers_file: Path,
        test_settings: Settings,
        temp_dir: Path,
    ) -> None:
        """Test complete pipeline from files to recorded score and report."""
        # Step 1: Load documents
        quiz = load_quiz(quiz_file)
        submission = load_submission(answers_file)

        # Step 2: Validate quiz
        is_valid, issues = QuizValidator().validate(quiz)
        assert is_valid, issues

        # Step 3: Grade and record
        store = JsonFileScoreStore(test_settings.score_store_path)
        service = SubmissionService(store, test_settings)
        outcome = service.submit(quiz, "bob", submission)

        assert outcome.status is AttemptStatus.FIRST_ATTEMPT
        assert outcome.result.percentage == 100

        # Step 4: Leaderboards read what was recorded
        reloaded = JsonFileScoreStore(test_settings.score_store_path)
        assert global_leaderboard(reloaded)[0].total_score == 9
        assert quiz_leaderboard(reloaded, quiz.id)[0].user_id == "bob"

        # Step 5: Report without the answer key
        saved_path = ReportGenerator().save(redact_result(outcome.result), temp_dir / "report.json")
        content = json.loads(saved_path.read_text(encoding="utf-8"))
        assert content["grading_result"]["total_score"] == 9
        assert all(not r["correct_labels"] for r in content["grading_result"]["question_results"])

    def test_seeded_quizzes_leaderboard(self, temp_dir: Path, test_settings: Settings) -> None:
        """Quiz in authoring format with default points, several users, keep-best policy."""
        javascript = temp_dir / "javascript.json"
        javascript.write_text(
            json.dumps(
                {
                    "title": "JavaScript Quiz",
                    "creatorId": "bob",
                    "questions": [
                        {
                            "type": "TRUE_FALSE",
                            "content": "JavaScript is statically typed.",
                            "answers": [
                                {"content": "Vrai", "isCorrect": False},
                                {"content": "Faux", "isCorrect": True},
                            ],
                        },
                        {
                            "type": "MCQ",
                            "content": "Which are JavaScript array methods?",
                            "answers": [
                                {"content": "map()", "isCorrect": True},
                                {"content": "filter()", "isCorrect": True},
                                {"content": "query()", "isCorrect": False},
                                {"content": "reduce()", "isCorrect": True},
                            ],
                        },
                    ],
                }
            ),
            encoding="utf-8",
        )
        quiz = load_quiz(javascript)
        store = JsonFileScoreStore(test_settings.score_store_path)
        service = SubmissionService(store, test_settings, policy=RepeatAttemptPolicy.KEEP_BEST)

        service.submit(quiz, "alice", load_answers(temp_dir, [("q1", "q1-a2")]))
        service.submit(quiz, "alice", load_answers(temp_dir, [("q1", "q1-a2"), ("q2", ["q2-a1", "q2-a2", "q2-a4"])]))
        service.submit(quiz, "carol", load_answers(temp_dir, [("q2", ["q2-a1", "q2-a2", "q2-a4"])]))
        creator = service.submit(quiz, "bob", load_answers(temp_dir, [("q1", "q1-a2")]))

        assert creator.status is AttemptStatus.CREATOR
        board = global_leaderboard(store)
        assert [(e.user_id, e.total_score) for e in board] == [("alice", 4), ("carol", 3)]


def load_answers(temp_dir: Path, entries: list[tuple[str, object]]):
    """Write answers in entry-list form and load them back."""
    payload = []
    for question_id, answer in entries:
        key = "answerIds" if isinstance(answer, list) else "answerId"
        payload.append({"questionId": question_id, key: answer})
    file_path = temp_dir / "answers-entries.json"
    file_path.write_text(json.dumps({"answers": payload}), encoding="utf-8")
    return load_submission(file_path)
