"""
Quiz Grader CLI Application.

Provides a command-line interface for grading quiz submissions,
validating quiz definitions and browsing recorded scores.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from quizgrader.config import RepeatAttemptPolicy, get_settings
from quizgrader.grading import QuizDefinitionError
from quizgrader.leaderboard import global_leaderboard, quiz_leaderboard, user_history
from quizgrader.models import GradingResult, QuestionStatus
from quizgrader.output import ReportFormat, ReportGenerator
from quizgrader.quiz import QuizLoadError, QuizValidator, load_quiz, load_submission
from quizgrader.redaction import public_quiz_view
from quizgrader.scoring import JsonFileScoreStore, RepeatAttemptRejected, ScoreStoreError
from quizgrader.service import SubmissionService

# Create Typer app
app = typer.Typer(
    name="quiz-grader",
    help="Grade quiz submissions and track scores",
    add_completion=False,
)

console = Console()

_STATUS_ICONS: dict[QuestionStatus, str] = {
    QuestionStatus.CORRECT: "✅",
    QuestionStatus.INCORRECT: "❌",
    QuestionStatus.UNANSWERED: "➖",
    QuestionStatus.UNSUPPORTED_KIND: "⚠️",
}


@app.callback()
def main(
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before any command runs."""
    level = "DEBUG" if debug else get_settings().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def grade(
    quiz_file: Annotated[Path, typer.Argument(help="Path to the quiz definition (JSON)")],
    answers_file: Annotated[Path, typer.Argument(help="Path to the submitted answers (JSON)")],
    user: Annotated[
        Optional[str],
        typer.Option("--user", "-u", help="Submitter id (defaults to the configured user)"),
    ] = None,
    policy: Annotated[
        Optional[RepeatAttemptPolicy],
        typer.Option("--policy", help="Repeat-attempt policy override"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file path for the report"),
    ] = None,
    format: Annotated[
        Optional[ReportFormat],
        typer.Option("--format", "-f", help="Report format"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show per-question results"),
    ] = False,
) -> None:
    """
    Grade a submission and record the score.

    The score is stored unless the submitter created the quiz; repeat
    attempts follow the configured repeat-attempt policy.
    """
    try:
        settings = get_settings()
        quiz = load_quiz(quiz_file)
        submission = load_submission(answers_file)

        store = JsonFileScoreStore(settings.score_store_path)
        service = SubmissionService(store, settings, policy=policy)
        outcome = service.submit(quiz, user or settings.default_user_id, submission)

        _display_results(outcome.result, verbose)
        console.print(f"\n{outcome.message}")
        if outcome.previous_score is not None:
            console.print(f"[dim]Previously recorded score: {outcome.previous_score}[/dim]")

        if output:
            saved_path = ReportGenerator().save(outcome.result, output, format)
            console.print(f"\n[green]Report saved to:[/green] {saved_path}")

    except QuizLoadError as e:
        console.print(f"[red]Load Error:[/red] {e}")
        raise typer.Exit(1)
    except QuizDefinitionError as e:
        console.print(f"[red]Quiz Definition Error:[/red] {e}")
        raise typer.Exit(1)
    except RepeatAttemptRejected as e:
        console.print(f"[red]Submission Rejected:[/red] {e}")
        raise typer.Exit(1)
    except ScoreStoreError as e:
        console.print(f"[red]Score Store Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def validate_quiz(
    quiz_file: Annotated[Path, typer.Argument(help="Path to the quiz definition (JSON)")],
) -> None:
    """
    Validate a quiz definition without grading anything.

    Checks both that the quiz can be graded and that it follows the
    authoring rules.
    """
    try:
        quiz = load_quiz(quiz_file)
    except QuizLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    is_valid, issues = QuizValidator().validate(quiz)

    console.print(Panel(f"[bold]{quiz.title or quiz.id}[/bold]", title="Quiz"))

    table = Table(title="Questions")
    table.add_column("Id", style="cyan")
    table.add_column("Kind")
    table.add_column("Points", justify="right")
    table.add_column("Text")

    for question in quiz.questions:
        kind = question.kind.value if question.is_supported else question.kind
        table.add_row(question.id, str(kind), str(question.points), question.text[:50])

    console.print(table)
    console.print(f"\n[bold]Total Points:[/bold] {quiz.max_points}")

    if is_valid:
        console.print("\n[green]✓ Quiz is valid[/green]")
    else:
        console.print("\n[yellow]⚠ Validation issues found:[/yellow]")
        for issue in issues:
            console.print(f"  • {issue}")
        raise typer.Exit(1)


@app.command()
def show(
    quiz_file: Annotated[Path, typer.Argument(help="Path to the quiz definition (JSON)")],
) -> None:
    """Print the quiz as a taker sees it, answer keys removed."""
    try:
        quiz = load_quiz(quiz_file)
    except QuizLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print_json(public_quiz_view(quiz).model_dump_json())


@app.command()
def leaderboard(
    quiz_id: Annotated[
        Optional[str],
        typer.Option("--quiz-id", "-q", help="Rank a single quiz instead of all quizzes"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=1, max=1000, help="Maximum number of rows"),
    ] = None,
) -> None:
    """Show the global leaderboard, or the leaderboard of one quiz."""
    settings = get_settings()
    try:
        store = JsonFileScoreStore(settings.score_store_path)
    except ScoreStoreError as e:
        console.print(f"[red]Score Store Error:[/red] {e}")
        raise typer.Exit(1)

    rows = limit if limit is not None else settings.leaderboard_limit

    if quiz_id:
        table = Table(title=f"Leaderboard - {quiz_id}")
        table.add_column("Rank", justify="right")
        table.add_column("User", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Completed")
        for entry in quiz_leaderboard(store, quiz_id, rows):
            table.add_row(str(entry.rank), entry.user_id, str(entry.score), entry.completed_at.isoformat())
    else:
        table = Table(title="Leaderboard")
        table.add_column("Rank", justify="right")
        table.add_column("User", style="cyan")
        table.add_column("Total Score", justify="right")
        table.add_column("Quizzes", justify="right")
        for entry in global_leaderboard(store, rows):
            table.add_row(str(entry.rank), entry.user_id, str(entry.total_score), str(entry.quizzes_completed))

    console.print(table)


@app.command()
def history(
    user: Annotated[str, typer.Argument(help="User id")],
) -> None:
    """Show a user's recorded scores, most recent first."""
    settings = get_settings()
    try:
        store = JsonFileScoreStore(settings.score_store_path)
    except ScoreStoreError as e:
        console.print(f"[red]Score Store Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Scores - {user}")
    table.add_column("Quiz", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Completed")
    for record in user_history(store, user):
        table.add_row(record.quiz_id, str(record.score), record.completed_at.isoformat())

    console.print(table)


def _display_results(result: GradingResult, verbose: bool = False) -> None:
    """Display grading results in a formatted table."""

    # Score summary
    score_color = "green" if result.percentage >= 70 else "yellow" if result.percentage >= 50 else "red"
    console.print(
        Panel(
            f"[{score_color}][bold]{result.total_score} / {result.max_points}[/bold] "
            f"({result.percentage}%)[/{score_color}]",
            title="Final Score",
        )
    )

    if verbose:
        table = Table(title="Question Breakdown")
        table.add_column("Question", style="cyan")
        table.add_column("Points", justify="right")
        table.add_column("Your Answer")
        table.add_column("Expected")
        table.add_column("Status")

        for qr in result.question_results:
            table.add_row(
                qr.question_id,
                f"{qr.points_awarded}/{qr.points}",
                ", ".join(qr.submitted_labels),
                ", ".join(qr.correct_labels),
                _STATUS_ICONS[qr.status],
            )

        console.print(table)


if __name__ == "__main__":
    app()
