"""
Report generation for grading results.

Renders a GradingResult as JSON, Markdown or CSV, either to a string or
to a file whose suffix selects the format.
"""

import csv
import io
import json
from enum import Enum
from pathlib import Path

from quizgrader.models import GradingResult


class ReportFormat(str, Enum):
    """Supported report formats."""

    JSON = "json"
    MARKDOWN = "markdown"
    CSV = "csv"


_SUFFIX_FORMATS: dict[str, ReportFormat] = {
    ".json": ReportFormat.JSON,
    ".md": ReportFormat.MARKDOWN,
    ".markdown": ReportFormat.MARKDOWN,
    ".csv": ReportFormat.CSV,
}


class ReportGenerator:
    """Formats grading results for people and spreadsheets."""

    def generate(self, result: GradingResult, format: ReportFormat = ReportFormat.JSON) -> str:
        """
        Render a grading result.

        Args:
            result: The grading result.
            format: Output format.

        Returns:
            The rendered report.
        """
        if format is ReportFormat.MARKDOWN:
            return self._to_markdown(result)
        if format is ReportFormat.CSV:
            return self._to_csv(result)
        return self._to_json(result)

    def save(
        self,
        result: GradingResult,
        output_path: Path,
        format: ReportFormat | None = None,
    ) -> Path:
        """
        Write a report to disk.

        Args:
            result: The grading result.
            output_path: Destination file; parent directories are created.
            format: Output format. Inferred from the suffix when omitted,
                falling back to JSON.

        Returns:
            The path written.
        """
        report_format = format or _SUFFIX_FORMATS.get(output_path.suffix.lower(), ReportFormat.JSON)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate(result, report_format), encoding="utf-8")
        return output_path

    def _to_json(self, result: GradingResult) -> str:
        return json.dumps({"grading_result": result.model_dump(mode="json")}, indent=2)

    def _to_markdown(self, result: GradingResult) -> str:
        lines = [
            f"# Results for quiz {result.quiz_id}",
            "",
            f"**Score:** {result.total_score} / {result.max_points} ({result.percentage}%)",
            "",
            "| Question | Status | Points | Your answer | Expected |",
            "|---|---|---|---|---|",
        ]
        for r in result.question_results:
            lines.append(
                f"| {r.question_id} | {r.status.value} | {r.points_awarded}/{r.points} "
                f"| {', '.join(r.submitted_labels) or '-'} | {', '.join(r.correct_labels) or '-'} |"
            )
        return "\n".join(lines) + "\n"

    def _to_csv(self, result: GradingResult) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(
            ["Question", "Kind", "Status", "Points Awarded", "Max Points", "Submitted", "Expected"]
        )
        for r in result.question_results:
            writer.writerow(
                [
                    r.question_id,
                    r.kind,
                    r.status.value,
                    r.points_awarded,
                    r.points,
                    "; ".join(r.submitted_labels),
                    "; ".join(r.correct_labels),
                ]
            )
        writer.writerow(["TOTAL", "", f"{result.percentage}%", result.total_score, result.max_points, "", ""])
        return buffer.getvalue()
