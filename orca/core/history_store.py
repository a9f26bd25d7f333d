"""
History Store for Orca

Persists completed interview reports and supplies the context used to
measure progress between interviews.

Lifecycle:
- load on session start (previous report seeds the interviewer)
- append on session completion (read-modify-write)
- save is best-effort: failures are logged, never raised

A missing or corrupt history file is treated as an empty history.
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from orca.config.settings import Settings, get_settings
from orca.models.report import InterviewReport, ReportComparison

logger = logging.getLogger(__name__)


def sort_history(reports: list[InterviewReport]) -> list[InterviewReport]:
    """Sort reports newest first (stable for equal dates)."""
    return sorted(reports, key=lambda report: report.date, reverse=True)


def most_recent(
    history: list[InterviewReport],
    before: datetime | None = None,
) -> InterviewReport | None:
    """
    Get the newest report, optionally only among reports older than `before`.

    Passing the date of a report being finalized guarantees it is never
    compared against itself.
    """
    for report in sort_history(history):
        if before is None or report.date < before:
            return report
    return None


def section_delta(
    new_report: InterviewReport,
    previous_report: InterviewReport | None,
    category: str,
) -> float:
    """
    Score change for one category between two reports.

    Returns 0.0 when there is no previous report or it has no section
    for the category.
    """
    if previous_report is None:
        return 0.0
    new_section = new_report.get_section(category)
    previous_section = previous_report.get_section(category)
    if new_section is None or previous_section is None:
        return 0.0
    return new_section.score - previous_section.score


def overall_delta(
    new_report: InterviewReport,
    previous_report: InterviewReport | None,
) -> float:
    """Overall score change between two reports (0.0 without a previous one)."""
    if previous_report is None:
        return 0.0
    return new_report.overall_score - previous_report.overall_score


def compare_reports(
    new_report: InterviewReport,
    previous_report: InterviewReport | None,
) -> ReportComparison:
    """Build the full score comparison shown alongside a report."""
    if previous_report is None:
        return ReportComparison()

    return ReportComparison(
        previous_date=previous_report.date,
        overall_delta=overall_delta(new_report, previous_report),
        section_deltas={
            section.category: section_delta(new_report, previous_report, section.category)
            for section in new_report.sections
        },
    )


class HistoryStore:
    """
    JSON-file backed collection of completed interview reports.

    The file holds a single JSON array of reports using the wire field
    names; reads always return it sorted newest first.
    """

    def __init__(self, path: str | Path | None = None, settings: Settings | None = None):
        """
        Initialize the store.

        Args:
            path: History file location (defaults to settings.history_path)
            settings: Application settings (defaults to the cached instance)
        """
        if path is None:
            path = (settings or get_settings()).history_path
        self.path = Path(path)

    def load(self) -> list[InterviewReport]:
        """Read the stored history, newest first; [] if missing or corrupt."""
        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError) as e:
            logger.error(f"Failed to read interview history from {self.path}, ignoring it: {e}")
            return []

        if not isinstance(raw, list):
            logger.error(f"Interview history in {self.path} is not a list, ignoring it")
            return []

        reports = []
        for index, record in enumerate(raw):
            try:
                reports.append(InterviewReport.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid history record #{index} in {self.path}: {e}")

        return sort_history(reports)

    def save(self, reports: list[InterviewReport]) -> None:
        """
        Overwrite the stored history. Failures are logged, not raised.

        The file is replaced in one step so a failed write never leaves a
        truncated history behind.
        """
        records = [report.to_record() for report in reports]
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                temp_path = f.name
                f.write(json.dumps(records, indent=2))
            os.replace(temp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save interview history to {self.path}: {e}")
            if temp_path is not None:
                Path(temp_path).unlink(missing_ok=True)

    def append(
        self,
        report: InterviewReport,
        history: list[InterviewReport] | None = None,
    ) -> list[InterviewReport]:
        """
        Add a completed report and persist it.

        Args:
            report: Newly completed report
            history: Already loaded history to extend (loaded if omitted)

        Returns:
            The updated history, newest first
        """
        if history is None:
            history = self.load()
        history = sort_history([report] + history)
        self.save(history)
        logger.info(f"Saved interview report, history now has {len(history)} entries")
        return history

    def latest(self) -> InterviewReport | None:
        """Most recent stored report."""
        return most_recent(self.load())
