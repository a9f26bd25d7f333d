"""
Report Extractor for Orca

Pulls the final interview report out of the interviewer's last response.

The model is asked to answer with a single ```json fenced block. The block is
parsed, checked against the report schema (three sections with the expected
categories, scores out of 10) and stamped with the completion time.
"""

import json
import logging
import re
from datetime import datetime, timezone

from pydantic import ValidationError

from orca.models.report import InterviewReport

logger = logging.getLogger(__name__)


REPORT_BLOCK_PATTERN = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL)


class ReportFormatError(Exception):
    """Raised when a response does not contain a usable report."""
    pass


def find_report_block(raw_text: str) -> str:
    """
    Return the content of the ```json fenced block in a response.

    Raises:
        ReportFormatError: If no such block exists
    """
    match = REPORT_BLOCK_PATTERN.search(raw_text or "")
    if not match or not match.group(1):
        raise ReportFormatError("No JSON report block found in the response")
    return match.group(1)


def extract_report(raw_text: str, now: datetime | None = None) -> InterviewReport:
    """
    Extract and validate the interview report embedded in a response.

    Args:
        raw_text: Final interviewer response
        now: Timestamp to stamp the report with (defaults to current UTC time)

    Returns:
        Validated, immutable InterviewReport

    Raises:
        ReportFormatError: For a missing block, malformed JSON or a report
            that does not match the schema
    """
    block = find_report_block(raw_text)

    try:
        payload = json.loads(block)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.warning(f"Report block is not valid JSON: {e}")
        raise ReportFormatError(f"Report block is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ReportFormatError("Report block must contain a JSON object")

    payload["date"] = now or datetime.now(timezone.utc)

    try:
        report = InterviewReport.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Report does not match the expected schema: {e}")
        raise ReportFormatError(f"Report does not match the expected schema: {e}") from e

    logger.info(f"Extracted interview report: overall score {report.overall_score}/10")
    return report
