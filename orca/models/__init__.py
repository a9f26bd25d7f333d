"""
Data models and schemas for Orca

Contains Pydantic models for:
- Interview sessions, stages and transcripts
- Question plans and CV analysis
- Report data and progress comparison
"""

from orca.models.interview import (
    ChatSender,
    ChatTurn,
    CvAnalysis,
    CvDocument,
    InterviewSession,
    InterviewStage,
    QuestionPlan,
)
from orca.models.report import (
    REPORT_CATEGORIES,
    InterviewReport,
    ProgressComparison,
    ReportComparison,
    ReportResource,
    ReportSection,
)

__all__ = [
    # Interview
    "ChatSender",
    "ChatTurn",
    "CvAnalysis",
    "CvDocument",
    "InterviewSession",
    "InterviewStage",
    "QuestionPlan",
    # Report
    "REPORT_CATEGORIES",
    "InterviewReport",
    "ProgressComparison",
    "ReportComparison",
    "ReportResource",
    "ReportSection",
]
