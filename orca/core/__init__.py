"""
Core business logic modules for Orca

Contains:
- Interview Orchestrator: State machine for the interview lifecycle
- AI Client: Remote model gateway and stateful chat sessions
- CV Analyzer: Skills/experience extraction from an uploaded CV
- Question Planner: Split of the interview into HR/technical/behavioral parts
- Report Extractor: Structured report parsing and validation
- History Store: Persisted reports and progress comparison
"""

from orca.core.ai_client import AIClient, ChatSession, SessionError
from orca.core.cv_analyzer import CVAnalyzer
from orca.core.history_store import HistoryStore
from orca.core.interview_orchestrator import InterviewOrchestrator
from orca.core.question_planner import plan_questions
from orca.core.report_extractor import ReportFormatError, extract_report

__all__ = [
    "AIClient",
    "ChatSession",
    "SessionError",
    "CVAnalyzer",
    "HistoryStore",
    "InterviewOrchestrator",
    "plan_questions",
    "ReportFormatError",
    "extract_report",
]
