"""
Test doubles and builders for Orca tests.

The fakes stand in for the remote model so the orchestrator can be driven
turn by turn without network access.
"""

import asyncio
import json
from datetime import datetime, timezone

from orca.core.ai_client import SessionError
from orca.models.interview import CvAnalysis, CvDocument
from orca.models.report import (
    BEHAVIORAL_CATEGORY,
    HR_CATEGORY,
    TECHNICAL_CATEGORY,
    InterviewReport,
)


def report_payload(
    overall: float = 7.0,
    hr: float = 7.0,
    technical: float = 7.0,
    behavioral: float = 7.0,
    progress: str | None = None,
) -> dict:
    """Report JSON as the interviewer model emits it."""
    return {
        "sections": [
            {"category": HR_CATEGORY, "score": hr, "feedback": "Clear introduction."},
            {"category": TECHNICAL_CATEGORY, "score": technical, "feedback": "Solid basics."},
            {"category": BEHAVIORAL_CATEGORY, "score": behavioral, "feedback": "Use STAR."},
        ],
        "overallScore": overall,
        "finalTip": "Practice out loud.",
        "suggestedResources": [
            {
                "title": "STAR method",
                "url": "https://example.com/star",
                "description": "Structures behavioral answers.",
            }
        ],
        "progress_comparison": (
            {"improvement_summary": progress} if progress is not None else None
        ),
    }


def fenced(payload: dict, preamble: str = "") -> str:
    """Wrap a payload the way the interviewer formats its final report."""
    return f"{preamble}```json\n{json.dumps(payload)}\n```"


def make_report(
    overall: float = 7.0,
    date: datetime | None = None,
    hr: float = 7.0,
    technical: float = 7.0,
    behavioral: float = 7.0,
) -> InterviewReport:
    payload = report_payload(overall, hr, technical, behavioral)
    payload["date"] = date or datetime(2024, 1, 1, tzinfo=timezone.utc)
    return InterviewReport.model_validate(payload)


def make_document() -> CvDocument:
    return CvDocument(filename="cv.pdf", mime_type="application/pdf", content=b"%PDF-1.4 cv")


class FakeChat:
    """Scripted interviewer session; exceptions in the script are raised."""

    def __init__(self, system_instruction: str, responses: list, gate: asyncio.Event | None = None):
        self.system_instruction = system_instruction
        self.responses = responses
        self.gate = gate
        self.sent: list[str] = []

    async def send(self, message: str) -> str:
        self.sent.append(message)
        if self.gate is not None:
            await self.gate.wait()
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeAIClient:
    """Opens FakeChat sessions that replay `responses` in order."""

    def __init__(self):
        self.responses: list = []
        self.gate: asyncio.Event | None = None
        self.chats: list[FakeChat] = []

    def script(self, *responses) -> None:
        self.responses.extend(responses)

    def open_chat(self, system_instruction: str) -> FakeChat:
        chat = FakeChat(system_instruction, self.responses, self.gate)
        self.chats.append(chat)
        return chat


class FakeCvAnalyzer:
    """Returns placeholder analyses of the requested size."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple] = []

    async def analyze(self, document, target_role, technical_count, behavioral_count):
        self.calls.append((document.filename, target_role, technical_count, behavioral_count))
        if self.error is not None:
            raise self.error
        return CvAnalysis(
            technical_skills=[f"skill {i}" for i in range(technical_count)],
            experiences=[f"experience {i}" for i in range(behavioral_count)],
        )


def remote_failure() -> SessionError:
    return SessionError("Model request failed: connection reset")
