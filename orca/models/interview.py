"""
Interview session and state models for Orca
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from orca.models.report import InterviewReport, ReportComparison


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class InterviewStage(str, Enum):
    """Interview state machine stages."""

    SETUP = "setup"  # Waiting for role, question count and CV
    ANALYZING = "analyzing"  # CV analysis and remote session start
    INTERVIEW = "interview"  # Question/answer turns
    FEEDBACK = "feedback"  # Final answer sent, report being generated
    COMPLETE = "complete"  # Report ready
    ERROR = "error"  # Session failed, restart required


class ChatSender(str, Enum):
    """Author of a transcript entry."""

    USER = "user"
    ASSISTANT = "assistant"


class QuestionPlan(BaseModel):
    """Split of the total question count into the three interview parts."""

    total: int = Field(..., ge=0)
    hr_count: int = Field(..., ge=0)
    technical_count: int = Field(..., ge=0)
    behavioral_count: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _counts_sum_to_total(self) -> "QuestionPlan":
        if self.hr_count + self.technical_count + self.behavioral_count != self.total:
            raise ValueError("Category counts must add up to the total")
        return self


class CvDocument(BaseModel):
    """An uploaded CV (image or PDF)."""

    filename: str
    mime_type: str
    content: bytes = Field(repr=False)


class CvAnalysis(BaseModel):
    """Skills and experiences extracted from a CV."""

    technical_skills: list[str] = Field(default_factory=list)
    experiences: list[str] = Field(default_factory=list)


class ChatTurn(BaseModel):
    """One entry of the visible interview transcript."""

    sender: ChatSender
    text: str
    is_report: bool = False
    report_data: InterviewReport | None = None


class InterviewSession(BaseModel):
    """Complete interview session state."""

    # Identification
    session_id: str = Field(default_factory=lambda: str(uuid4()))

    # State
    stage: InterviewStage = Field(default=InterviewStage.SETUP)
    generation: int = 0  # Bumped by every restart

    # Setup
    target_role: str | None = None
    plan: QuestionPlan | None = None
    cv_filename: str | None = None

    # Timing
    created_at: datetime = Field(default_factory=utcnow)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    # Transcript & turn tracking
    transcript: list[ChatTurn] = Field(default_factory=list)
    question_counter: int = 0

    # In-flight request tracking
    loading: bool = False
    elapsed_seconds: int = 0

    # Outcome
    report: InterviewReport | None = None
    comparison: ReportComparison | None = None
    error_message: str | None = None

    # Runtime handles, never serialized
    chat: Any = Field(default=None, exclude=True, repr=False)
    ticker: Any = Field(default=None, exclude=True, repr=False)

    def add_turn(
        self,
        sender: ChatSender,
        text: str,
        report: InterviewReport | None = None,
    ) -> ChatTurn:
        """Append an entry to the transcript."""
        turn = ChatTurn(
            sender=sender,
            text=text,
            is_report=report is not None,
            report_data=report,
        )
        self.transcript.append(turn)
        return turn

    def is_final_turn(self) -> bool:
        """True once the answer to the last planned question was submitted."""
        return self.plan is not None and self.question_counter == self.plan.total

    def get_duration_seconds(self) -> float:
        """Get interview duration in seconds."""
        if not self.started_at:
            return 0.0
        end = self.completed_at or utcnow()
        return (end - self.started_at).total_seconds()
