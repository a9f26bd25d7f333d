"""
Interview API endpoints

Handles interview session lifecycle:
- Creating sessions
- Starting interviews (CV upload)
- Submitting answers
- Restarting sessions
- Retrieving status and the final report
"""

from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import BaseModel, Field

from orca.api.dependencies import get_orchestrator
from orca.config.settings import Settings, get_settings
from orca.core.interview_orchestrator import (
    InputValidationError,
    InterviewOrchestrator,
    SessionBusyError,
    StateTransitionError,
)
from orca.models.interview import ChatTurn, CvDocument, InterviewSession, QuestionPlan
from orca.models.report import InterviewReport, ReportComparison

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class SessionResponse(BaseModel):
    """Snapshot of an interview session."""
    session_id: str
    stage: str
    target_role: str | None = None
    plan: QuestionPlan | None = None
    questions_answered: int
    loading: bool
    elapsed_seconds: int
    created_at: datetime
    duration_seconds: float
    error_message: str | None = None
    transcript: list[ChatTurn]

    @classmethod
    def from_session(cls, session: InterviewSession) -> "SessionResponse":
        return cls(
            session_id=session.session_id,
            stage=session.stage.value,
            target_role=session.target_role,
            plan=session.plan,
            questions_answered=session.question_counter,
            loading=session.loading,
            elapsed_seconds=session.elapsed_seconds,
            created_at=session.created_at,
            duration_seconds=session.get_duration_seconds(),
            error_message=session.error_message,
            transcript=session.transcript,
        )


class AnswerRequest(BaseModel):
    """Request model for submitting an answer."""
    answer: str = Field(..., min_length=1)


class ReportResponse(BaseModel):
    """Final report with its progress comparison."""
    session_id: str
    report: InterviewReport
    comparison: ReportComparison


# ============================================================================
# HELPERS
# ============================================================================

def _get_session_or_404(orchestrator: InterviewOrchestrator, session_id: str) -> InterviewSession:
    session = orchestrator.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/sessions", response_model=SessionResponse)
async def create_session(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """Create a new interview session waiting for setup input."""
    session = orchestrator.create_session()
    return SessionResponse.from_session(session)


@router.post("/{session_id}/start", response_model=SessionResponse)
async def start_interview(
    session_id: str,
    target_role: str = Form(""),
    question_count: int | None = Form(None),
    cv: UploadFile | None = File(None),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> SessionResponse:
    """
    Start the interview.

    Analyzes the uploaded CV and returns the session with the first
    question, or with a prompt to complete the setup.
    """
    _get_session_or_404(orchestrator, session_id)

    if question_count is None:
        question_count = settings.default_question_count
    if question_count not in settings.allowed_question_counts:
        raise HTTPException(
            status_code=422,
            detail=f"question_count must be one of {settings.allowed_question_counts}",
        )

    document = None
    if cv is not None and cv.filename:
        document = CvDocument(
            filename=cv.filename,
            mime_type=cv.content_type or "application/octet-stream",
            content=await cv.read(),
        )

    try:
        session = await orchestrator.start_interview(
            session_id,
            target_role=target_role,
            question_count=question_count,
            document=document,
        )
    except (StateTransitionError, SessionBusyError) as e:
        raise HTTPException(status_code=409, detail=str(e))

    return SessionResponse.from_session(session)


@router.post("/{session_id}/respond", response_model=SessionResponse)
async def submit_answer(
    session_id: str,
    request: AnswerRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """
    Submit an answer to the current question.

    Returns the session with the interviewer's reply, or with the final
    report once the last question has been answered.
    """
    _get_session_or_404(orchestrator, session_id)

    try:
        session = await orchestrator.submit_answer(session_id, request.answer)
    except InputValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (StateTransitionError, SessionBusyError) as e:
        raise HTTPException(status_code=409, detail=str(e))

    return SessionResponse.from_session(session)


@router.post("/{session_id}/restart", response_model=SessionResponse)
async def restart_interview(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """Reset the session back to setup."""
    _get_session_or_404(orchestrator, session_id)
    session = await orchestrator.restart(session_id)
    return SessionResponse.from_session(session)


@router.get("/{session_id}/status", response_model=SessionResponse)
async def get_session_status(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionResponse:
    """Get the current status of an interview session."""
    session = _get_session_or_404(orchestrator, session_id)
    return SessionResponse.from_session(session)


@router.get("/{session_id}/report", response_model=ReportResponse)
async def get_report(
    session_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> ReportResponse:
    """
    Get the final interview report.

    Available once the session is complete.
    """
    session = _get_session_or_404(orchestrator, session_id)

    if session.report is None or session.comparison is None:
        raise HTTPException(
            status_code=400,
            detail=f"Interview not complete. Current stage: {session.stage.value}"
        )

    return ReportResponse(
        session_id=session.session_id,
        report=session.report,
        comparison=session.comparison,
    )
