"""
Interview Orchestrator - State machine for managing interview lifecycle.

This is the central coordinator for the entire interview process.
It manages stage transitions, drives the CV analysis and the remote
interviewer session, and turns the final response into a stored report.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from orca.core.history_store import compare_reports, most_recent
from orca.core.question_planner import plan_questions
from orca.core.report_extractor import ReportFormatError, extract_report
from orca.models.interview import (
    ChatSender,
    CvDocument,
    InterviewSession,
    InterviewStage,
    utcnow,
)
from orca.prompts.interviewer import InterviewerPrompts

logger = logging.getLogger(__name__)


GREETING = (
    "Hello! I'm Orca, your dedicated interview coach. To begin, please enter your "
    "target job role, select the interview length, and upload your CV (image or PDF)."
)
SETUP_INCOMPLETE_MESSAGE = (
    "Please provide a target job role, select an interview length, "
    "and upload a CV file to start."
)
ANALYSIS_FAILED_MESSAGE = (
    "I'm sorry, there was an error analyzing your CV. Please restart the interview to try again."
)
TURN_FAILED_MESSAGE = "Sorry, an error occurred. Please restart the interview to try again."
REPORT_READY_MESSAGE = "Here is your detailed report."


class StateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


class InputValidationError(Exception):
    """Raised when setup input or an answer is missing."""
    pass


class SessionBusyError(Exception):
    """Raised when a session already has a remote request in flight."""
    pass


class SessionNotFoundError(ValueError):
    """Raised when a session ID is unknown."""
    pass


class InterviewOrchestrator:
    """
    Manages the interview lifecycle using a state machine pattern.

    Stages:
        SETUP → ANALYZING → INTERVIEW → FEEDBACK → COMPLETE
                    ↓            ↓          ↓
                  ERROR        ERROR      ERROR

    COMPLETE and ERROR only accept a restart, which returns to SETUP.

    The orchestrator coordinates between:
    - CV Analyzer (skills and experiences to ask about)
    - AI Client (the stateful interviewer chat session)
    - History Store (previous report context, report persistence)

    Each session has at most one remote request in flight. While it is
    pending the session is `loading` and a ticker advances `elapsed_seconds`.
    """

    VALID_TRANSITIONS: dict[InterviewStage, list[InterviewStage]] = {
        InterviewStage.SETUP: [InterviewStage.ANALYZING],
        InterviewStage.ANALYZING: [InterviewStage.INTERVIEW, InterviewStage.ERROR],
        InterviewStage.INTERVIEW: [InterviewStage.FEEDBACK, InterviewStage.ERROR],
        InterviewStage.FEEDBACK: [InterviewStage.COMPLETE, InterviewStage.ERROR],
        InterviewStage.COMPLETE: [],  # Terminal until restart
        InterviewStage.ERROR: [],  # Terminal until restart
    }

    def __init__(
        self,
        ai_client: Any,  # AIClient
        cv_analyzer: Any,  # CVAnalyzer
        history_store: Any,  # HistoryStore
        ticker_interval_seconds: float = 1.0,
    ):
        """
        Initialize the orchestrator with component dependencies.

        Args:
            ai_client: Gateway used to open interviewer chat sessions
            cv_analyzer: CV analysis gateway
            history_store: Store of completed reports
            ticker_interval_seconds: Period of the elapsed-time ticker
        """
        self.ai_client = ai_client
        self.cv_analyzer = cv_analyzer
        self.history_store = history_store
        self.ticker_interval_seconds = ticker_interval_seconds
        self.prompts = InterviewerPrompts()

        # Session storage (in-memory)
        self._sessions: dict[str, InterviewSession] = {}

        # Event callbacks
        self._state_change_callbacks: list[
            Callable[[str, InterviewStage, InterviewStage], Awaitable[None]]
        ] = []

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    def create_session(self) -> InterviewSession:
        """Create a new session waiting for setup input."""
        session = InterviewSession()
        session.add_turn(ChatSender.ASSISTANT, GREETING)
        self._sessions[session.session_id] = session

        logger.info(f"Created interview session: {session.session_id}")
        return session

    def get_session(self, session_id: str) -> InterviewSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[InterviewSession]:
        """List all sessions."""
        return list(self._sessions.values())

    def _require_session(self, session_id: str) -> InterviewSession:
        session = self.get_session(session_id)
        if not session:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return session

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    async def transition_state(
        self,
        session_id: str,
        new_stage: InterviewStage,
        error_message: str | None = None
    ) -> InterviewSession:
        """
        Transition a session to a new stage.

        Args:
            session_id: Session ID
            new_stage: Target stage
            error_message: Error message if transitioning to ERROR

        Returns:
            Updated session

        Raises:
            StateTransitionError: If transition is invalid
        """
        session = self._require_session(session_id)
        old_stage = session.stage

        valid_next_stages = self.VALID_TRANSITIONS.get(old_stage, [])
        if new_stage not in valid_next_stages:
            raise StateTransitionError(
                f"Invalid transition from {old_stage.value} to {new_stage.value}. "
                f"Valid transitions: {[s.value for s in valid_next_stages]}"
            )

        session.stage = new_stage

        if new_stage == InterviewStage.INTERVIEW:
            session.started_at = utcnow()
        elif new_stage == InterviewStage.COMPLETE:
            session.completed_at = utcnow()
        elif new_stage == InterviewStage.ERROR:
            session.error_message = error_message

        await self._notify_state_change(session_id, old_stage, new_stage)

        logger.info(f"Session {session_id}: {old_stage.value} → {new_stage.value}")
        return session

    async def _notify_state_change(
        self,
        session_id: str,
        old_stage: InterviewStage,
        new_stage: InterviewStage,
    ) -> None:
        for callback in self._state_change_callbacks:
            try:
                await callback(session_id, old_stage, new_stage)
            except Exception as e:
                logger.error(f"State change callback error: {e}")

    # =========================================================================
    # INTERVIEW FLOW
    # =========================================================================

    async def start_interview(
        self,
        session_id: str,
        target_role: str | None,
        question_count: int,
        document: CvDocument | None,
    ) -> InterviewSession:
        """
        Analyze the CV, open the interviewer session and ask the first question.

        Missing input keeps the session in SETUP with a prompt to complete
        it; no remote call is made in that case.

        Returns:
            The session, in INTERVIEW on success or ERROR on failure
        """
        session = self._require_session(session_id)
        self._ensure_idle(session)

        if session.stage != InterviewStage.SETUP:
            raise StateTransitionError(
                f"Cannot start interview in stage: {session.stage.value}"
            )

        try:
            role = self._validate_setup(target_role, question_count, document)
        except InputValidationError as e:
            logger.info(f"Session {session_id}: setup incomplete ({e})")
            session.add_turn(ChatSender.ASSISTANT, SETUP_INCOMPLETE_MESSAGE)
            return session

        plan = plan_questions(question_count)
        session.target_role = role
        session.plan = plan
        session.cv_filename = document.filename
        session.add_turn(
            ChatSender.USER,
            f"Role: {role} | Questions: {plan.total}\nCV: {document.filename}",
        )

        await self.transition_state(session_id, InterviewStage.ANALYZING)

        generation = session.generation
        self._begin_loading(session)
        try:
            previous_report = await self._run_blocking(self.history_store.latest)
            analysis = await self.cv_analyzer.analyze(
                document, role, plan.technical_count, plan.behavioral_count
            )
            chat = self.ai_client.open_chat(
                self.prompts.system_instruction(role, plan, previous_report)
            )
            first_question = await chat.send(self.prompts.context_message(analysis))
        except Exception as e:
            if self._is_stale(session, generation):
                logger.info(f"Session {session_id}: discarding failed start after restart")
                return session
            logger.error(f"Error starting interview for session {session_id}: {e}")
            session.add_turn(ChatSender.ASSISTANT, ANALYSIS_FAILED_MESSAGE)
            await self.transition_state(session_id, InterviewStage.ERROR, error_message=str(e))
            return session
        finally:
            if not self._is_stale(session, generation):
                self._end_loading(session)

        if self._is_stale(session, generation):
            logger.info(f"Session {session_id}: discarding interview start after restart")
            return session

        session.chat = chat
        session.add_turn(ChatSender.ASSISTANT, first_question)
        await self.transition_state(session_id, InterviewStage.INTERVIEW)
        return session

    async def submit_answer(self, session_id: str, answer: str) -> InterviewSession:
        """
        Forward one answer to the interviewer and record the reply.

        The answer to the last planned question moves the session to
        FEEDBACK; its reply must carry the report.

        Raises:
            StateTransitionError: If the session is not in INTERVIEW
            SessionBusyError: If a request is already in flight
            InputValidationError: If the answer is empty
        """
        session = self._require_session(session_id)

        if session.stage != InterviewStage.INTERVIEW:
            raise StateTransitionError(
                f"Cannot submit answer in stage: {session.stage.value}"
            )
        self._ensure_idle(session)

        text = (answer or "").strip()
        if not text:
            raise InputValidationError("Answer must not be empty")

        session.add_turn(ChatSender.USER, text)
        session.question_counter += 1
        is_final = session.is_final_turn()

        if is_final:
            await self.transition_state(session_id, InterviewStage.FEEDBACK)

        generation = session.generation
        self._begin_loading(session)
        try:
            response = await session.chat.send(text)
        except Exception as e:
            if self._is_stale(session, generation):
                logger.info(f"Session {session_id}: discarding failed turn after restart")
                return session
            logger.error(f"Error sending answer for session {session_id}: {e}")
            session.add_turn(ChatSender.ASSISTANT, TURN_FAILED_MESSAGE)
            await self.transition_state(session_id, InterviewStage.ERROR, error_message=str(e))
            return session
        finally:
            if not self._is_stale(session, generation):
                self._end_loading(session)

        if self._is_stale(session, generation):
            logger.info(f"Session {session_id}: discarding reply after restart")
            return session

        if not is_final:
            session.add_turn(ChatSender.ASSISTANT, response)
            logger.info(
                f"Session {session_id}: answer {session.question_counter}/{session.plan.total} recorded"
            )
            return session

        await self._finalize_report(session, response, generation)
        return session

    async def _finalize_report(
        self,
        session: InterviewSession,
        raw_response: str,
        generation: int,
    ) -> None:
        """Turn the final response into a stored report, or fail the session."""
        try:
            report = extract_report(raw_response)
        except ReportFormatError as e:
            logger.error(f"Failed to parse interview report for session {session.session_id}: {e}")
            session.add_turn(ChatSender.ASSISTANT, raw_response)
            await self.transition_state(
                session.session_id, InterviewStage.ERROR, error_message=str(e)
            )
            return

        history = await self._run_blocking(self.history_store.load)
        previous_report = most_recent(history, before=report.date)
        await self._run_blocking(self.history_store.append, report, history)

        if self._is_stale(session, generation):
            logger.info(f"Session {session.session_id}: report stored, session restarted meanwhile")
            return

        session.report = report
        session.comparison = compare_reports(report, previous_report)
        session.add_turn(ChatSender.ASSISTANT, REPORT_READY_MESSAGE, report=report)

        await self.transition_state(session.session_id, InterviewStage.COMPLETE)

    async def restart(self, session_id: str) -> InterviewSession:
        """
        Reset a session back to SETUP.

        A request still in flight is not cancelled; its result is discarded
        when it arrives.
        """
        session = self._require_session(session_id)
        old_stage = session.stage

        self._end_loading(session)
        session.generation += 1

        session.stage = InterviewStage.SETUP
        session.target_role = None
        session.plan = None
        session.cv_filename = None
        session.started_at = None
        session.completed_at = None
        session.transcript = []
        session.question_counter = 0
        session.elapsed_seconds = 0
        session.report = None
        session.comparison = None
        session.error_message = None
        session.chat = None
        session.add_turn(ChatSender.ASSISTANT, GREETING)

        await self._notify_state_change(session_id, old_stage, InterviewStage.SETUP)

        logger.info(f"Session {session_id}: restarted from {old_stage.value}")
        return session

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _validate_setup(
        self,
        target_role: str | None,
        question_count: int,
        document: CvDocument | None,
    ) -> str:
        """Check setup input, returning the cleaned role."""
        role = (target_role or "").strip()
        if not role:
            raise InputValidationError("Target role is required")
        if document is None or not document.content:
            raise InputValidationError("A CV document is required")
        if question_count < 1:
            raise InputValidationError("At least one question is required")
        return role

    def _ensure_idle(self, session: InterviewSession) -> None:
        if session.loading:
            raise SessionBusyError(
                f"Session {session.session_id} is waiting for a response"
            )

    def _is_stale(self, session: InterviewSession, generation: int) -> bool:
        """True if the session was restarted since `generation` was read."""
        return session.generation != generation

    async def _run_blocking(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run blocking history file I/O in the thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    def _begin_loading(self, session: InterviewSession) -> None:
        session.loading = True
        session.elapsed_seconds = 0
        session.ticker = asyncio.create_task(self._tick(session))

    def _end_loading(self, session: InterviewSession) -> None:
        if session.ticker is not None:
            session.ticker.cancel()
            session.ticker = None
        session.loading = False

    async def _tick(self, session: InterviewSession) -> None:
        """Advance the elapsed-time counter until cancelled."""
        while True:
            await asyncio.sleep(self.ticker_interval_seconds)
            session.elapsed_seconds += 1

    # =========================================================================
    # EVENT CALLBACKS
    # =========================================================================

    def on_state_change(
        self,
        callback: Callable[[str, InterviewStage, InterviewStage], Awaitable[None]]
    ) -> None:
        """Register a callback for stage changes."""
        self._state_change_callbacks.append(callback)
