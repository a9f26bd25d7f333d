"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of core components.
"""

from orca.config.settings import get_settings
from orca.core.ai_client import AIClient
from orca.core.cv_analyzer import CVAnalyzer
from orca.core.history_store import HistoryStore
from orca.core.interview_orchestrator import InterviewOrchestrator


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_ai_client: AIClient | None = None
_history_store: HistoryStore | None = None
_orchestrator: InterviewOrchestrator | None = None


def get_ai_client() -> AIClient:
    """Get the AI client singleton."""
    global _ai_client

    if _ai_client is None:
        _ai_client = AIClient(get_settings())

    return _ai_client


def get_history_store() -> HistoryStore:
    """Get the history store singleton."""
    global _history_store

    if _history_store is None:
        _history_store = HistoryStore(settings=get_settings())

    return _history_store


def get_orchestrator() -> InterviewOrchestrator:
    """
    Get the interview orchestrator singleton.

    Lazily initializes all required components.
    """
    global _orchestrator

    if _orchestrator is None:
        settings = get_settings()
        ai_client = get_ai_client()

        _orchestrator = InterviewOrchestrator(
            ai_client=ai_client,
            cv_analyzer=CVAnalyzer(ai_client),
            history_store=get_history_store(),
            ticker_interval_seconds=settings.ticker_interval_seconds,
        )

    return _orchestrator


async def cleanup():
    """Cleanup resources on shutdown."""
    global _ai_client, _history_store, _orchestrator

    if _ai_client:
        await _ai_client.close()
        _ai_client = None

    _history_store = None
    _orchestrator = None
