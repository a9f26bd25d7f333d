"""Shared fixtures for the Orca test suite."""

import pytest

from orca.config.settings import get_settings
from orca.core.history_store import HistoryStore
from orca.core.interview_orchestrator import InterviewOrchestrator
from tests.helpers import FakeAIClient, FakeCvAnalyzer


@pytest.fixture(autouse=True)
def configured_env(monkeypatch, tmp_path):
    """Point settings at a test credential and a temporary history file."""
    monkeypatch.setenv("DATABRICKS_TOKEN", "test-token")
    monkeypatch.setenv("DATABRICKS_HOST", "https://databricks.test")
    monkeypatch.setenv("HISTORY_PATH", str(tmp_path / "history.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def history_store(tmp_path):
    return HistoryStore(tmp_path / "history.json")


@pytest.fixture
def ai_client():
    return FakeAIClient()


@pytest.fixture
def cv_analyzer():
    return FakeCvAnalyzer()


@pytest.fixture
def orchestrator(ai_client, cv_analyzer, history_store):
    return InterviewOrchestrator(
        ai_client=ai_client,
        cv_analyzer=cv_analyzer,
        history_store=history_store,
        ticker_interval_seconds=0.01,
    )
