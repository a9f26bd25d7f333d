"""
History API endpoints

Handles:
- Listing stored interview reports
- The latest report with its progress comparison
"""

import asyncio

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from orca.api.dependencies import get_history_store
from orca.core.history_store import HistoryStore, compare_reports, most_recent
from orca.models.report import InterviewReport, ReportComparison

router = APIRouter()


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class LatestReportResponse(BaseModel):
    """Most recent report compared with the one before it."""
    report: InterviewReport
    comparison: ReportComparison
    total_interviews: int


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.get("", response_model=list[InterviewReport])
async def list_reports(
    history_store: HistoryStore = Depends(get_history_store),
) -> list[InterviewReport]:
    """Get all stored reports, newest first."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, history_store.load)


@router.get("/latest", response_model=LatestReportResponse)
async def get_latest_report(
    history_store: HistoryStore = Depends(get_history_store),
) -> LatestReportResponse:
    """Get the most recent report and its score changes."""
    loop = asyncio.get_running_loop()
    history = await loop.run_in_executor(None, history_store.load)
    latest = most_recent(history)

    if latest is None:
        raise HTTPException(status_code=404, detail="No interviews completed yet")

    previous = most_recent(history, before=latest.date)
    return LatestReportResponse(
        report=latest,
        comparison=compare_reports(latest, previous),
        total_interviews=len(history),
    )
