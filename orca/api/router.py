"""
Main API router for Orca

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from orca.api.endpoints import history, interview

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    prefix="/interview",
    tags=["Interview"]
)

api_router.include_router(
    history.router,
    prefix="/history",
    tags=["History"]
)
