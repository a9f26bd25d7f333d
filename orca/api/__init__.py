"""
API layer for Orca

Contains FastAPI routers for:
- Interview session management
- Interview history and progress
"""

from orca.api.router import api_router

__all__ = ["api_router"]
