"""
API endpoint modules for Orca
"""

from orca.api.endpoints import history, interview

__all__ = ["history", "interview"]
