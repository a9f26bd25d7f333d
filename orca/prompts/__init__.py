"""
AI prompt templates for Orca

Contains structured prompts for:
- CV analysis
- The interviewer chat session and its final report
"""

from orca.prompts.cv_analysis import CvAnalysisPrompts
from orca.prompts.interviewer import InterviewerPrompts

__all__ = [
    "CvAnalysisPrompts",
    "InterviewerPrompts",
]
