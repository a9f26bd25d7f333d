"""
Orca - AI-Powered Mock Interview Coach

Runs a three-part simulated interview (HR, technical, behavioral) seeded from
the candidate's CV, produces a structured performance report, and tracks
progress across interviews.
"""

__version__ = "0.1.0"
__author__ = "Orca Team"
