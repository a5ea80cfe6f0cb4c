"""
Mock interview coach backend.

Role-based mock interviews with an AI interviewer, periodic per-answer
feedback during the session and an aggregated summary when it ends.
"""

__version__ = "1.0.0"
