"""Orchestrator module -- repeated search runs for QA sessions.

Provides ``SessionRunner``, which starts the game, runs the search
controller N times, resets between runs, and builds a JSON report.
"""

from .session_runner import SessionRunner

__all__ = [
    "SessionRunner",
]
