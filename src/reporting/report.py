"""Search run reports — structured JSON reports from QA sessions.

Each search produces a :class:`SearchRunReport`.  The
:class:`ReportGenerator` aggregates them into a session-level
:class:`SessionReport` and writes it as JSON.

JSON schema::

    {
        "session_id": "uuid",
        "game": "snake",
        "build_id": "local",
        "timestamp": "ISO-8601",
        "runs": [
            {
                "run_id": 1,
                "outcome": "succeeded",
                "succeeded": true,
                "initial_score": 0,
                "final_score": 10,
                "attempts": 37,
                "budget": 200,
                "strategy_used": "random-biased",
                "stopped_at": null,
                "duration_seconds": 4.2,
                "final_state": {"score": 10, "running": true, ...}
            }
        ],
        "summary": {
            "total_runs": 3,
            "succeeded": 2,
            "exhausted": 1,
            "environment_stopped": 0,
            "success_rate": 0.667,
            "mean_attempts": 52.3,
            "median_attempts_to_goal": 37.0,
            "max_attempts_to_goal": 61,
            "runs_with_stop": 1,
            "strategy_counts": {"random-biased": 1, "spiral": 1, "grid": 1},
            "mean_duration_seconds": 6.1
        }
    }
"""

from __future__ import annotations

import json
import os
import uuid
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from src.search.controller import SearchOutcome, SearchResult


def _json_default(obj: Any) -> Any:
    """Handle numpy types during JSON serialisation."""
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class SearchRunReport:
    """Serialisable record of one search.

    Attributes
    ----------
    run_id : int
        Sequential run number within the session.
    outcome : str
        ``"succeeded"``, ``"exhausted"`` or ``"environment_stopped"``.
    succeeded : bool
        Whether the score rose.
    initial_score, final_score : int
        Score before and after the search.
    attempts : int
        Attempts spent (see :class:`SearchResult`).
    budget : int
        Move budget of the search.
    strategy_used : str
        Strategy active when the search ended.
    stopped_at : int | None
        Attempt at which the game was first seen stopped.
    duration_seconds : float | None
        Wall-clock duration of the search.
    final_state : dict[str, Any]
        Last observation as a plain dict.
    """

    run_id: int
    outcome: str
    succeeded: bool
    initial_score: int
    final_score: int
    attempts: int
    budget: int
    strategy_used: str
    stopped_at: int | None = None
    duration_seconds: float | None = None
    final_state: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_result(
        cls,
        run_id: int,
        result: SearchResult,
        duration_seconds: float | None = None,
    ) -> "SearchRunReport":
        return cls(
            run_id=run_id,
            outcome=result.outcome.value,
            succeeded=result.succeeded,
            initial_score=result.initial_score,
            final_score=result.final_score,
            attempts=result.attempts,
            budget=result.budget,
            strategy_used=result.strategy_used,
            stopped_at=result.stopped_at,
            duration_seconds=duration_seconds,
            final_state=result.final_observation.as_dict(),
        )


@dataclass
class SessionReport:
    """Aggregated report for a QA session (multiple search runs).

    Attributes
    ----------
    session_id : str
        UUID for this session.
    game : str
        Name of the game under test.
    build_id : str
        Build identifier from ``CI_COMMIT_SHORT_SHA``, else ``"local"``.
    timestamp : str
        ISO-8601 timestamp of session start.
    runs : list[SearchRunReport]
        Individual run reports.
    summary : dict[str, Any]
        Aggregated summary statistics.
    """

    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    game: str = "snake"
    build_id: str = field(
        default_factory=lambda: os.getenv("CI_COMMIT_SHORT_SHA", "local")
    )
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    runs: list[SearchRunReport] = field(default_factory=list)
    summary: dict[str, Any] = field(default_factory=dict)


class ReportGenerator:
    """Builds and persists JSON session reports.

    Parameters
    ----------
    output_dir : str or Path
        Directory report files are written to.
    game_name : str
        Name of the game under test.
    """

    def __init__(
        self,
        output_dir: str | Path = "reports",
        game_name: str = "snake",
    ) -> None:
        self.output_dir = Path(output_dir)
        self.game_name = game_name
        self._session = SessionReport(game=game_name)

    @property
    def session(self) -> SessionReport:
        return self._session

    def add_run(self, run: SearchRunReport) -> None:
        """Append a completed run."""
        self._session.runs.append(run)

    def add_result(
        self,
        result: SearchResult,
        duration_seconds: float | None = None,
    ) -> SearchRunReport:
        """Convert ``result`` to a run report, append it, and return it."""
        run = SearchRunReport.from_result(
            run_id=len(self._session.runs) + 1,
            result=result,
            duration_seconds=duration_seconds,
        )
        self.add_run(run)
        return run

    def compute_summary(self) -> dict[str, Any]:
        """Aggregate statistics across all runs.

        Attempt statistics for reaching the goal consider successful
        runs only; ``None`` when there were none.
        """
        runs = self._session.runs
        n = len(runs)
        outcomes = Counter(r.outcome for r in runs)

        if n == 0:
            return {
                "total_runs": 0,
                "succeeded": 0,
                "exhausted": 0,
                "environment_stopped": 0,
                "success_rate": 0.0,
                "mean_attempts": 0.0,
                "median_attempts_to_goal": None,
                "max_attempts_to_goal": None,
                "runs_with_stop": 0,
                "strategy_counts": {},
                "mean_duration_seconds": None,
            }

        attempts = np.array([r.attempts for r in runs], dtype=np.int64)
        to_goal = np.array([r.attempts for r in runs if r.succeeded], dtype=np.int64)
        durations = np.array(
            [r.duration_seconds for r in runs if r.duration_seconds is not None],
            dtype=np.float64,
        )

        return {
            "total_runs": n,
            "succeeded": outcomes.get(SearchOutcome.SUCCEEDED.value, 0),
            "exhausted": outcomes.get(SearchOutcome.EXHAUSTED.value, 0),
            "environment_stopped": outcomes.get(SearchOutcome.ENVIRONMENT_STOPPED.value, 0),
            "success_rate": round(float(np.mean([r.succeeded for r in runs])), 3),
            "mean_attempts": float(np.mean(attempts)),
            "median_attempts_to_goal": float(np.median(to_goal)) if to_goal.size else None,
            "max_attempts_to_goal": int(np.max(to_goal)) if to_goal.size else None,
            "runs_with_stop": sum(1 for r in runs if r.stopped_at is not None),
            "strategy_counts": dict(Counter(r.strategy_used for r in runs)),
            "mean_duration_seconds": float(np.mean(durations)) if durations.size else None,
        }

    def save(self, filename: str | None = None) -> Path:
        """Write the session report as JSON and return its path.

        Defaults to ``"{game}_{session_id[:8]}.json"``.
        """
        self._session.summary = self.compute_summary()

        if filename is None:
            filename = f"{self.game_name}_{self._session.session_id[:8]}.json"

        self.output_dir.mkdir(parents=True, exist_ok=True)
        out_path = self.output_dir / filename

        with open(out_path, "w", encoding="utf-8") as fh:
            json.dump(asdict(self._session), fh, indent=2, default=_json_default)

        return out_path

    def to_dict(self) -> dict[str, Any]:
        """The full session report as a nested dict."""
        self._session.summary = self.compute_summary()
        return asdict(self._session)
