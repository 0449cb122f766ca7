"""Session runner -- repeated search runs against one live game.

For each run: start a session, search for a score increase, record the
result, then bring the game back to idle (dismissing the game-over
dialog first when the run ended in a collision).  Results are
collected by a :class:`~src.reporting.ReportGenerator`.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from src.platform.lifecycle import SessionLifecycle, SessionState
from src.reporting import ReportGenerator, SessionReport
from src.search.controller import SearchController, SearchResult

logger = logging.getLogger(__name__)


class SessionRunner:
    """Runs N independent searches and builds a session report.

    Parameters
    ----------
    lifecycle : SessionLifecycle
        Starts and resets the game around each search.
    controller : SearchController
        Performs the searches.  Must share the lifecycle's game.
    n_runs : int
        Number of searches.  Default 3.
    budget : int, optional
        Per-run budget override; ``None`` uses the controller config.
    output_dir : str or Path
        Directory for the JSON report.
    game_name : str
        Game name recorded in the report.
    """

    def __init__(
        self,
        lifecycle: SessionLifecycle,
        controller: SearchController,
        n_runs: int = 3,
        budget: int | None = None,
        output_dir: str | Path = "output/reports",
        game_name: str = "snake",
    ) -> None:
        if n_runs < 1:
            raise ValueError(f"n_runs must be >= 1, got {n_runs}")
        self.lifecycle = lifecycle
        self.controller = controller
        self.n_runs = n_runs
        self.budget = budget
        self.report_generator = ReportGenerator(output_dir=output_dir, game_name=game_name)
        self.results: list[SearchResult] = []

    def run_once(self) -> SearchResult:
        """One start → search → reset cycle."""
        if self.lifecycle.state() is not SessionState.IDLE:
            self._return_to_idle()
        self.lifecycle.start()

        t0 = time.perf_counter()
        try:
            result = self.controller.search(self.budget)
            duration = time.perf_counter() - t0
        finally:
            self._return_to_idle()

        run = self.report_generator.add_result(result, duration_seconds=duration)
        logger.info("Run %d: %s (%.1fs)", run.run_id, result.message, duration)
        self.results.append(result)
        return result

    def run(self) -> SessionReport:
        """Perform all runs and return the session report."""
        logger.info("Starting QA session: %d search runs", self.n_runs)
        for i in range(self.n_runs):
            logger.info("=== Run %d/%d ===", i + 1, self.n_runs)
            self.run_once()

        summary = self.report_generator.compute_summary()
        self.report_generator.session.summary = summary
        logger.info(
            "Session complete: %d/%d runs reached the goal",
            summary["succeeded"],
            summary["total_runs"],
        )
        return self.report_generator.session

    def save_report(self, filename: str | None = None) -> Path:
        """Write the JSON report and return its path."""
        path = self.report_generator.save(filename)
        logger.info("Report written to %s", path)
        return path

    def _return_to_idle(self) -> None:
        if self.lifecycle.state() is SessionState.TERMINATED:
            self.lifecycle.play_again()
        if self.lifecycle.state() is not SessionState.IDLE:
            self.lifecycle.reset()
