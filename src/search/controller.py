"""Adaptive blind-search controller.

Drives a game through an :class:`~src.platform.actions.ActionPort`
until its score rises, without reading any internal game state.  The
only feedback is the :class:`~src.platform.observation.Observation`
polled after every move.

Each search replays strategies from a
:class:`~src.search.strategies.StrategyCatalog`, rotating round-robin
every ``rotation_period`` attempts.  A search ends in exactly one of:

- ``SUCCEEDED`` -- the score rose above its starting value.
- ``EXHAUSTED`` -- the move budget ran out without a score increase.
- ``ENVIRONMENT_STOPPED`` -- the game stopped running and the config
  asks to abort rather than continue (``continue_on_stop=False``).

Neither of the last two is an error.  Callers decide whether a missed
goal fails their check.

The controller never starts, pauses, or resets the session; use
:class:`~src.platform.lifecycle.SessionLifecycle` for that.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from src.platform.actions import ActionPort
from src.platform.observation import Observation, ObservationPort
from src.search.config import SearchConfig
from src.search.strategies import StrategyCatalog

logger = logging.getLogger(__name__)


class SearchOutcome(str, enum.Enum):
    """Terminal state of a search session."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    ENVIRONMENT_STOPPED = "environment_stopped"


class SearchPreconditionError(Exception):
    """Raised when a search is started on a session that is not running."""


@dataclass
class SearchSession:
    """Mutable bookkeeping for one :meth:`SearchController.search` call.

    Owned by a single invocation and discarded when it returns.
    """

    initial_score: int
    budget: int
    attempts: int = 0
    strategy_index: int = 0
    outcome: SearchOutcome = SearchOutcome.PENDING
    stopped_at: int | None = None

    @property
    def finished(self) -> bool:
        return self.outcome is not SearchOutcome.PENDING

    def finish(self, outcome: SearchOutcome) -> None:
        """Record the terminal outcome.  Write-once."""
        if outcome is SearchOutcome.PENDING:
            raise ValueError("Cannot finish a session with a PENDING outcome")
        if self.finished:
            raise RuntimeError(
                f"Search outcome already set to {self.outcome.value}; "
                f"refusing to overwrite with {outcome.value}"
            )
        self.outcome = outcome


@dataclass(frozen=True)
class SearchResult:
    """Terminal result of a search.

    Attributes
    ----------
    succeeded : bool
        Whether the score rose within budget.
    initial_score : int
        Score observed before the first move.
    final_score : int
        Score of the last observation taken by the search.
    attempts : int
        Moves that did not reach the goal.  On success this is the
        zero-based index of the winning move.
    strategy_used : str
        Name of the strategy active when the search ended.
    outcome : SearchOutcome
        Terminal outcome.
    budget : int
        The move budget the search ran under.
    stopped_at : int or None
        Attempt count at which the game was first seen stopped.
    final_observation : Observation
        The last observation taken by the search.
    """

    succeeded: bool
    initial_score: int
    final_score: int
    attempts: int
    strategy_used: str
    outcome: SearchOutcome
    budget: int
    stopped_at: int | None
    final_observation: Observation

    @property
    def message(self) -> str:
        """One-line human-readable summary."""
        if self.succeeded:
            return (
                f"Score increased from {self.initial_score} to {self.final_score} "
                f"using {self.strategy_used} strategy after {self.attempts} attempts"
            )
        if self.outcome is SearchOutcome.ENVIRONMENT_STOPPED:
            return (
                f"Game stopped after {self.attempts} attempts using "
                f"{self.strategy_used} strategy; score stayed at {self.final_score}"
            )
        return (
            f"Could not raise score after {self.attempts} attempts using "
            f"{self.strategy_used} strategy"
        )


class SearchController:
    """Goal-seeking move loop over a strategy catalog.

    Parameters
    ----------
    observation_port : ObservationPort
        Polled once before the first move and once after every move.
    action_port : ActionPort
        Receives one move per attempt.
    catalog : StrategyCatalog, optional
        Strategies in rotation order.  Defaults to
        :meth:`StrategyCatalog.default`.
    config : SearchConfig, optional
        Loop tunables.  Defaults to ``SearchConfig()``.
    """

    def __init__(
        self,
        observation_port: ObservationPort,
        action_port: ActionPort,
        catalog: StrategyCatalog | None = None,
        config: SearchConfig | None = None,
    ) -> None:
        self._observer = observation_port
        self._actor = action_port
        self.catalog = catalog or StrategyCatalog.default()
        self.config = config or SearchConfig()

    def search(self, budget: int | None = None) -> SearchResult:
        """Move until the score rises or the budget is spent.

        Parameters
        ----------
        budget : int, optional
            Override ``config.budget`` for this call.

        Returns
        -------
        SearchResult

        Raises
        ------
        SearchPreconditionError
            If the session is idle, paused, or terminated.
        ValueError
            If ``budget`` is negative.
        """
        cfg = self.config
        if budget is None:
            budget = cfg.budget
        if budget < 0:
            raise ValueError(f"budget must be >= 0, got {budget}")

        initial = self._observer.observe()
        if initial.terminated or not initial.running or initial.paused:
            raise SearchPreconditionError(
                "Search requires a running, unpaused session; observed "
                f"running={initial.running} paused={initial.paused} "
                f"terminated={initial.terminated}"
            )

        session = SearchSession(initial_score=initial.score, budget=budget)
        last = initial
        logger.info(
            "Starting search: initial score %d, budget %d, strategy %s",
            session.initial_score,
            budget,
            self.catalog[0].name,
        )

        for attempt in range(budget):
            if attempt > 0 and attempt % cfg.rotation_period == 0:
                session.strategy_index = (session.strategy_index + 1) % len(self.catalog)
                logger.info(
                    "Switching to %s strategy at attempt %d",
                    self.catalog[session.strategy_index].name,
                    attempt,
                )

            strategy = self.catalog[session.strategy_index]
            direction, family = strategy.next_move(attempt)
            self._actor.act(direction, cfg.settle_s, family)
            last = self._observer.observe()

            # Score first: a rise seen in the same poll as a stop still counts.
            if last.score > session.initial_score:
                session.finish(SearchOutcome.SUCCEEDED)
                logger.info(
                    "Goal reached: score %d -> %d after %d attempts (%s)",
                    session.initial_score,
                    last.score,
                    session.attempts,
                    strategy.name,
                )
                break

            session.attempts += 1

            if session.attempts % cfg.stop_check_interval == 0 and last.stopped:
                if session.stopped_at is None:
                    session.stopped_at = session.attempts
                if not cfg.continue_on_stop:
                    logger.warning(
                        "Game stopped at attempt %d -- aborting search", session.attempts
                    )
                    session.finish(SearchOutcome.ENVIRONMENT_STOPPED)
                    break
                logger.warning(
                    "Game stopped at attempt %d -- continuing search", session.attempts
                )

            if cfg.progress_log_interval and session.attempts % cfg.progress_log_interval == 0:
                logger.info(
                    "Progress: %d/%d attempts, still searching", session.attempts, budget
                )

        if not session.finished:
            session.finish(
                SearchOutcome.EXHAUSTED
                if session.attempts >= budget
                else SearchOutcome.ENVIRONMENT_STOPPED
            )

        result = SearchResult(
            succeeded=session.outcome is SearchOutcome.SUCCEEDED,
            initial_score=session.initial_score,
            final_score=last.score,
            attempts=session.attempts,
            strategy_used=self.catalog[session.strategy_index].name,
            outcome=session.outcome,
            budget=budget,
            stopped_at=session.stopped_at,
            final_observation=last,
        )
        if result.succeeded:
            logger.info(result.message)
        else:
            logger.warning(result.message)
        return result
