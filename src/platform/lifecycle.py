"""Session lifecycle -- start, pause, resume, reset and play-again.

Each lifecycle command presses a single UI control and then polls the
:class:`~src.platform.observation.ObservationPort` until the game shows
the expected state (the start control disabling, the pause label
flipping, the game-over dialog closing, ...).

The session state machine belongs to the game; this module only
observes it::

    Idle -> Running -> Paused -> Running (resume) -> Terminated
    any state -> Idle (reset)

The search controller expects a session in ``Running`` and never drives
these transitions itself.
"""

from __future__ import annotations

import abc
import enum
import logging
import time
from collections.abc import Callable

from src.platform.observation import Observation, ObservationPort

logger = logging.getLogger(__name__)


class Control(str, enum.Enum):
    """Non-directional UI controls exposed by the game."""

    START = "start"
    PAUSE_TOGGLE = "pause_toggle"
    RESET = "reset"
    PLAY_AGAIN = "play_again"


class SessionState(str, enum.Enum):
    """Session state as derived from an :class:`Observation`."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    TERMINATED = "terminated"

    @classmethod
    def from_observation(cls, obs: Observation) -> "SessionState":
        """Classify a snapshot.  Game-over wins over every other flag."""
        if obs.terminated:
            return cls.TERMINATED
        if not obs.running:
            return cls.IDLE
        if obs.paused:
            return cls.PAUSED
        return cls.RUNNING


class ControlPort(abc.ABC):
    """Presses lifecycle controls (buttons) of the game under test."""

    @abc.abstractmethod
    def press(self, control: Control) -> None:
        """Activate ``control`` once.  Does not wait for any effect."""


class LifecycleTimeoutError(Exception):
    """Raised when the game does not reach an expected state in time.

    Attributes
    ----------
    last_observation : Observation
        The final snapshot polled before giving up.
    """

    def __init__(self, message: str, last_observation: Observation) -> None:
        super().__init__(message)
        self.last_observation = last_observation


class SessionLifecycle:
    """Drives the game's session-level state machine.

    Parameters
    ----------
    control_port : ControlPort
        Presses the start / pause / reset / play-again controls.
    observation_port : ObservationPort
        Polled after each press until the expected state shows.
    timeout_s : float
        Maximum seconds to wait for a state change.  Default 5.0.
    poll_interval_s : float
        Seconds between polls.  Default 0.05.
    """

    def __init__(
        self,
        control_port: ControlPort,
        observation_port: ObservationPort,
        timeout_s: float = 5.0,
        poll_interval_s: float = 0.05,
    ) -> None:
        if timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive, got {timeout_s}")
        if poll_interval_s < 0:
            raise ValueError(f"poll_interval_s must be non-negative, got {poll_interval_s}")
        self._controls = control_port
        self._observer = observation_port
        self.timeout_s = timeout_s
        self.poll_interval_s = poll_interval_s

    # -- Queries -------------------------------------------------------

    def state(self) -> SessionState:
        """Return the current session state."""
        return SessionState.from_observation(self._observer.observe())

    def wait_until(
        self,
        predicate: Callable[[Observation], bool],
        description: str,
    ) -> Observation:
        """Poll until ``predicate`` holds for a fresh observation.

        Parameters
        ----------
        predicate : callable
            ``(Observation) -> bool``.
        description : str
            Human-readable name of the awaited state, used in logs and
            in the timeout error message.

        Returns
        -------
        Observation
            The first observation satisfying ``predicate``.

        Raises
        ------
        LifecycleTimeoutError
            If ``timeout_s`` elapses first.
        """
        deadline = time.monotonic() + self.timeout_s
        obs = self._observer.observe()
        while not predicate(obs):
            if time.monotonic() >= deadline:
                raise LifecycleTimeoutError(
                    f"Timed out after {self.timeout_s:.1f}s waiting for {description}",
                    obs,
                )
            time.sleep(self.poll_interval_s)
            obs = self._observer.observe()
        logger.debug("Reached %s: %s", description, obs)
        return obs

    # -- Commands ------------------------------------------------------

    def wait_until_ready(self) -> Observation:
        """Block until the game canvas is drawable."""
        return self.wait_until(lambda o: o.render_surface_valid, "render surface ready")

    def start(self) -> Observation:
        """Start a run and wait for the running flag."""
        logger.info("Starting game session")
        self._controls.press(Control.START)
        return self.wait_until(lambda o: o.running, "session running")

    def pause(self) -> Observation:
        """Pause the current run and wait for the pause label to flip.

        Calling this on an already-paused session toggles it back; that
        is a caller error and is not special-cased.
        """
        logger.info("Pausing game session")
        self._controls.press(Control.PAUSE_TOGGLE)
        return self.wait_until(lambda o: o.paused, "session paused")

    def resume(self) -> Observation:
        """Resume a paused run."""
        logger.info("Resuming game session")
        self._controls.press(Control.PAUSE_TOGGLE)
        return self.wait_until(lambda o: not o.paused, "session resumed")

    def reset(self) -> Observation:
        """Reset from any state back to idle.

        Waits for the score to clear as well as the running flag: from
        an idle or game-over page ``running`` is already false before
        the click lands.
        """
        logger.info("Resetting game session")
        self._controls.press(Control.RESET)
        return self.wait_until(
            lambda o: not o.running and not o.terminated and o.score == 0,
            "session reset",
        )

    def play_again(self) -> Observation:
        """Dismiss the game-over dialog."""
        logger.info("Dismissing game over")
        self._controls.press(Control.PLAY_AGAIN)
        return self.wait_until(lambda o: not o.terminated, "game over dismissed")
