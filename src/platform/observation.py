"""Observation port -- pull-based snapshots of a game's visible state.

The QA layer never reads a game's internals.  It samples a handful of
scalar facts that any player could see on screen (score, high score,
run / pause / game-over indicators, whether the canvas is drawable)
and packs them into an immutable :class:`Observation`.

A port that cannot locate the game surface does not raise: it returns
:meth:`Observation.unavailable` and lets the caller decide whether a
degraded snapshot matters.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass


@dataclass(frozen=True)
class Observation:
    """Immutable snapshot of the game's externally visible state.

    Attributes
    ----------
    score : int
        Current score display (non-negative).
    high_score : int
        High-score display (non-negative).
    running : bool
        Whether a run is in progress (start control disabled).  Stays
        ``True`` while paused.
    paused : bool
        Whether the pause control currently reads ``"Resume"``.
    render_surface_valid : bool
        Whether the game canvas exists, has a 2D context, and has
        non-zero dimensions.
    terminated : bool
        Whether the game-over dialog is showing (a goal-incompatible
        end state such as a wall or self collision).
    surface_width : int
        Canvas width in pixels, ``0`` when unavailable.
    surface_height : int
        Canvas height in pixels, ``0`` when unavailable.
    """

    score: int = 0
    high_score: int = 0
    running: bool = False
    paused: bool = False
    render_surface_valid: bool = False
    terminated: bool = False
    surface_width: int = 0
    surface_height: int = 0

    def __post_init__(self) -> None:
        if self.score < 0 or self.high_score < 0:
            raise ValueError(
                f"Scores must be non-negative, got score={self.score} "
                f"high_score={self.high_score}"
            )

    @classmethod
    def unavailable(cls) -> "Observation":
        """Degraded snapshot used when the game surface cannot be read."""
        return cls(render_surface_valid=False)

    @property
    def stopped(self) -> bool:
        """``True`` when the game no longer accepts moves productively."""
        return not self.running or self.terminated

    def as_dict(self) -> dict[str, int | bool]:
        """Plain-dict form, for logging and reports."""
        return {
            "score": self.score,
            "high_score": self.high_score,
            "running": self.running,
            "paused": self.paused,
            "render_surface_valid": self.render_surface_valid,
            "terminated": self.terminated,
            "surface_width": self.surface_width,
            "surface_height": self.surface_height,
        }


class ObservationPort(abc.ABC):
    """Read-only view of the game under test.

    :meth:`observe` must be side-effect free and safe to call at any
    frequency; pacing is the caller's responsibility.
    """

    @abc.abstractmethod
    def observe(self) -> Observation:
        """Return a fresh snapshot of the game's visible state."""
