"""Strategy catalog -- fixed, replayable move patterns for blind search.

A :class:`Strategy` is a named, finite sequence of :class:`Direction`
values replayed cyclically by the global attempt index, so the Nth move
of a strategy is always the same regardless of when the controller
switched to it::

    strategy.next_direction(n) == strategy.pattern[n % len(strategy.pattern)]

The default catalog holds five strategies of increasing aggressiveness:

1. ``spiral``        -- 5-move blocks cycling right, down, left, up
2. ``grid``          -- zigzag rows: right, down, left, down, ...
3. ``random-biased`` -- right/down heavy with a late left/up correction
4. ``aggressive``    -- 6-move blocks for faster quadrant traversal
5. ``exhaustive``    -- 100 mixed steps alternating arrow and letter keys

Patterns are validated when built: an empty pattern, or one that covers
fewer than three headings, cannot recover from a move the game ignores
and is rejected with :class:`MalformedStrategyError`.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from src.platform.actions import Direction, KeyFamily

#: Minimum number of distinct headings a pattern must use.
MIN_DISTINCT_DIRECTIONS = 3

_R, _D, _L, _U = Direction.RIGHT, Direction.DOWN, Direction.LEFT, Direction.UP


class MalformedStrategyError(ValueError):
    """Raised when a strategy or catalog violates a construction invariant."""


class StrategyName(str, enum.Enum):
    """Names of the built-in strategies, in rotation order."""

    SPIRAL = "spiral"
    GRID = "grid"
    RANDOM_BIASED = "random-biased"
    AGGRESSIVE = "aggressive"
    EXHAUSTIVE = "exhaustive"


@dataclass(frozen=True)
class Strategy:
    """A named, immutable move pattern.

    Parameters
    ----------
    name : str
        Identifier, unique within a catalog.
    pattern : tuple[Direction, ...]
        Moves, replayed cyclically.
    families : tuple[KeyFamily, ...]
        Key families cycled in step with ``pattern``.  Defaults to
        arrow keys only.
    """

    name: str
    pattern: tuple[Direction, ...]
    families: tuple[KeyFamily, ...] = (KeyFamily.ARROW,)

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples.
        object.__setattr__(self, "pattern", tuple(self.pattern))
        object.__setattr__(self, "families", tuple(self.families))

        if not self.pattern:
            raise MalformedStrategyError(f"Strategy {self.name!r} has an empty pattern")
        if not self.families:
            raise MalformedStrategyError(f"Strategy {self.name!r} has no key families")
        bad = [d for d in self.pattern if not isinstance(d, Direction)]
        if bad:
            raise MalformedStrategyError(
                f"Strategy {self.name!r} contains non-Direction moves: {bad[:3]}"
            )
        distinct = set(self.pattern)
        if len(distinct) < MIN_DISTINCT_DIRECTIONS:
            raise MalformedStrategyError(
                f"Strategy {self.name!r} covers only "
                f"{sorted(d.value for d in distinct)}; at least "
                f"{MIN_DISTINCT_DIRECTIONS} directions are required"
            )

    def __len__(self) -> int:
        return len(self.pattern)

    def next_direction(self, attempt: int) -> Direction:
        """Heading for the given global attempt index."""
        if attempt < 0:
            raise ValueError(f"attempt must be non-negative, got {attempt}")
        return self.pattern[attempt % len(self.pattern)]

    def next_move(self, attempt: int) -> tuple[Direction, KeyFamily]:
        """Heading and key family for the given global attempt index."""
        direction = self.next_direction(attempt)
        return direction, self.families[attempt % len(self.families)]


def _blocks(*runs: tuple[Direction, int]) -> tuple[Direction, ...]:
    """Expand ``(direction, count)`` runs into a flat pattern."""
    return tuple(d for d, n in runs for _ in range(n))


def spiral_pattern() -> tuple[Direction, ...]:
    """Expanding / contracting box, 5 moves per side, two laps."""
    lap = ((_R, 5), (_D, 5), (_L, 5), (_U, 5))
    return _blocks(*lap, *lap)


def grid_pattern() -> tuple[Direction, ...]:
    """Zigzag row sweep with a final climb back up."""
    return _blocks(
        (_R, 5), (_D, 5), (_L, 5), (_D, 5),
        (_R, 5), (_D, 5), (_L, 5), (_U, 5),
    )


def random_biased_pattern() -> tuple[Direction, ...]:
    """Lower-right biased walk; left/up only as a late correction."""
    return _blocks(
        (_R, 5), (_D, 5), (_R, 5), (_D, 5),
        (_L, 5), (_U, 5), (_R, 5), (_D, 5),
    )


def aggressive_pattern() -> tuple[Direction, ...]:
    """Longer 6-move runs: coarser coverage, faster traversal."""
    lap = ((_R, 6), (_D, 6), (_L, 6), (_U, 6))
    return _blocks(*lap, *lap)


_EXHAUSTIVE_CYCLE = (_R, _D, _R, _D, _L, _U, _R, _D)


def exhaustive_pattern(length: int = 100) -> tuple[Direction, ...]:
    """Diverse last-resort sequence mixing all four headings."""
    return tuple(_EXHAUSTIVE_CYCLE[i % len(_EXHAUSTIVE_CYCLE)] for i in range(length))


class StrategyCatalog:
    """Ordered, immutable collection of strategies.

    Parameters
    ----------
    strategies : sequence of Strategy
        Rotation order.  Must be non-empty with unique names.
    """

    def __init__(self, strategies: Sequence[Strategy]) -> None:
        strategies = tuple(strategies)
        if not strategies:
            raise MalformedStrategyError("A strategy catalog needs at least one strategy")
        names = [s.name for s in strategies]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise MalformedStrategyError(f"Duplicate strategy names: {dupes}")
        self._strategies: tuple[Strategy, ...] = strategies

    @classmethod
    def default(cls) -> "StrategyCatalog":
        """The five built-in strategies in rotation order."""
        return cls(
            [
                Strategy(StrategyName.SPIRAL.value, spiral_pattern()),
                Strategy(StrategyName.GRID.value, grid_pattern()),
                Strategy(StrategyName.RANDOM_BIASED.value, random_biased_pattern()),
                Strategy(StrategyName.AGGRESSIVE.value, aggressive_pattern()),
                Strategy(
                    StrategyName.EXHAUSTIVE.value,
                    exhaustive_pattern(),
                    families=(KeyFamily.ARROW, KeyFamily.LETTER),
                ),
            ]
        )

    def __len__(self) -> int:
        return len(self._strategies)

    def __getitem__(self, index: int) -> Strategy:
        return self._strategies[index]

    def __iter__(self) -> Iterator[Strategy]:
        return iter(self._strategies)

    @property
    def names(self) -> list[str]:
        """Strategy names in rotation order."""
        return [s.name for s in self._strategies]

    def get(self, name: str) -> Strategy:
        """Look up a strategy by name.

        Raises
        ------
        KeyError
            If no strategy has that name.
        """
        for strategy in self._strategies:
            if strategy.name == name:
                return strategy
        raise KeyError(f"Unknown strategy {name!r}. Available: {self.names}")

    def strategy_index_at(self, attempt: int, rotation_period: int) -> int:
        """Index of the active strategy at ``attempt`` under round-robin rotation."""
        if rotation_period < 1:
            raise ValueError(f"rotation_period must be >= 1, got {rotation_period}")
        return (attempt // rotation_period) % len(self._strategies)

    def __repr__(self) -> str:
        return f"<StrategyCatalog({self.names})>"
