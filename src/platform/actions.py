"""Action port -- discrete directional input for turn-based games.

Defines the four logical headings a player can steer with, the two key
families that reach them (arrow keys and ``WASD`` letters), and the
:class:`ActionPort` contract that game plugins implement to push one
input into the game under test.

Every call to :meth:`ActionPort.act` is exactly one turn: one key event
followed by a settle sleep, so that an observation taken right after
the call reflects that input.
"""

from __future__ import annotations

import abc
import enum


class KeyFamily(str, enum.Enum):
    """Input symbol family used to express a :class:`Direction`."""

    ARROW = "arrow"
    LETTER = "letter"


class Direction(str, enum.Enum):
    """Logical heading.  Opposed in pairs: UP/DOWN, LEFT/RIGHT."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> "Direction":
        """The 180-degree reversal of this heading."""
        return _OPPOSITES[self]

    def key(self, family: KeyFamily = KeyFamily.ARROW) -> str:
        """Return the ``KeyboardEvent.key`` value for this heading.

        Parameters
        ----------
        family : KeyFamily
            Which symbol family to use.  Default is arrow keys.

        Returns
        -------
        str
            E.g. ``"ArrowUp"`` or ``"w"``.
        """
        return _KEYS[family][self]

    @classmethod
    def from_key(cls, key: str) -> "Direction":
        """Resolve a key of either family back to its heading.

        Letter keys are matched case-insensitively.

        Raises
        ------
        ValueError
            If ``key`` is not bound to any heading.
        """
        for family in KeyFamily:
            for direction, bound in _KEYS[family].items():
                if key == bound or (family is KeyFamily.LETTER and key.lower() == bound):
                    return direction
        raise ValueError(f"Key {key!r} is not bound to a direction")


_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_KEYS: dict[KeyFamily, dict[Direction, str]] = {
    KeyFamily.ARROW: {
        Direction.UP: "ArrowUp",
        Direction.DOWN: "ArrowDown",
        Direction.LEFT: "ArrowLeft",
        Direction.RIGHT: "ArrowRight",
    },
    KeyFamily.LETTER: {
        Direction.UP: "w",
        Direction.DOWN: "s",
        Direction.LEFT: "a",
        Direction.RIGHT: "d",
    },
}


class ActionPort(abc.ABC):
    """Issues one directional command per call to the game under test.

    Implementations must not coalesce repeated identical calls and must
    not return before ``settle_s`` has elapsed.  There is no return
    value; callers re-observe to learn the effect.
    """

    @abc.abstractmethod
    def act(
        self,
        direction: Direction,
        settle_s: float,
        family: KeyFamily = KeyFamily.ARROW,
    ) -> None:
        """Dispatch ``direction`` and wait ``settle_s`` seconds.

        Parameters
        ----------
        direction : Direction
            Heading to steer toward.
        settle_s : float
            Seconds to suspend after dispatching, giving the game time
            to apply the input before the next observation.
        family : KeyFamily
            Key family to express the heading with.  The game treats
            both families identically.
        """
