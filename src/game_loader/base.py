"""Abstract base class for game loaders.

A :class:`GameLoader` gets a game served and reachable so that a
browser session can open it.  Subclasses implement the concrete
mechanics (a static file server, a bundler dev server, ...).
"""

from __future__ import annotations

import abc
import logging
from typing import Optional
from urllib.parse import urljoin

from src.game_loader.config import GameLoaderConfig

logger = logging.getLogger(__name__)


class GameLoaderError(Exception):
    """Raised when a game loader encounters an unrecoverable error."""


class GameLoader(abc.ABC):
    """Base class for all game loaders.

    Lifecycle: :meth:`setup` once, then :meth:`start` (blocks until the
    game is reachable), :meth:`is_ready` at any time, and :meth:`stop`
    to release the server.  Also usable as a context manager.

    Parameters
    ----------
    config : GameLoaderConfig
        Declarative configuration for the game.
    """

    def __init__(self, config: GameLoaderConfig) -> None:
        self.config = config
        self._running: bool = False

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def url(self) -> Optional[str]:
        """URL of the running game page, or ``None`` when stopped."""
        return self.config.url if self._running else None

    @property
    def running(self) -> bool:
        return self._running

    def url_for(self, path: str) -> str:
        """Resolve ``path`` against the game URL.

        Raises
        ------
        GameLoaderError
            If the game is not running.
        """
        if not self._running:
            raise GameLoaderError(f"[{self.name}] Game is not running")
        base = self.config.url if self.config.url.endswith("/") else self.config.url + "/"
        return urljoin(base, path.lstrip("/"))

    @abc.abstractmethod
    def setup(self) -> None:
        """One-time preparation.  Must be idempotent."""

    @abc.abstractmethod
    def start(self) -> None:
        """Serve the game and block until it is reachable.

        Raises
        ------
        GameLoaderError
            If the game fails to come up within the configured timeout.
        """

    @abc.abstractmethod
    def is_ready(self) -> bool:
        """Return ``True`` if the game page is being served."""

    @abc.abstractmethod
    def stop(self) -> None:
        """Stop serving.  Safe to call when never started."""

    def __enter__(self) -> "GameLoader":
        self.setup()
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:  # noqa: ANN001
        self.stop()
        return False

    def __repr__(self) -> str:
        status = "running" if self._running else "stopped"
        return f"<{type(self).__name__}({self.config.name!r}, {status})>"
