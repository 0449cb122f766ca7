"""Snake game loader -- specialisation of :class:`BrowserGameLoader`.

The Snake game is a static HTML5 page with no build step.  The loader
serves its directory with Python's built-in HTTP server on the port
the QA suite expects (3456) and waits until the page body contains the
game canvas.

Usage::

    export SNAKE_GAME_DIR=/path/to/snake-game

Then::

    from games.snake.loader import SnakeLoader
    loader = SnakeLoader.from_game_dir("/path/to/snake-game")
    loader.start()
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from games.snake.modal_handler import CANVAS_ID, PAGE_HEADING
from src.game_loader.browser_loader import BrowserGameLoader
from src.game_loader.config import GameLoaderConfig

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3456


def _defaults(serve_port: int) -> dict:
    url = f"http://localhost:{serve_port}"
    return dict(
        name="snake",
        loader_type="snake",
        install_command=None,
        serve_command=f'"{sys.executable}" -m http.server {serve_port}',
        serve_port=serve_port,
        url=url,
        readiness_endpoint=url,
        readiness_marker=CANVAS_ID,
        readiness_timeout_s=30.0,
        readiness_poll_interval_s=0.5,
        page_title=PAGE_HEADING,
    )


class SnakeLoader(BrowserGameLoader):
    """Loader for the static Snake game.

    ``setup()`` only checks that the directory has an ``index.html``;
    ``start()`` is inherited.
    """

    @classmethod
    def from_game_dir(
        cls,
        game_dir: str | Path,
        *,
        serve_port: int = DEFAULT_PORT,
        readiness_timeout_s: float = 30.0,
        page_title: Optional[str] = None,
    ) -> "SnakeLoader":
        """Create a loader from the game directory, using defaults."""
        values = _defaults(serve_port)
        values.update(
            game_dir=str(game_dir),
            readiness_timeout_s=readiness_timeout_s,
            page_title=page_title or PAGE_HEADING,
        )
        return cls(GameLoaderConfig(**values))

    def setup(self) -> None:
        index = self.config.game_dir / "index.html"
        if not index.is_file():
            logger.warning("[%s] No index.html in %s", self.name, self.config.game_dir)
        super().setup()
