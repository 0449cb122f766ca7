"""Shared pytest fixtures for the snake-game-qa test suite.

Two kinds of fixtures live here:

- :class:`ScriptedGame`, an in-memory stand-in for the Snake page that
  implements all three ports, used by the controller, lifecycle and
  orchestrator unit tests.
- Integration fixtures that serve the real game and open it in a
  Selenium browser.  They skip when the game directory, a browser, or
  a WebDriver is unavailable.
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Generator

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.platform.actions import ActionPort, Direction, KeyFamily  # noqa: E402
from src.platform.lifecycle import Control, ControlPort  # noqa: E402
from src.platform.observation import Observation, ObservationPort  # noqa: E402

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Scripted fake game
# ---------------------------------------------------------------------------


class ScriptedGame(ObservationPort, ActionPort, ControlPort):
    """Deterministic game double driven by move counts.

    Parameters
    ----------
    score_rises_at : int, optional
        Zero-based move index whose move eats food.
    terminates_at : int, optional
        Number of moves after which the game is over.
    running : bool
        Initial running flag.
    score : int
        Initial score.
    food_value : int
        Points added by one food.
    """

    def __init__(
        self,
        score_rises_at: int | None = None,
        terminates_at: int | None = None,
        running: bool = True,
        score: int = 0,
        food_value: int = 10,
    ) -> None:
        self.score_rises_at = score_rises_at
        self.terminates_at = terminates_at
        self.food_value = food_value
        self.score = score
        self.high_score = score
        self.running = running
        self.paused = False
        self.terminated = False
        self.render_surface_valid = True
        self.moves: list[tuple[Direction, KeyFamily]] = []
        self.settles: list[float] = []
        self.presses: list[Control] = []
        self.observations = 0

    # -- ObservationPort --

    def observe(self) -> Observation:
        self.observations += 1
        return Observation(
            score=self.score,
            high_score=self.high_score,
            running=self.running,
            paused=self.paused,
            render_surface_valid=self.render_surface_valid,
            terminated=self.terminated,
            surface_width=400 if self.render_surface_valid else 0,
            surface_height=400 if self.render_surface_valid else 0,
        )

    # -- ActionPort --

    def act(self, direction, settle_s, family=KeyFamily.ARROW) -> None:
        index = len(self.moves)
        self.moves.append((direction, family))
        self.settles.append(settle_s)
        if self.terminated or not self.running or self.paused:
            return
        if index == self.score_rises_at:
            self.score += self.food_value
            self.high_score = max(self.high_score, self.score)
        if self.terminates_at is not None and len(self.moves) >= self.terminates_at:
            self.terminated = True
            self.running = False

    # -- ControlPort --

    def press(self, control: Control) -> None:
        self.presses.append(control)
        if control is Control.START and not self.running and not self.terminated:
            self.running = True
            self.paused = False
        elif control is Control.PAUSE_TOGGLE and self.running:
            self.paused = not self.paused
        elif control is Control.RESET:
            self.running = False
            self.paused = False
            self.terminated = False
            self.score = 0
        elif control is Control.PLAY_AGAIN and self.terminated:
            self.terminated = False
            self.score = 0


@pytest.fixture
def scripted_game():
    """Factory for :class:`ScriptedGame` instances."""
    return ScriptedGame


# ---------------------------------------------------------------------------
# Integration: game server (session-scoped)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def snake_server():
    """Serve the Snake game for the whole test session.

    Reuses a server that already answers on the configured URL (e.g.
    one started by hand); otherwise starts one from ``SNAKE_GAME_DIR``.
    """
    from src.game_loader import create_loader, load_game_config

    config = load_game_config("snake")
    loader = create_loader(config)

    if loader.is_ready():
        logger.info("Reusing Snake server already running at %s", config.url)
        yield config
        return

    if not (config.game_dir / "index.html").is_file():
        pytest.skip(f"Snake game not found in {config.game_dir} (set SNAKE_GAME_DIR)")

    logger.info("Starting Snake server ...")
    try:
        loader.setup()
        loader.start()
    except Exception as exc:
        pytest.skip(f"Could not start Snake server: {exc}")

    yield config

    logger.info("Stopping Snake server ...")
    loader.stop()


# ---------------------------------------------------------------------------
# Integration: browser (class-scoped) and page (per test)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="class")
def snake_browser(snake_server) -> Generator:
    """A Selenium browser with the game page open, shared by a test class."""
    from scripts._smoke_utils import BrowserInstance, get_available_browsers

    available = get_available_browsers()
    if not available:
        pytest.skip("No supported browser installed")

    try:
        browser = BrowserInstance(
            snake_server.url,
            settle_seconds=1.0,
            window_size=(snake_server.window_width, snake_server.window_height),
            browser=available[0],
            headless=True,
        )
    except Exception as exc:
        # WebDriverException when the driver is missing; FileNotFoundError
        # from BrowserInstance itself.
        pytest.skip(f"Browser {available[0]} not available: {exc}")

    yield browser

    browser.close()
    time.sleep(0.5)


@pytest.fixture
def snake_page(snake_browser):
    """Fresh page per test: reloads the game and yields ``(ports, lifecycle)``."""
    from games import create_ports
    from src.platform.lifecycle import SessionLifecycle

    snake_browser.reload(settle_seconds=0.5)
    ports = create_ports("snake", snake_browser.driver)
    lifecycle = SessionLifecycle(ports.controls, ports.observer, timeout_s=5.0)
    lifecycle.wait_until_ready()
    return ports, lifecycle
