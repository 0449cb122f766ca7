"""Selenium-backed ports for the Snake game.

Implements the platform's observation, action and control contracts
against a live Snake page:

- :class:`SnakeObservationPort` -- one ``execute_script`` per poll,
  degraded to :meth:`Observation.unavailable` on any WebDriver error.
- :class:`SnakeActionPort` -- one synthetic key event per move, then a
  settle sleep.
- :class:`SnakeControlPort` -- clicks the start / pause / reset /
  play-again buttons.

Each port wraps a driver it does not own; closing the browser is the
caller's job.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any

from games.snake.modal_handler import (
    DISPATCH_KEY_JS,
    PAUSE_BUTTON_ID,
    PLAY_AGAIN_BUTTON_ID,
    READ_FINAL_SCORE_JS,
    READ_GAME_STATE_JS,
    RESET_BUTTON_ID,
    RESUME_LABEL,
    START_BUTTON_ID,
)
from src.platform.actions import ActionPort, Direction, KeyFamily
from src.platform.lifecycle import Control, ControlPort
from src.platform.observation import Observation, ObservationPort

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")

_CONTROL_BUTTONS: dict[Control, str] = {
    Control.START: START_BUTTON_ID,
    Control.PAUSE_TOGGLE: PAUSE_BUTTON_ID,
    Control.RESET: RESET_BUTTON_ID,
    Control.PLAY_AGAIN: PLAY_AGAIN_BUTTON_ID,
}


def parse_score(text: str | None) -> int:
    """Parse score text the way the page's own ``parseInt`` would.

    Leading integer wins, anything else (including ``None`` and
    negative values) reads as ``0``.
    """
    if not text:
        return 0
    match = _LEADING_INT_RE.match(text)
    if match is None:
        return 0
    return max(0, int(match.group(0)))


def key_code(direction: Direction, family: KeyFamily) -> tuple[str, str]:
    """Return the ``(key, code)`` pair of a ``KeyboardEvent``."""
    key = direction.key(family)
    if family is KeyFamily.LETTER:
        return key, f"Key{key.upper()}"
    return key, key


class SnakeObservationPort(ObservationPort):
    """Polls the Snake page for an :class:`Observation`.

    Parameters
    ----------
    driver : selenium.webdriver.Remote
        Driver with the game page loaded.
    poll_timeout_s : float
        Script timeout applied to the driver so a poll cannot block
        indefinitely.  Default 2.0.
    """

    def __init__(self, driver: Any, poll_timeout_s: float = 2.0) -> None:
        self._driver = driver
        self.poll_timeout_s = poll_timeout_s
        try:
            driver.set_script_timeout(poll_timeout_s)
        except Exception as exc:
            logger.debug("Could not set script timeout: %s", exc)

    def observe(self) -> Observation:
        """Read the visible game state; never raises."""
        try:
            raw = self._driver.execute_script(READ_GAME_STATE_JS)
        except Exception as exc:
            logger.debug("Failed to read game state: %s", exc)
            return Observation.unavailable()
        if not raw:
            return Observation.unavailable()
        return self._to_observation(raw)

    def read_final_score(self) -> int:
        """Score shown in the game-over dialog (``0`` if absent)."""
        try:
            return parse_score(self._driver.execute_script(READ_FINAL_SCORE_JS))
        except Exception as exc:
            logger.debug("Failed to read final score: %s", exc)
            return 0

    @staticmethod
    def _to_observation(raw: dict[str, Any]) -> Observation:
        return Observation(
            score=parse_score(raw.get("score")),
            high_score=parse_score(raw.get("highScore")),
            running=bool(raw.get("running", False)),
            paused=raw.get("pauseLabel") == RESUME_LABEL,
            render_surface_valid=bool(raw.get("canvasFound")) and bool(raw.get("canvasValid")),
            terminated=bool(raw.get("gameOver", False)),
            surface_width=int(raw.get("width") or 0),
            surface_height=int(raw.get("height") or 0),
        )


class SnakeActionPort(ActionPort):
    """Sends one key event per move to the Snake page.

    Parameters
    ----------
    driver : selenium.webdriver.Remote
        Driver with the game page loaded.
    """

    def __init__(self, driver: Any) -> None:
        self._driver = driver
        self.moves_sent: int = 0

    def act(
        self,
        direction: Direction,
        settle_s: float,
        family: KeyFamily = KeyFamily.ARROW,
    ) -> None:
        key, code = key_code(direction, family)
        self._driver.execute_script(DISPATCH_KEY_JS, key, code)
        self.moves_sent += 1
        logger.debug("Sent %s (%s)", key, direction.value)
        if settle_s > 0:
            time.sleep(settle_s)

    def press_key(self, key: str, settle_s: float = 0.05) -> None:
        """Send an arbitrary key (e.g. ``"Escape"``) outside the move set."""
        self._driver.execute_script(DISPATCH_KEY_JS, key, key)
        if settle_s > 0:
            time.sleep(settle_s)


class SnakeControlPort(ControlPort):
    """Clicks the Snake lifecycle buttons.

    Parameters
    ----------
    driver : selenium.webdriver.Remote
        Driver with the game page loaded.
    """

    def __init__(self, driver: Any) -> None:
        self._driver = driver

    def press(self, control: Control) -> None:
        from selenium.webdriver.common.by import By

        element_id = _CONTROL_BUTTONS[control]
        logger.debug("Clicking #%s for %s", element_id, control.value)
        self._driver.find_element(By.ID, element_id).click()
