"""Game plugins for the Snake Game QA platform.

Each subdirectory under ``games/`` is a self-contained plugin with the
game-specific glue: loader, Selenium ports, and DOM selectors / JS
snippets.

Current plugins:

- :mod:`games.snake` -- Snake browser game

Plugin Convention
-----------------
Each plugin's ``__init__.py`` must export these module-level attributes:

- ``loader_class`` — the :class:`GameLoader` subclass (or ``None``)
- ``observation_port_class`` — an :class:`ObservationPort` taking a driver
- ``action_port_class`` — an :class:`ActionPort` taking a driver
- ``control_port_class`` — a :class:`ControlPort` taking a driver
- ``game_name`` — display / config name (e.g. ``"snake"``)
- ``default_config`` — path to the game config YAML
"""

from __future__ import annotations

import importlib
import types
from typing import Any, NamedTuple

_REQUIRED_ATTRS = (
    "loader_class",
    "observation_port_class",
    "action_port_class",
    "control_port_class",
    "game_name",
    "default_config",
)


class GamePorts(NamedTuple):
    """The three ports a QA run needs, bound to one browser driver."""

    observer: Any
    actor: Any
    controls: Any


def load_game_plugin(name: str) -> types.ModuleType:
    """Dynamically load a game plugin by directory name.

    Parameters
    ----------
    name : str
        Plugin directory name under ``games/`` (e.g. ``"snake"``).

    Returns
    -------
    types.ModuleType
        The plugin module, guaranteed to carry every attribute of the
        plugin convention.

    Raises
    ------
    ImportError
        If the plugin module cannot be imported.
    AttributeError
        If the plugin module is missing required attributes.
    """
    module = importlib.import_module(f"games.{name}")

    missing = [attr for attr in _REQUIRED_ATTRS if not hasattr(module, attr)]
    if missing:
        raise AttributeError(
            f"Game plugin 'games.{name}' is missing required attributes: "
            f"{', '.join(missing)}.  See games/__init__.py for the plugin convention."
        )

    return module


def create_ports(game_name: str, driver: Any) -> GamePorts:
    """Build a plugin's observation, action and control ports for ``driver``."""
    plugin = load_game_plugin(game_name)
    return GamePorts(
        observer=plugin.observation_port_class(driver),
        actor=plugin.action_port_class(driver),
        controls=plugin.control_port_class(driver),
    )
