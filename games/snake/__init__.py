"""Snake game plugin for the Snake Game QA platform.

Snake is a grid-based browser game: the player steers a snake with the
arrow keys or ``WASD`` and scores by eating food; hitting a wall or the
snake's own body ends the run.  The game is driven strictly as a black
box through its visible DOM.

This plugin contains:

- :class:`SnakeLoader` -- static HTTP serving of the game directory
- :mod:`~games.snake.ports` -- Selenium observation / action / control ports
- :mod:`~games.snake.modal_handler` -- selectors and JS snippets

Usage::

    from games import load_game_plugin
    plugin = load_game_plugin("snake")
    observer = plugin.observation_port_class(driver)
"""

from games.snake.loader import SnakeLoader
from games.snake.ports import SnakeActionPort, SnakeControlPort, SnakeObservationPort

__all__ = [
    "SnakeActionPort",
    "SnakeControlPort",
    "SnakeLoader",
    "SnakeObservationPort",
]

# -- Plugin metadata (required by games.load_game_plugin) ------------------
loader_class = SnakeLoader
observation_port_class = SnakeObservationPort
action_port_class = SnakeActionPort
control_port_class = SnakeControlPort
game_name = "snake"
default_config = "configs/games/snake.yaml"
