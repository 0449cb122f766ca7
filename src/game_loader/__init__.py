"""Game loader subsystem — serve browser games for QA runs.

Each game is described by a :class:`GameLoaderConfig` and served by a
:class:`GameLoader` subclass that knows how to launch and health-check
it.

Typical usage::

    from src.game_loader import load_game_config, create_loader

    config = load_game_config("snake")
    with create_loader(config) as loader:
        ...  # open a browser at loader.url
"""

from src.game_loader.config import GameLoaderConfig, expand_env_vars, load_game_config
from src.game_loader.base import GameLoader, GameLoaderError
from src.game_loader.browser_loader import BrowserGameLoader
from src.game_loader.factory import create_loader, register_loader

__all__ = [
    "GameLoaderConfig",
    "load_game_config",
    "expand_env_vars",
    "GameLoader",
    "GameLoaderError",
    "BrowserGameLoader",
    "create_loader",
    "register_loader",
]
