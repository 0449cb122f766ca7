"""Factory for creating game loaders from configuration.

:func:`create_loader` maps a :class:`GameLoaderConfig` to a
:class:`GameLoader` subclass via its ``loader_type``.  Game plugins
under ``games/`` that export ``loader_class`` and ``game_name`` are
registered automatically.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil

from src.game_loader.base import GameLoader, GameLoaderError
from src.game_loader.config import GameLoaderConfig

logger = logging.getLogger(__name__)

_LOADER_REGISTRY: dict[str, type[GameLoader]] = {}
_REGISTRY_INITIALIZED: bool = False


def _ensure_registry() -> None:
    """Lazily populate the registry to avoid circular imports."""
    global _REGISTRY_INITIALIZED
    if _REGISTRY_INITIALIZED:
        return

    from src.game_loader.browser_loader import BrowserGameLoader

    _LOADER_REGISTRY.setdefault("browser", BrowserGameLoader)
    _auto_discover_plugin_loaders()
    _REGISTRY_INITIALIZED = True


def _auto_discover_plugin_loaders() -> None:
    """Register ``loader_class`` of every importable ``games.<name>`` plugin."""
    try:
        import games as _games_pkg  # type: ignore[import]
    except ImportError:
        logger.debug("games package not available; skipping plugin discovery", exc_info=True)
        return

    for module_info in pkgutil.iter_modules(getattr(_games_pkg, "__path__", [])):
        if not module_info.ispkg:
            continue
        name = module_info.name
        try:
            mod = importlib.import_module(f"games.{name}")
        except ImportError:
            logger.debug("Skipping plugin %r (import failed)", name, exc_info=True)
            continue

        loader_cls = getattr(mod, "loader_class", None)
        game_name: str = getattr(mod, "game_name", name)
        if loader_cls is None:
            continue
        if not (isinstance(loader_cls, type) and issubclass(loader_cls, GameLoader)):
            logger.debug("Skipping plugin %r: loader_class is not a GameLoader", name)
            continue
        if game_name not in _LOADER_REGISTRY:
            _LOADER_REGISTRY[game_name] = loader_cls
            logger.debug("Auto-registered loader %r -> %s", game_name, loader_cls.__name__)


def create_loader(config: GameLoaderConfig) -> GameLoader:
    """Instantiate the :class:`GameLoader` selected by ``config.loader_type``.

    Raises
    ------
    GameLoaderError
        If ``loader_type`` is not registered.
    """
    _ensure_registry()

    loader_cls = _LOADER_REGISTRY.get(config.loader_type)
    if loader_cls is None:
        raise GameLoaderError(
            f"Unknown loader_type {config.loader_type!r}. Available: {sorted(_LOADER_REGISTRY)}"
        )
    logger.info("Creating %s for game %r", loader_cls.__name__, config.name)
    return loader_cls(config)


def register_loader(name: str, loader_cls: type[GameLoader]) -> None:
    """Register ``loader_cls`` under ``loader_type`` ``name``."""
    _ensure_registry()
    _LOADER_REGISTRY[name] = loader_cls
    logger.info("Registered custom loader %r -> %s", name, loader_cls.__name__)
