"""Game loader configuration data structures.

A :class:`GameLoaderConfig` describes how to bring a browser game up
for QA: where its static files live, how to serve them, and how to
tell when the page is reachable and actually contains the game.

Configs can be loaded from YAML files via :func:`load_game_config`.
String values in YAML configs support environment variable expansion
using ``$VAR`` or ``${VAR}`` syntax (with ``${VAR:-default}``
fallbacks), as well as ``~`` for the user home directory.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

# Default search path for game config YAML files.
_CONFIGS_DIR = Path(__file__).resolve().parent.parent.parent / "configs" / "games"

# Pattern matching $VAR or ${VAR} for environment variable expansion.
_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


@dataclass
class GameLoaderConfig:
    """Declarative description of how to serve a game for QA.

    Parameters
    ----------
    name : str
        Identifier for the game (e.g. ``"snake"``).
    game_dir : str or Path
        Directory holding the game's ``index.html`` and assets.
    loader_type : str
        Which :class:`GameLoader` subclass to use.  Built-in values:
        ``"browser"`` and ``"snake"``.
    install_command : str, optional
        Shell command run once in :meth:`GameLoader.setup`.  Static
        games need none.
    serve_command : str
        Shell command that serves ``game_dir`` over HTTP.
    serve_port : int
        Port the server listens on.
    url : str
        Full URL of the game page once the server is up.
    readiness_endpoint : str
        URL polled (HTTP GET) to decide when the server is ready.
        Defaults to ``url``.
    readiness_marker : str, optional
        Substring the readiness response body must contain (e.g. the
        canvas element id).  ``None`` accepts any successful response.
    readiness_timeout_s : float
        Maximum seconds to wait for the readiness endpoint.
    readiness_poll_interval_s : float
        Seconds between readiness polls.
    page_title : str, optional
        Heading text the game page shows once loaded.
    window_width : int
        Browser window width in pixels.
    window_height : int
        Browser window height in pixels.
    env_vars : dict[str, str]
        Extra environment variables for the serve process.
    """

    name: str
    game_dir: str | Path
    loader_type: str = "browser"

    # Build / serve
    install_command: Optional[str] = None
    serve_command: str = "python -m http.server 3456"
    serve_port: int = 3456
    url: str = "http://localhost:3456"
    readiness_endpoint: str = ""
    readiness_marker: Optional[str] = None
    readiness_timeout_s: float = 30.0
    readiness_poll_interval_s: float = 0.5

    # Browser window
    page_title: Optional[str] = None
    window_width: int = 1024
    window_height: int = 768

    # Extra env for the serve process
    env_vars: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.game_dir = Path(os.path.expanduser(_expand_vars(str(self.game_dir))))
        if not self.readiness_endpoint:
            self.readiness_endpoint = self.url
        if self.serve_port <= 0:
            raise ValueError(f"serve_port must be positive, got {self.serve_port}")


def _expand_vars(value: str) -> str:
    """Expand ``$VAR`` and ``${VAR}`` references in a string.

    Undefined variables are left as-is; ``${VAR:-default}`` falls back
    to ``default``.
    """

    def _replace(match: re.Match) -> str:
        braced = match.group(1)
        bare = match.group(2)
        original: str = match.group(0) or ""

        if braced is not None:
            if ":-" in braced:
                var_name, default = braced.split(":-", 1)
                return os.environ.get(var_name, default)
            return os.environ.get(braced, original)

        return os.environ.get(bare or "", original)

    return _ENV_VAR_RE.sub(_replace, value)


def expand_env_vars(data: dict) -> dict:
    """Expand environment variables in string values of ``data``.

    Nested mappings (e.g. ``env_vars``) are expanded too.  Shared by the
    game and search config loaders.
    """
    expanded: dict = {}
    for key, value in data.items():
        if isinstance(value, str):
            expanded[key] = _expand_vars(value)
        elif isinstance(value, dict):
            expanded[key] = expand_env_vars(value)
        else:
            expanded[key] = value
    return expanded


def load_game_config(
    name: str,
    configs_dir: str | Path | None = None,
) -> GameLoaderConfig:
    """Load a :class:`GameLoaderConfig` from ``<configs_dir>/<name>.yaml``.

    Parameters
    ----------
    name : str
        Game identifier matching the YAML filename (without extension).
    configs_dir : str or Path, optional
        Override the default ``configs/games/`` directory.

    Returns
    -------
    GameLoaderConfig

    Raises
    ------
    FileNotFoundError
        If no YAML file is found for ``name``.
    ValueError
        If the YAML contains unknown or missing fields.
    """
    search_dir = Path(configs_dir) if configs_dir else _CONFIGS_DIR
    config_path = search_dir / f"{name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"No game config found at {config_path}. "
            f"Available configs: {[p.stem for p in search_dir.glob('*.yaml')]}"
        )

    logger.info("Loading game config from %s", config_path)
    with open(config_path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if not isinstance(raw, dict):
        raise ValueError(
            f"Expected a YAML mapping in {config_path}, got {type(raw).__name__}"
        )

    raw = expand_env_vars(raw)

    valid_fields = {f.name for f in dataclasses.fields(GameLoaderConfig)}
    unknown = set(raw) - valid_fields
    if unknown:
        raise ValueError(
            f"Unknown fields in {config_path}: {sorted(unknown)}. "
            f"Valid fields: {sorted(valid_fields)}"
        )

    try:
        return GameLoaderConfig(**raw)
    except TypeError as exc:
        raise ValueError(
            f"Invalid config in {config_path}: {exc}. "
            f"Valid fields: {sorted(valid_fields)}"
        ) from exc
