"""Search controller configuration.

A :class:`SearchConfig` holds the tunables of the blind-search loop:
action budget, strategy rotation period, settle time, and the policy
for an environment that stops mid-search.

Configs can be loaded from YAML files via :func:`load_search_config`,
with the same ``$VAR`` / ``${VAR:-default}`` expansion and field
validation as game loader configs.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from src.game_loader.config import expand_env_vars

logger = logging.getLogger(__name__)

_CONFIGS_DIR = Path(__file__).resolve().parent.parent.parent / "configs" / "search"


@dataclass
class SearchConfig:
    """Tunables for :class:`~src.search.controller.SearchController`.

    Parameters
    ----------
    budget : int
        Maximum number of moves per search.  Default 200.
    rotation_period : int
        Switch to the next strategy every this many attempts.
        Default 15.
    settle_s : float
        Seconds to wait after each move before observing.  Default 0.1.
    stop_check_interval : int
        Check for a stopped environment every this many attempts.
        Default 10.
    continue_on_stop : bool
        Keep issuing moves after the environment is seen stopped
        (``True``, the reference behaviour) or abort the search with
        an ``ENVIRONMENT_STOPPED`` outcome (``False``).
    progress_log_interval : int
        Log a progress line every this many attempts.  ``0`` disables
        progress logging.  Default 25.
    """

    budget: int = 200
    rotation_period: int = 15
    settle_s: float = 0.1
    stop_check_interval: int = 10
    continue_on_stop: bool = True
    progress_log_interval: int = 25

    def __post_init__(self) -> None:
        if self.budget < 0:
            raise ValueError(f"budget must be >= 0, got {self.budget}")
        if self.rotation_period < 1:
            raise ValueError(f"rotation_period must be >= 1, got {self.rotation_period}")
        if self.settle_s < 0:
            raise ValueError(f"settle_s must be >= 0, got {self.settle_s}")
        if self.stop_check_interval < 1:
            raise ValueError(
                f"stop_check_interval must be >= 1, got {self.stop_check_interval}"
            )
        if self.progress_log_interval < 0:
            raise ValueError(
                f"progress_log_interval must be >= 0, got {self.progress_log_interval}"
            )

    @classmethod
    def from_dict(cls, raw: dict[str, Any], source: str = "<dict>") -> "SearchConfig":
        """Build a config from a mapping, rejecting unknown keys.

        Raises
        ------
        ValueError
            On unknown fields or invalid values.
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        unknown = set(raw) - valid_fields
        if unknown:
            raise ValueError(
                f"Unknown fields in {source}: {sorted(unknown)}. "
                f"Valid fields: {sorted(valid_fields)}"
            )
        try:
            return cls(**raw)
        except TypeError as exc:
            raise ValueError(f"Invalid search config in {source}: {exc}") from exc

    def with_overrides(self, **overrides: Any) -> "SearchConfig":
        """Return a copy with non-``None`` overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)


def load_search_config(
    name: str = "default",
    configs_dir: str | Path | None = None,
) -> SearchConfig:
    """Load a :class:`SearchConfig` from ``<configs_dir>/<name>.yaml``.

    Parameters
    ----------
    name : str
        Config name (YAML filename without extension).
    configs_dir : str or Path, optional
        Override the default ``configs/search/`` directory.

    Returns
    -------
    SearchConfig

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the YAML is not a mapping or has unknown / invalid fields.
    """
    search_dir = Path(configs_dir) if configs_dir else _CONFIGS_DIR
    config_path = search_dir / f"{name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"No search config found at {config_path}. "
            f"Available configs: {[p.stem for p in search_dir.glob('*.yaml')]}"
        )

    logger.info("Loading search config from %s", config_path)
    with open(config_path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(
            f"Expected a YAML mapping in {config_path}, got {type(raw).__name__}"
        )

    raw = expand_env_vars(raw)
    # Env expansion yields strings; coerce back to the declared types.
    raw = _coerce_types(raw)
    return SearchConfig.from_dict(raw, source=str(config_path))


def _coerce_types(raw: dict[str, Any]) -> dict[str, Any]:
    """Convert string values to the field's declared scalar type."""
    types = {f.name: f.type for f in dataclasses.fields(SearchConfig)}
    coerced: dict[str, Any] = {}
    for key, value in raw.items():
        declared = types.get(key)
        if isinstance(value, str) and declared in ("int", "float", "bool"):
            if declared == "bool":
                coerced[key] = value.strip().lower() in ("1", "true", "yes", "on")
            elif declared == "int":
                coerced[key] = int(value)
            else:
                coerced[key] = float(value)
        else:
            coerced[key] = value
    return coerced
