"""Search module — blind goal-seeking over opaque turn-based games.

Typical usage::

    from src.search import SearchController, load_search_config

    controller = SearchController(observer, actor, config=load_search_config())
    result = controller.search()
    if not result.succeeded:
        print(result.message)
"""

from .config import SearchConfig, load_search_config
from .controller import (
    SearchController,
    SearchOutcome,
    SearchPreconditionError,
    SearchResult,
    SearchSession,
)
from .strategies import (
    MalformedStrategyError,
    Strategy,
    StrategyCatalog,
    StrategyName,
)

__all__ = [
    "MalformedStrategyError",
    "SearchConfig",
    "SearchController",
    "SearchOutcome",
    "SearchPreconditionError",
    "SearchResult",
    "SearchSession",
    "Strategy",
    "StrategyCatalog",
    "StrategyName",
    "load_search_config",
]
