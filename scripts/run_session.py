#!/usr/bin/env python
"""CLI entry point -- run N blind searches and generate a QA report.

Each run starts a fresh game session, steers the snake through the
strategy rotation until the score rises or the budget runs out, then
resets the game.  A JSON report is written to the output directory::

    # Game already served on http://localhost:3456:
    python scripts/run_session.py --runs 5 --browser chrome

    # Serve the game from SNAKE_GAME_DIR first, headless:
    python scripts/run_session.py --launch-server --headless

    # Quick profile with an abort-on-stop policy:
    python scripts/run_session.py --search-config quick --abort-on-stop
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from scripts._smoke_utils import (  # noqa: E402
    BrowserInstance,
    Timer,
    ensure_output_dir,
    setup_logging,
)

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    ivalue = int(value)
    if ivalue < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {ivalue}")
    return ivalue


def _non_negative_int(value: str) -> int:
    ivalue = int(value)
    if ivalue < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {ivalue}")
    return ivalue


def _non_negative_float(value: str) -> float:
    fvalue = float(value)
    if fvalue < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {fvalue}")
    return fvalue


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    argv : list[str] or None
        Command-line arguments.  If None, uses ``sys.argv[1:]``.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Run N blind score searches against a live game and write a QA report.",
    )
    parser.add_argument(
        "--game",
        type=str,
        default="snake",
        help="Game plugin name (directory under games/). Default: snake",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Game config name under configs/games/.  Defaults to the plugin's game name.",
    )
    parser.add_argument(
        "--search-config",
        type=str,
        default="default",
        help="Search config name under configs/search/ (default: default)",
    )
    parser.add_argument(
        "--runs",
        type=_positive_int,
        default=3,
        help="Number of searches to run (default: 3)",
    )
    parser.add_argument(
        "--budget",
        type=_non_negative_int,
        default=None,
        help="Override the per-search move budget",
    )
    parser.add_argument(
        "--settle",
        type=_non_negative_float,
        default=None,
        help="Override the seconds to wait after each move",
    )
    parser.add_argument(
        "--rotation-period",
        type=_positive_int,
        default=None,
        help="Override how many attempts each strategy gets before rotating",
    )
    parser.add_argument(
        "--abort-on-stop",
        action="store_true",
        help="End a search as soon as the game is seen stopped",
    )
    parser.add_argument(
        "--browser",
        type=str,
        choices=["chrome", "edge", "firefox"],
        default=None,
        help="Browser to drive (default: first installed)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run the browser without a visible window",
    )
    parser.add_argument(
        "--launch-server",
        action="store_true",
        help="Serve the game with its configured loader before testing",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the JSON report (default: output/reports)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug-level logging",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the QA session.

    Parameters
    ----------
    argv : list[str] or None
        Command-line arguments.

    Returns
    -------
    int
        Exit code: 0 when every run completed, 1 on a setup failure.
    """
    args = parse_args(argv)
    setup_logging(args.verbose)

    from games import create_ports, load_game_plugin
    from src.game_loader import GameLoaderError, create_loader, load_game_config
    from src.orchestrator import SessionRunner
    from src.platform import LifecycleTimeoutError, SessionLifecycle
    from src.search import SearchController, load_search_config

    plugin = load_game_plugin(args.game)
    game_config = load_game_config(args.config or plugin.game_name)
    search_config = load_search_config(args.search_config).with_overrides(
        budget=args.budget,
        settle_s=args.settle,
        rotation_period=args.rotation_period,
        continue_on_stop=False if args.abort_on_stop else None,
    )
    output_dir = args.output_dir or ensure_output_dir("reports")

    loader = None
    if args.launch_server:
        loader = create_loader(game_config)
        try:
            loader.setup()
            loader.start()
        except GameLoaderError as exc:
            logger.error("Could not serve %s: %s", plugin.game_name, exc)
            return 1

    try:
        with BrowserInstance(
            game_config.url,
            window_size=(game_config.window_width, game_config.window_height),
            browser=args.browser,
            headless=args.headless,
        ) as browser:
            ports = create_ports(args.game, browser.driver)
            lifecycle = SessionLifecycle(ports.controls, ports.observer)
            try:
                lifecycle.wait_until_ready()
            except LifecycleTimeoutError as exc:
                logger.error("Game page never became drawable: %s", exc)
                return 1

            runner = SessionRunner(
                lifecycle,
                SearchController(ports.observer, ports.actor, config=search_config),
                n_runs=args.runs,
                output_dir=output_dir,
                game_name=plugin.game_name,
            )
            with Timer("session") as timer:
                report = runner.run()
            report_path = runner.save_report()
    finally:
        if loader is not None:
            loader.stop()

    summary = report.summary
    print("\n--- Session Summary ---")
    print(f"Runs:            {summary.get('total_runs', 0)}")
    print(f"Succeeded:       {summary.get('succeeded', 0)}")
    print(f"Exhausted:       {summary.get('exhausted', 0)}")
    print(f"Env stopped:     {summary.get('environment_stopped', 0)}")
    print(f"Success rate:    {summary.get('success_rate', 0.0):.1%}")
    print(f"Mean attempts:   {summary.get('mean_attempts', 0.0):.1f}")
    print(f"Duration:        {timer.elapsed:.1f}s")
    print(f"Report:          {report_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
