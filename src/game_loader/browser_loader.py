"""Browser game loader -- serves a web game from a local HTTP server.

Flow: optional install command, then spawn ``serve_command`` in the
game directory, then poll the readiness endpoint until it answers (and,
when configured, until the page body contains ``readiness_marker``).
"""

from __future__ import annotations

import logging
import os
import signal
import socket
import subprocess
import sys
import time
import urllib.error
import urllib.request
from urllib.parse import urlparse

from src.game_loader.base import GameLoader, GameLoaderError
from src.game_loader.config import GameLoaderConfig

logger = logging.getLogger(__name__)


class BrowserGameLoader(GameLoader):
    """Loader for browser games served by a local server process.

    Parameters
    ----------
    config : GameLoaderConfig
        Must include at minimum ``game_dir``, ``serve_command`` and
        ``serve_port``.
    """

    def __init__(self, config: GameLoaderConfig) -> None:
        super().__init__(config)
        self._process: subprocess.Popen | None = None

    # -- Lifecycle -----------------------------------------------------

    def setup(self) -> None:
        """Run ``install_command`` in ``game_dir`` if one is configured."""
        if not self.config.install_command:
            logger.info("[%s] No install command configured, skipping setup", self.name)
            return

        game_dir = self._require_game_dir()
        logger.info(
            "[%s] Running install: %s (in %s)",
            self.name,
            self.config.install_command,
            game_dir,
        )
        result = subprocess.run(
            self.config.install_command,
            cwd=str(game_dir),
            shell=True,
            capture_output=True,
            text=True,
            env={**os.environ, **self.config.env_vars},
        )
        if result.returncode != 0:
            raise GameLoaderError(
                f"Install command failed (exit {result.returncode}):\n"
                f"stdout: {result.stdout[-500:]}\n"
                f"stderr: {result.stderr[-500:]}"
            )
        logger.info("[%s] Install completed successfully", self.name)

    def start(self) -> None:
        """Spawn the server and block until the game page is served.

        Raises
        ------
        GameLoaderError
            If the port is already taken, the server exits early, or
            the readiness timeout expires.
        """
        if self._running:
            logger.warning("[%s] Already running, stop first", self.name)
            return

        game_dir = self._require_game_dir()
        if self._tcp_probe():
            raise GameLoaderError(
                f"Port {self.config.serve_port} is already in use; "
                f"stop the other server or change serve_port"
            )

        logger.info(
            "[%s] Starting server: %s (in %s)",
            self.name,
            self.config.serve_command,
            game_dir,
        )
        kwargs: dict = dict(
            cwd=str(game_dir),
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            env={**os.environ, **self.config.env_vars},
        )
        # Own process group so stop() can take the whole tree down.
        if sys.platform == "win32":
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True

        self._process = subprocess.Popen(self.config.serve_command, **kwargs)
        logger.info("[%s] Server process PID: %d", self.name, self._process.pid)

        self._wait_until_ready()
        self._running = True
        logger.info("[%s] Game is ready at %s", self.name, self.config.url)

    def is_ready(self) -> bool:
        """TCP probe on the port, then HTTP GET of the readiness endpoint.

        Returns ``True`` when the response status is below 400 and, if
        ``readiness_marker`` is set, the body contains it.
        """
        if not self._tcp_probe():
            return False
        try:
            req = urllib.request.Request(self.config.readiness_endpoint, method="GET")
            with urllib.request.urlopen(req, timeout=5) as resp:
                if resp.status >= 400:
                    return False
                marker = self.config.readiness_marker
                if not marker:
                    return True
                body = resp.read().decode("utf-8", errors="replace")
                return marker in body
        except (urllib.error.URLError, OSError, ValueError):
            return False

    def stop(self) -> None:
        """Terminate the server process group."""
        if self._process is None:
            self._running = False
            return

        pid = self._process.pid
        logger.info("[%s] Stopping server (PID %d)", self.name, pid)
        try:
            if sys.platform == "win32":
                subprocess.run(
                    ["taskkill", "/F", "/T", "/PID", str(pid)],
                    capture_output=True,
                )
            else:
                os.killpg(os.getpgid(pid), signal.SIGTERM)
            self._process.wait(timeout=10)
        except (ProcessLookupError, OSError, subprocess.TimeoutExpired):
            logger.warning("[%s] Forceful termination of PID %d", self.name, pid)
            try:
                self._process.kill()
                self._process.wait(timeout=5)
            except (OSError, subprocess.TimeoutExpired) as exc:
                logger.debug("[%s] Kill of PID %d failed: %s", self.name, pid, exc)

        self._process = None
        self._running = False
        logger.info("[%s] Server stopped", self.name)

    # -- Internal -------------------------------------------------------

    def _require_game_dir(self):
        game_dir = self.config.game_dir
        if not game_dir.is_dir():
            raise GameLoaderError(f"Game directory does not exist: {game_dir}")
        return game_dir

    def _tcp_probe(self) -> bool:
        """Return ``True`` if the readiness host accepts a TCP connection."""
        parsed = urlparse(self.config.readiness_endpoint)
        host = parsed.hostname or "localhost"
        port = parsed.port or self.config.serve_port
        try:
            with socket.create_connection((host, port), timeout=2):
                return True
        except OSError:
            return False

    def _wait_until_ready(self) -> None:
        """Poll :meth:`is_ready` until it passes or the timeout expires.

        Raises
        ------
        GameLoaderError
            If the server exits or the timeout expires first.
        """
        deadline = time.monotonic() + self.config.readiness_timeout_s
        interval = self.config.readiness_poll_interval_s
        endpoint = self.config.readiness_endpoint

        logger.info(
            "[%s] Waiting for %s (timeout %.0fs)",
            self.name,
            endpoint,
            self.config.readiness_timeout_s,
        )

        while time.monotonic() < deadline:
            if self._process is not None and self._process.poll() is not None:
                stdout = self._process.stdout.read() if self._process.stdout else ""
                stderr = self._process.stderr.read() if self._process.stderr else ""
                raise GameLoaderError(
                    f"Server process exited with code "
                    f"{self._process.returncode} before becoming ready.\n"
                    f"stdout: {stdout[-500:]}\n"
                    f"stderr: {stderr[-500:]}"
                )
            if self.is_ready():
                return
            time.sleep(interval)

        self.stop()
        raise GameLoaderError(
            f"Server did not become ready within {self.config.readiness_timeout_s}s at {endpoint}"
        )
