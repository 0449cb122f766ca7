"""Shared utilities for QA scripts.

Provides consistent logging setup, output directory management, timing,
and the Selenium browser launcher used by ``run_session.py`` and the integration tests.
"""

from __future__ import annotations

import logging
import shutil
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

# ---------------------------------------------------------------------------
# Output directory
# ---------------------------------------------------------------------------

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_OUTPUT_DIR = _PROJECT_ROOT / "output"


def ensure_output_dir(sub: str | None = None, base: Path | None = None) -> Path:
    """Create and return ``output/`` (or ``base``), optionally a subdirectory."""
    out = base or DEFAULT_OUTPUT_DIR
    if sub:
        out = out / sub
    out.mkdir(parents=True, exist_ok=True)
    return out


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

_COLORS = {
    "DEBUG": "\033[90m",  # grey
    "INFO": "\033[36m",  # cyan
    "WARNING": "\033[33m",  # yellow
    "ERROR": "\033[31m",  # red
    "CRITICAL": "\033[1;31m",  # bold red
}
_RESET = "\033[0m"


class _ColorFormatter(logging.Formatter):
    """Formatter that prepends a colored level tag and timestamp."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now(tz=timezone.utc).strftime("%H:%M:%S")
        color = _COLORS.get(record.levelname, "")
        tag = f"{color}[{ts}] {record.levelname:<8}{_RESET}"
        return f"{tag} {record.name}: {record.getMessage()}"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the root logger with colored output.

    Parameters
    ----------
    verbose : bool
        ``DEBUG`` level if ``True``, else ``INFO``.

    Returns
    -------
    logging.Logger
        The root logger.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_ColorFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    # Selenium's remote connection logs every HTTP call at DEBUG.
    logging.getLogger("selenium").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return root


# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------


class Timer:
    """Simple context-manager stopwatch."""

    def __init__(self, label: str = "") -> None:
        self.label = label
        self.elapsed: float = 0.0
        self._start: float = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        self.elapsed = time.perf_counter() - self._start


# ---------------------------------------------------------------------------
# Browser launcher (Selenium WebDriver)
# ---------------------------------------------------------------------------

_SUPPORTED_BROWSERS = ("chrome", "edge", "firefox")

_BROWSER_EXECUTABLES: dict[str, list[str]] = {
    "chrome": ["google-chrome", "google-chrome-stable", "chromium", "chromium-browser", "chrome"],
    "edge": ["microsoft-edge", "msedge"],
    "firefox": ["firefox"],
}

_WINDOWS_BROWSER_PATHS: dict[str, list[str]] = {
    "chrome": [
        r"C:\Program Files\Google\Chrome\Application\chrome.exe",
        r"C:\Program Files (x86)\Google\Chrome\Application\chrome.exe",
    ],
    "edge": [
        r"C:\Program Files\Microsoft\Edge\Application\msedge.exe",
        r"C:\Program Files (x86)\Microsoft\Edge\Application\msedge.exe",
    ],
    "firefox": [
        r"C:\Program Files\Mozilla Firefox\firefox.exe",
    ],
}

logger_browser = logging.getLogger(__name__ + ".browser")


def get_available_browsers() -> list[str]:
    """Return names of supported browsers installed on this machine.

    Checks ``PATH`` and, on Windows, the standard install locations.
    Does not launch anything.
    """
    available: list[str] = []
    for name in _SUPPORTED_BROWSERS:
        on_path = any(shutil.which(exe) for exe in _BROWSER_EXECUTABLES[name])
        on_disk = sys.platform == "win32" and any(
            Path(p).is_file() for p in _WINDOWS_BROWSER_PATHS[name]
        )
        if on_path or on_disk:
            available.append(name)
    return available


class BrowserInstance:
    """A Selenium-managed browser window with the game page loaded.

    Parameters
    ----------
    url : str
        The URL to open.
    settle_seconds : float
        Seconds to wait after navigation for the page to load.
    window_size : tuple[int, int]
        ``(width, height)`` in pixels.
    browser : str, optional
        ``"chrome"``, ``"edge"`` or ``"firefox"``.  Defaults to the
        first available.
    headless : bool
        Launch without a visible window.
    """

    def __init__(
        self,
        url: str,
        settle_seconds: float = 2.0,
        window_size: tuple[int, int] = (1024, 768),
        browser: str | None = None,
        headless: bool = False,
    ) -> None:
        from selenium import webdriver
        from selenium.webdriver.chrome.options import Options as ChromeOptions
        from selenium.webdriver.edge.options import Options as EdgeOptions
        from selenium.webdriver.firefox.options import Options as FirefoxOptions

        if browser is None:
            available = get_available_browsers()
            if not available:
                raise FileNotFoundError(
                    "No supported browser found. Install Chrome, Edge, or Firefox."
                )
            browser = available[0]
        if browser not in _SUPPORTED_BROWSERS:
            raise FileNotFoundError(
                f"Unknown browser {browser!r}. Supported: {list(_SUPPORTED_BROWSERS)}"
            )

        self.name: str = browser
        self.url: str = url
        self.headless = headless
        self._driver: webdriver.Remote | None = None

        w, h = window_size
        logger_browser.info("Launching %s via Selenium (headless=%s) ...", self.name, headless)

        if self.name in ("chrome", "edge"):
            opts = ChromeOptions() if self.name == "chrome" else EdgeOptions()
            opts.add_argument("--no-first-run")
            opts.add_argument("--no-default-browser-check")
            opts.add_argument("--disable-extensions")
            opts.add_argument(f"--window-size={w},{h}")
            if headless:
                opts.add_argument("--headless=new")
            if self.name == "chrome":
                self._driver = webdriver.Chrome(options=opts)
            else:
                self._driver = webdriver.Edge(options=opts)
        else:
            opts = FirefoxOptions()
            opts.set_preference("browser.shell.checkDefaultBrowser", False)
            opts.set_preference("datareporting.policy.dataSubmissionEnabled", False)
            opts.set_preference("toolkit.telemetry.reportingpolicy.firstRun", False)
            opts.add_argument(f"--width={w}")
            opts.add_argument(f"--height={h}")
            if headless:
                opts.add_argument("-headless")
            self._driver = webdriver.Firefox(options=opts)

        self._driver.get(url)
        self._driver.set_window_size(w, h)

        logger_browser.info("Browser ready — waiting %.1fs for page to settle ...", settle_seconds)
        time.sleep(settle_seconds)

    @property
    def driver(self):
        """The underlying Selenium WebDriver."""
        return self._driver

    def reload(self, settle_seconds: float = 1.0) -> None:
        """Navigate to the game URL again, giving every test a fresh page."""
        if self._driver is None:
            raise RuntimeError("Browser is closed")
        self._driver.get(self.url)
        time.sleep(settle_seconds)

    def close(self) -> None:
        """Quit the browser; safe to call twice."""
        if self._driver is None:
            return

        logger_browser.info("Closing %s via Selenium ...", self.name)
        try:
            self._driver.quit()
        except Exception as exc:
            logger_browser.debug("driver.quit() failed: %s", exc)
        self._driver = None
        logger_browser.info("Browser closed.")

    def __enter__(self) -> "BrowserInstance":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
