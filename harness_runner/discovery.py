"""Locate the browser executable and the HTML entrypoint on disk."""

import logging
import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

from harness_runner.errors import SetupError

log = logging.getLogger(__name__)

BROWSER_PATHS: Sequence[str] = (
    "/usr/bin/chromium",
    "/usr/bin/google-chrome",
    "/usr/bin/chromium-browser",
    "/usr/bin/google-chrome-stable",
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
)

BROWSER_COMMANDS: Sequence[str] = (
    "chromium",
    "chromium-browser",
    "google-chrome",
    "google-chrome-stable",
)

ENTRYPOINT_PATHS: Sequence[str] = (
    "test/index.html",
    "tests/index.html",
)


class BrowserNotFoundError(SetupError):
    """Raised when no browser executable can be located."""


class EntrypointNotFoundError(SetupError):
    """Raised when no HTML entrypoint can be located."""


def find_browser(
    override: str | None = None,
    *,
    paths: Sequence[str] = BROWSER_PATHS,
    commands: Sequence[str] = BROWSER_COMMANDS,
    which: Callable[[str], str | None] = shutil.which,
) -> Path:
    """Find a browser executable.

    Candidates are checked one at a time in priority order: the override,
    then well-known install locations, then ``PATH`` lookups. The first
    existing candidate wins.

    Args:
        override: Explicit executable path. When given, it must exist.
        paths: Install locations to probe, highest priority first
        commands: Executable names to look up on ``PATH``
        which: ``PATH`` lookup function

    Returns:
        Path to the browser executable

    Raises:
        BrowserNotFoundError: If no candidate exists

    """
    if override:
        if Path(override).exists():
            return Path(override)
        raise BrowserNotFoundError(f"Browser executable not found: {override}")

    for candidate in paths:
        if Path(candidate).exists():
            log.debug("Using browser at %s", candidate)
            return Path(candidate)

    for command in commands:
        if (resolved := which(command)) is not None:
            log.debug("Using browser %s found on PATH at %s", command, resolved)
            return Path(resolved)

    raise BrowserNotFoundError(
        f"No chrome or chromium binary found. Tried: {[*paths, *commands]}"
    )


def find_entrypoint(
    cwd: Path,
    *,
    paths: Sequence[str] = ENTRYPOINT_PATHS,
) -> str:
    """Find the HTML entrypoint below cwd and return it as a file:// URI."""
    for candidate in paths:
        path = cwd / candidate
        if path.is_file():
            return path.resolve().as_uri()

    raise EntrypointNotFoundError(
        f"No test entrypoint found in {cwd}. Tried: {list(paths)}"
    )
