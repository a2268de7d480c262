"""Run configuration resolved from the environment and CLI overrides."""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import Field, PositiveInt, ValidationError

from harness_runner.discovery import find_browser, find_entrypoint
from harness_runner.errors import SetupError
from harness_runner.models.base import Model

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_COVERAGE_DIR = "coverage/tmp"

TIMEOUT_ENV = "TIMEOUT"
URI_ENV = "URI"
COVERAGE_ENV = "NODE_V8_COVERAGE"
BROWSER_ENV = "CHROMIUM_PATH"


class ConfigError(SetupError):
    """Raised when a configuration value cannot be used."""


class RunConfiguration(Model):
    """Configuration for a single run, immutable once resolved."""

    browser_executable_path: Path = Field(..., description="Browser executable")
    entrypoint_uri: str = Field(..., description="URI of the HTML test entrypoint")
    timeout_ms: PositiveInt = Field(
        default=DEFAULT_TIMEOUT_MS, description="Run timeout in milliseconds"
    )
    coverage_dir: Path | None = Field(
        default=None, description="Coverage output directory (None disables coverage)"
    )
    browser_args: tuple[str, ...] = Field(
        default=(), description="Extra browser launch arguments"
    )

    @property
    def timeout(self) -> float:
        """Timeout in seconds."""
        return self.timeout_ms / 1000


def parse_timeout(value: str | None) -> int:
    """Parse a timeout in milliseconds, defaulting when unset.

    Raises:
        ConfigError: If the value is not a positive integer

    """
    if value is None or not value.strip():
        return DEFAULT_TIMEOUT_MS
    try:
        timeout_ms = int(value)
    except ValueError:
        raise ConfigError(f"Invalid timeout {value!r}: expected milliseconds") from None
    if timeout_ms <= 0:
        raise ConfigError(f"Invalid timeout {value!r}: must be positive")
    return timeout_ms


def resolve_coverage_dir(
    environ: Mapping[str, str],
    cwd: Path,
    *,
    enabled: bool = False,
    override: Path | None = None,
) -> Path | None:
    """Return the coverage output directory, or None when coverage is off."""
    if override is not None:
        return override if override.is_absolute() else cwd / override
    if env_dir := environ.get(COVERAGE_ENV):
        return cwd / env_dir
    if enabled:
        return cwd / DEFAULT_COVERAGE_DIR
    return None


def resolve_run_configuration(
    environ: Mapping[str, str],
    *,
    timeout: str | None = None,
    uri: str | None = None,
    browser: str | None = None,
    coverage: bool = False,
    coverage_dir: Path | None = None,
    browser_args: Sequence[str] = (),
    cwd: Path | None = None,
) -> RunConfiguration:
    """Resolve the run configuration.

    Explicit arguments take precedence over environment variables, which take
    precedence over discovery and defaults. Nothing here launches a browser.

    Args:
        environ: Process environment
        timeout: Timeout override in milliseconds
        uri: Entrypoint URI override, used verbatim
        browser: Browser executable override
        coverage: Enable coverage with the default output directory
        coverage_dir: Coverage output directory override (enables coverage)
        browser_args: Extra browser launch arguments
        cwd: Directory to resolve relative paths against

    Returns:
        The resolved configuration

    Raises:
        ConfigError: If the timeout is invalid
        BrowserNotFoundError: If no browser executable is found
        EntrypointNotFoundError: If no entrypoint is found

    """
    cwd = cwd or Path.cwd()

    if timeout is None:
        timeout = environ.get(TIMEOUT_ENV)
    timeout_ms = parse_timeout(timeout)
    entrypoint_uri = uri or environ.get(URI_ENV) or find_entrypoint(cwd)
    browser_path = find_browser(browser or environ.get(BROWSER_ENV))

    try:
        config = RunConfiguration(
            browser_executable_path=browser_path,
            entrypoint_uri=entrypoint_uri,
            timeout_ms=timeout_ms,
            coverage_dir=resolve_coverage_dir(
                environ, cwd, enabled=coverage, override=coverage_dir
            ),
            browser_args=tuple(browser_args),
        )
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    log.info(
        "Resolved configuration: browser=%s, uri=%s, timeout_ms=%d, coverage_dir=%s",
        config.browser_executable_path,
        config.entrypoint_uri,
        config.timeout_ms,
        config.coverage_dir,
    )
    return config
