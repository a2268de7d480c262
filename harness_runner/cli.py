"""CLI entry point for the browser test harness runner."""

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from harness_runner.browsers.base import SessionFactory
from harness_runner.browsers.chromium import ChromiumSession
from harness_runner.config import resolve_run_configuration
from harness_runner.coordinator import RunCoordinator, RunTimeoutError
from harness_runner.errors import HarnessError, SetupError


async def run(
    environ: Mapping[str, str],
    *,
    timeout: str | None = None,
    uri: str | None = None,
    browser: str | None = None,
    coverage: bool = False,
    coverage_dir: Path | None = None,
    browser_args: Sequence[str] = (),
    session_factory: SessionFactory = ChromiumSession.from_config,
) -> int:
    """Run the browser test suite and return exit code."""
    log = logging.getLogger("harness_runner")

    try:
        config = resolve_run_configuration(
            environ,
            timeout=timeout,
            uri=uri,
            browser=browser,
            coverage=coverage,
            coverage_dir=coverage_dir,
            browser_args=browser_args,
        )
    except SetupError as exc:
        log.error("%s", exc)
        return 1

    coordinator = RunCoordinator(config=config, session_factory=session_factory)
    try:
        outcome = await coordinator.run()
    except RunTimeoutError:
        return 1
    except HarnessError as exc:
        log.error("%s", exc)
        return 1

    return outcome.exit_code


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run an in-page test suite in headless Chromium"
    )
    parser.add_argument(
        "--timeout",
        help="Run timeout in milliseconds (default: $TIMEOUT or 5000)",
    )
    parser.add_argument(
        "--uri",
        help="Entrypoint URI, used verbatim (default: $URI or test/index.html)",
    )
    parser.add_argument(
        "--browser",
        help="Browser executable (default: $CHROMIUM_PATH or a known location)",
    )
    parser.add_argument(
        "--browser-arg",
        action="append",
        default=[],
        dest="browser_args",
        help="Extra browser launch argument (repeatable)",
    )
    parser.add_argument(
        "--coverage",
        action="store_true",
        help="Collect JavaScript coverage (implied by $NODE_V8_COVERAGE)",
    )
    parser.add_argument(
        "--coverage-dir",
        type=Path,
        help="Coverage output directory (default: $NODE_V8_COVERAGE or coverage/tmp)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics on stderr",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            os.environ,
            timeout=args.timeout,
            uri=args.uri,
            browser=args.browser,
            coverage=args.coverage,
            coverage_dir=args.coverage_dir,
            browser_args=args.browser_args,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
