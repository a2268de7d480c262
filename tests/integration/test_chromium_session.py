"""Runs against a real headless Chromium, skipped when none is installed."""

import io
import json
from pathlib import Path

import pytest

from harness_runner.config import RunConfiguration
from harness_runner.coordinator import NavigationError, RunCoordinator, RunTimeoutError

pytestmark = pytest.mark.browser

SUITE = """<!doctype html>
<html>
  <body>
    <script src="suite.js"></script>
  </body>
</html>
"""

SCRIPT = """
function add(a, b) { return a + b; }
console.log("ok 1 - add");
console.warn("slow test");
window.addEventListener("load", () => {
  window.HARNESS_RUN_END({
    testCounts: { passed: add(1, 0), failed: %(failed)d, total: 1 + %(failed)d },
    runtime: 12.5,
  });
});
"""

HANGING = """<!doctype html>
<html><body><script>console.log("never finishes");</script></body></html>
"""


def write_suite(root: Path, *, failed: int = 0) -> str:
    """Write a one-test suite and return its file:// URI."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "index.html").write_text(SUITE)
    (root / "suite.js").write_text(SCRIPT % {"failed": failed})
    return (root / "index.html").resolve().as_uri()


def make_coordinator(config: RunConfiguration) -> RunCoordinator:
    """Create a coordinator capturing its output."""
    return RunCoordinator(config=config, stdout=io.StringIO(), stderr=io.StringIO())


async def test_passing_suite(browser_path: Path, tmp_path: Path) -> None:
    """Relays console output and reports the suite's counts."""
    config = RunConfiguration(
        browser_executable_path=browser_path,
        entrypoint_uri=write_suite(tmp_path / "test"),
        timeout_ms=20000,
    )
    coordinator = make_coordinator(config)

    outcome = await coordinator.run()

    assert outcome.succeeded is True
    assert outcome.test_counts.passed == 1
    assert outcome.suite_runtime_ms == 12.5
    assert isinstance(coordinator.stdout, io.StringIO)
    assert "ok 1 - add\n[warning] slow test\n" in coordinator.stdout.getvalue()
    assert isinstance(coordinator.stderr, io.StringIO)
    assert "✓ passed 1 / 1" in coordinator.stderr.getvalue()


async def test_failing_suite(browser_path: Path, tmp_path: Path) -> None:
    """Reports failed tests with a non-zero exit code."""
    config = RunConfiguration(
        browser_executable_path=browser_path,
        entrypoint_uri=write_suite(tmp_path / "test", failed=2),
        timeout_ms=20000,
    )

    outcome = await make_coordinator(config).run()

    assert outcome.exit_code == 1
    assert outcome.test_counts.failed == 2


async def test_coverage(browser_path: Path, tmp_path: Path) -> None:
    """Writes raw coverage for the suite script."""
    coverage_dir = tmp_path / "coverage" / "tmp"
    config = RunConfiguration(
        browser_executable_path=browser_path,
        entrypoint_uri=write_suite(tmp_path / "test"),
        timeout_ms=20000,
        coverage_dir=coverage_dir,
    )

    await make_coordinator(config).run()

    document = json.loads((coverage_dir / "out.json").read_text())
    urls = [record["url"] for record in document["result"]]
    assert any(url.endswith("/suite.js") for url in urls)
    assert all("functions" in record for record in document["result"])


async def test_timeout(browser_path: Path, tmp_path: Path) -> None:
    """Times out when the suite never reports."""
    (tmp_path / "index.html").write_text(HANGING)
    config = RunConfiguration(
        browser_executable_path=browser_path,
        entrypoint_uri=(tmp_path / "index.html").as_uri(),
        timeout_ms=2000,
    )
    coordinator = make_coordinator(config)

    with pytest.raises(RunTimeoutError):
        await coordinator.run()

    assert isinstance(coordinator.stderr, io.StringIO)
    assert coordinator.stderr.getvalue() == "Timeout - aborting tests.\n"


async def test_missing_entrypoint(browser_path: Path, tmp_path: Path) -> None:
    """Fails navigation for a file that does not exist."""
    config = RunConfiguration(
        browser_executable_path=browser_path,
        entrypoint_uri=(tmp_path / "missing.html").as_uri(),
        timeout_ms=20000,
    )

    with pytest.raises(NavigationError):
        await make_coordinator(config).run()
