"""Tests for completion payload and run outcome models."""

import pytest
from pydantic import ValidationError

from harness_runner.models.outcome import RunOutcome, RunPayload, TestCounts
from harness_runner.testing.factories import RunOutcomeFactory


def test_payload_parses_page_field_names() -> None:
    """Accepts the camelCase keys sent by the page."""
    payload = RunPayload.model_validate(
        {"testCounts": {"passed": 10, "failed": 0, "total": 10}, "runtime": 250.5}
    )

    assert payload.test_counts == TestCounts(passed=10, failed=0, total=10)
    assert payload.runtime == 250.5


def test_payload_ignores_unknown_keys() -> None:
    """Ignores extra keys the suite may add."""
    payload = RunPayload.model_validate(
        {
            "testCounts": {"passed": 1, "failed": 0, "total": 1, "skipped": 3},
            "runtime": 1,
            "status": "passed",
        }
    )

    assert payload.test_counts.total == 1


@pytest.mark.parametrize(
    "data",
    [
        None,
        {},
        {"runtime": 1},
        {"testCounts": {"passed": 1, "failed": 0}, "runtime": 1},
        {"testCounts": {"passed": -1, "failed": 0, "total": 1}, "runtime": 1},
        {"testCounts": {"passed": 1, "failed": 0, "total": 1}, "runtime": "fast"},
    ],
)
def test_payload_rejects_malformed_data(data: object) -> None:
    """Rejects payloads missing counts or with invalid values."""
    with pytest.raises(ValidationError):
        RunPayload.model_validate(data)


@pytest.mark.parametrize(
    ("failed", "succeeded", "exit_code"),
    [
        (0, True, 0),
        (1, False, 1),
        (7, False, 1),
    ],
)
def test_succeeded_iff_no_failures(
    failed: int, succeeded: bool, exit_code: int
) -> None:
    """Succeeds exactly when no test failed."""
    outcome = RunOutcomeFactory.build(
        test_counts=TestCounts(passed=3, failed=failed, total=3 + failed)
    )

    assert outcome.succeeded is succeeded
    assert outcome.exit_code == exit_code


def test_succeeded_ignores_passed_and_total() -> None:
    """An empty suite with no failures still succeeds."""
    outcome = RunOutcomeFactory.build(
        test_counts=TestCounts(passed=0, failed=0, total=0)
    )

    assert outcome.succeeded is True


def test_summary_for_passing_suite() -> None:
    """Formats the passed count for a passing suite."""
    outcome = RunOutcome(
        test_counts=TestCounts(passed=10, failed=0, total=10),
        suite_runtime_ms=250.9,
        wall_clock_ms=1234.7,
    )

    assert outcome.summary() == "✓ passed 10 / 10 (tests: 250ms / total: 1234ms)"


def test_summary_for_failing_suite() -> None:
    """Formats the failed count for a failing suite."""
    outcome = RunOutcome(
        test_counts=TestCounts(passed=8, failed=2, total=10),
        suite_runtime_ms=99.0,
        wall_clock_ms=300.0,
    )

    assert outcome.summary() == "✗ failed 2 / 10 (tests: 99ms / total: 300ms)"


def test_from_payload() -> None:
    """Copies counts and runtime from the payload."""
    payload = RunPayload(
        test_counts=TestCounts(passed=2, failed=1, total=3), runtime=42.0
    )

    outcome = RunOutcome.from_payload(payload, wall_clock_ms=100.0)

    assert outcome.test_counts == payload.test_counts
    assert outcome.suite_runtime_ms == 42.0
    assert outcome.wall_clock_ms == 100.0
