"""Models for the in-page completion payload and the run outcome."""

import math
from dataclasses import dataclass

from pydantic import Field, NonNegativeFloat, NonNegativeInt

from harness_runner.models.base import Model


class TestCounts(Model):
    """Test counts reported by the in-page suite."""

    __test__ = False

    passed: NonNegativeInt = Field(..., description="Number of passed tests")
    failed: NonNegativeInt = Field(..., description="Number of failed tests")
    total: NonNegativeInt = Field(..., description="Number of tests run")


class RunPayload(Model):
    """Payload handed to the completion callback by the in-page suite.

    Field aliases follow the JavaScript naming used by the page. Keys the
    runner does not know about are ignored.
    """

    test_counts: TestCounts = Field(..., alias="testCounts")
    runtime: NonNegativeFloat = Field(
        ..., description="Suite runtime in milliseconds, as measured in the page"
    )


@dataclass(frozen=True, kw_only=True)
class RunOutcome:
    """Result of a run that completed inside the timeout window.

    Timed out runs never produce an outcome.
    """

    test_counts: TestCounts
    suite_runtime_ms: float
    wall_clock_ms: float

    @classmethod
    def from_payload(cls, payload: RunPayload, wall_clock_ms: float) -> "RunOutcome":
        """Build the outcome from a completion payload."""
        return cls(
            test_counts=payload.test_counts,
            suite_runtime_ms=payload.runtime,
            wall_clock_ms=wall_clock_ms,
        )

    @property
    def succeeded(self) -> bool:
        """Whether the suite reported no failed tests."""
        return self.test_counts.failed == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1

    def summary(self) -> str:
        """Format the one-line summary written to stderr."""
        counts = self.test_counts
        prefix = (
            f"✓ passed {counts.passed}"
            if self.succeeded
            else f"✗ failed {counts.failed}"
        )
        return (
            f"{prefix} / {counts.total} "
            f"(tests: {math.floor(self.suite_runtime_ms)}ms / "
            f"total: {math.floor(self.wall_clock_ms)}ms)"
        )
