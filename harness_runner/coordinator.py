"""Run coordinator driving a single browser test run to its outcome."""

import asyncio
import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Literal, TextIO, TypeAlias

from playwright.async_api import Error as PlaywrightError

from harness_runner.bridge import CompletionBridge
from harness_runner.browsers.base import BrowserSession, SessionFactory
from harness_runner.browsers.chromium import ChromiumSession
from harness_runner.config import RunConfiguration
from harness_runner.console import ConsoleRelay
from harness_runner.coverage import CoverageRecorder
from harness_runner.errors import HarnessError
from harness_runner.models.outcome import RunOutcome, RunPayload

log = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Timeout - aborting tests."

RunState: TypeAlias = Literal[
    "idle", "launching", "navigated", "completed", "timed_out", "terminated"
]


class NavigationError(HarnessError):
    """Raised when the entrypoint cannot be loaded."""


class RunTimeoutError(HarnessError):
    """Raised when the suite does not report completion in time."""


@dataclass(kw_only=True)
class RunCoordinator:
    """Coordinates one run from browser launch to outcome.

    The timeout clock and the completion callback race; whichever settles
    first decides the run. The browser session is closed on every exit path.
    """

    config: RunConfiguration
    session_factory: SessionFactory = ChromiumSession.from_config
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    state: RunState = field(default="idle", init=False)
    history: list[RunState] = field(default_factory=list, init=False, repr=False)

    async def run(self) -> RunOutcome:
        """Run the suite and return its outcome.

        Returns:
            Outcome of a suite that reported completion in time

        Raises:
            RunTimeoutError: If the timeout fired before completion
            NavigationError: If the entrypoint could not be loaded
            PayloadError: If the suite reported a malformed payload

        """
        if self.state != "idle":
            raise RuntimeError(f"Coordinator already used (state={self.state})")
        started = time.perf_counter()

        self._transition("launching")
        try:
            async with self.session_factory(self.config) as session:
                return await self._run_session(session, started)
        finally:
            self._transition("terminated")

    async def _run_session(self, session: BrowserSession, started: float) -> RunOutcome:
        session.set_navigation_timeout(self.config.timeout_ms)
        session.on_console(ConsoleRelay(stream=self.stdout))

        recorder = None
        if self.config.coverage_dir is not None:
            recorder = CoverageRecorder(
                session=session, output_dir=self.config.coverage_dir
            )

        try:
            async with asyncio.timeout(self.config.timeout) as deadline:
                payload = await self._navigate_and_wait(session, recorder)
        except TimeoutError:
            if not deadline.expired():
                raise
            self._transition("timed_out")
            self._emit(TIMEOUT_MESSAGE)
            raise RunTimeoutError(
                f"Suite did not complete within {self.config.timeout_ms}ms"
            ) from None

        self._transition("completed")
        if recorder is not None:
            await recorder.flush()

        outcome = RunOutcome.from_payload(
            payload, wall_clock_ms=(time.perf_counter() - started) * 1000
        )
        self._emit(outcome.summary())
        return outcome

    async def _navigate_and_wait(
        self, session: BrowserSession, recorder: CoverageRecorder | None
    ) -> RunPayload:
        bridge = CompletionBridge()
        await bridge.install(session)
        if recorder is not None:
            await recorder.start()

        self._transition("navigated")
        log.info("Navigating to %s", self.config.entrypoint_uri)
        try:
            await session.goto(self.config.entrypoint_uri)
        except PlaywrightError as exc:
            raise NavigationError(
                f"Failed to load {self.config.entrypoint_uri}: {exc}"
            ) from exc

        return await bridge.wait()

    def _transition(self, state: RunState) -> None:
        log.info("Run state: %s -> %s", self.state, state)
        self.history.append(state)
        self.state = state

    def _emit(self, line: str) -> None:
        print(line, file=self.stderr, flush=True)
