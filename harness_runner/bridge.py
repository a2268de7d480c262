"""Completion callback carrying the suite result out of the page."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from harness_runner.browsers.base import BrowserSession
from harness_runner.errors import HarnessError
from harness_runner.models.outcome import RunPayload

log = logging.getLogger(__name__)

CALLBACK_NAME = "HARNESS_RUN_END"


class PayloadError(HarnessError):
    """Raised when the page reports a malformed completion payload."""


@dataclass(kw_only=True)
class CompletionBridge:
    """One-shot future resolved by the page through an exposed callback.

    The page calls ``window.HARNESS_RUN_END({testCounts, runtime})`` once the
    suite has finished. Only the first call is honored; later calls are
    logged and ignored so the outcome stays deterministic.
    """

    name: str = CALLBACK_NAME
    _future: asyncio.Future[RunPayload] = field(
        default_factory=lambda: asyncio.get_running_loop().create_future(),
        init=False,
        repr=False,
    )
    _installed: bool = field(default=False, init=False)

    async def install(self, session: BrowserSession) -> None:
        """Expose the callback to the page. Call once, before navigation."""
        if self._installed:
            raise RuntimeError(f"Completion callback {self.name} already installed")
        self._installed = True
        await session.expose_function(self.name, self.resolve)
        log.info("Exposed completion callback %s", self.name)

    def resolve(self, data: Any) -> None:
        """Settle the future with the page's payload, first call only."""
        if self._future.done():
            log.warning("Ignoring duplicate %s call: %r", self.name, data)
            return

        try:
            payload = RunPayload.model_validate(data)
        except ValidationError as exc:
            self._future.set_exception(
                PayloadError(f"Invalid {self.name} payload {data!r}: {exc}")
            )
            return

        log.info("Suite completed: %s", payload.test_counts)
        self._future.set_result(payload)

    @property
    def done(self) -> bool:
        return self._future.done()

    async def wait(self) -> RunPayload:
        """Wait until the page reports completion."""
        return await asyncio.shield(self._future)
