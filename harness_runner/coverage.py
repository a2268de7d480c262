"""Raw per-script JavaScript coverage collected over the DevTools protocol."""

import asyncio
import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias

from harness_runner.browsers.base import BrowserSession

log = logging.getLogger(__name__)

OUTPUT_FILENAME = "out.json"

CoverageRecord: TypeAlias = Mapping[str, Any]


@dataclass(kw_only=True)
class CoverageRecorder:
    """Brackets a run with precise coverage collection.

    Coverage accumulates across navigations and records are kept exactly as
    the engine reports them, so they can be fed to V8 coverage tooling.
    """

    session: BrowserSession = field(repr=False)
    output_dir: Path
    _started: bool = field(default=False, init=False)

    async def start(self) -> None:
        """Start collecting. Must be called before navigation."""
        await self.session.send_devtools("Profiler.enable")
        await self.session.send_devtools(
            "Profiler.startPreciseCoverage", {"callCount": True, "detailed": True}
        )
        self._started = True
        log.info("Coverage collection started")

    async def stop(self) -> Sequence[CoverageRecord]:
        """Stop collecting and return the raw record of each named script."""
        if not self._started:
            raise RuntimeError("Coverage collection was not started")

        response = await self.session.send_devtools("Profiler.takePreciseCoverage")
        await self.session.send_devtools("Profiler.stopPreciseCoverage")
        await self.session.send_devtools("Profiler.disable")
        self._started = False

        # Anonymous scripts (evaluations) have no URL and nothing to map to.
        records = [entry for entry in response.get("result", []) if entry.get("url")]
        log.info("Coverage collection stopped: %d script(s)", len(records))
        return records

    async def write(self, records: Sequence[CoverageRecord]) -> Path:
        """Write records to out.json in the output directory."""
        path = self.output_dir / OUTPUT_FILENAME
        document = json.dumps({"result": list(records)})
        await asyncio.to_thread(_write_document, path, document)
        log.info("Wrote %d coverage record(s) to %s", len(records), path)
        return path

    async def flush(self) -> Path:
        """Stop collecting and write the records."""
        return await self.write(await self.stop())


def _write_document(path: Path, document: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document, encoding="utf-8")
