"""Relay of page console messages to the host's standard output."""

import logging
import sys
from dataclasses import dataclass, field
from typing import TextIO

from harness_runner.browsers.base import ConsoleMessage

log = logging.getLogger(__name__)

DEFAULT_LEVEL = "log"


def format_console_message(message: ConsoleMessage) -> str:
    """Format a console message, prefixing levels other than "log"."""
    level = message.type
    prefix = "" if level == DEFAULT_LEVEL else f"[{level}] "
    return prefix + message.text


@dataclass(frozen=True, kw_only=True)
class ConsoleRelay:
    """Console event handler writing each message to a stream.

    Failures are logged and swallowed so a broken stream never interrupts
    the run.
    """

    stream: TextIO = field(default_factory=lambda: sys.stdout)

    def __call__(self, message: ConsoleMessage) -> None:
        try:
            self.stream.write(format_console_message(message) + "\n")
            self.stream.flush()
        except Exception:
            log.exception("Failed to relay console message")
