"""Abstract interface to a launched browser and its single page."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol, TypeAlias

from harness_runner.config import RunConfiguration


class ConsoleMessage(Protocol):
    """Console message emitted by the page."""

    @property
    def type(self) -> str:
        """Severity level, e.g. "log", "warning", "error"."""

    @property
    def text(self) -> str:
        """Message text."""


class BrowserSession(ABC):
    """Live handle to a launched browser and its page.

    Sessions are created by a factory returning an async context manager
    (see ``SessionFactory``). Leaving the context closes the browser, so
    callers never close a session themselves.
    """

    @abstractmethod
    def set_navigation_timeout(self, timeout_ms: int) -> None:
        """Set the page-level navigation timeout."""

    @abstractmethod
    def on_console(self, handler: Callable[[ConsoleMessage], None]) -> None:
        """Subscribe to console messages for the lifetime of the session."""

    @abstractmethod
    async def expose_function(self, name: str, callback: Callable[..., Any]) -> None:
        """Expose a host callback to the page as ``window[name]``.

        Must be called before navigation to be visible to the page's scripts.
        """

    @abstractmethod
    async def goto(self, uri: str) -> None:
        """Navigate the page to uri and wait for it to load."""

    @abstractmethod
    async def send_devtools(
        self, method: str, params: Mapping[str, Any] | None = None
    ) -> Mapping[str, Any]:
        """Send a DevTools protocol command to the page and return its result."""


SessionFactory: TypeAlias = Callable[
    [RunConfiguration], AbstractAsyncContextManager[BrowserSession]
]
