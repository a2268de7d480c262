"""Headless Chromium session driven through Playwright."""

import logging
from collections.abc import AsyncGenerator, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import CDPSession, Page, async_playwright

from harness_runner.browsers.base import BrowserSession, ConsoleMessage
from harness_runner.config import RunConfiguration

log = logging.getLogger(__name__)

LAUNCH_ARGS: Sequence[str] = ("--allow-file-access-from-files",)


@dataclass(frozen=True, kw_only=True)
class ChromiumSession(BrowserSession):
    """Chromium browser session with a single page."""

    page: Page = field(repr=False)
    devtools: CDPSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: RunConfiguration
    ) -> AsyncGenerator["ChromiumSession", None]:
        """Launch headless Chromium and close it when the context exits."""
        log.info("Launching browser: %s", config.browser_executable_path)
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(
                headless=True,
                executable_path=config.browser_executable_path,
                args=[*LAUNCH_ARGS, *config.browser_args],
            )
            try:
                page = await browser.new_page()
                devtools = await page.context.new_cdp_session(page)
                yield cls(page=page, devtools=devtools)
            finally:
                log.info("Closing browser")
                await browser.close()

    def set_navigation_timeout(self, timeout_ms: int) -> None:
        self.page.set_default_navigation_timeout(timeout_ms)

    def on_console(self, handler: Callable[[ConsoleMessage], None]) -> None:
        self.page.on("console", handler)

    async def expose_function(self, name: str, callback: Callable[..., Any]) -> None:
        await self.page.expose_function(name, callback)

    async def goto(self, uri: str) -> None:
        await self.page.goto(uri)

    async def send_devtools(
        self, method: str, params: Mapping[str, Any] | None = None
    ) -> Mapping[str, Any]:
        log.debug("DevTools call: %s", method)
        return await self.devtools.send(method, dict(params) if params else None)
