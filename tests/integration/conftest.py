"""Fixtures for integration tests launching a real browser."""

from pathlib import Path

import pytest

from harness_runner.discovery import BrowserNotFoundError, find_browser


@pytest.fixture(scope="session")
def browser_path() -> Path:
    """Locate an installed Chromium, skipping when there is none."""
    try:
        return find_browser()
    except BrowserNotFoundError:
        pytest.skip("no Chromium browser installed")
