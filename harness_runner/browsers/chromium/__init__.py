"""Chromium browser session module."""

from harness_runner.browsers.chromium.session import ChromiumSession

__all__ = ["ChromiumSession"]
