"""Base exceptions shared across the runner."""


class HarnessError(Exception):
    """Base class for errors that end a run with a non-zero exit status."""


class SetupError(HarnessError):
    """Raised for fatal configuration problems detected before launch."""
