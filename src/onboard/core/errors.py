"""Error types for mac-onboard."""

from __future__ import annotations


class OnboardError(Exception):
    """Base class for all mac-onboard errors."""


class ConfigError(OnboardError):
    """Raised when the configuration is malformed."""


class CommandError(OnboardError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, message: str, command: str, returncode: int, output: str = "") -> None:
        """Initialize error."""
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.output = output


class DownloadError(OnboardError):
    """Raised when an HTTP download fails."""

    def __init__(self, message: str, url: str) -> None:
        """Initialize error."""
        super().__init__(message)
        self.url = url
