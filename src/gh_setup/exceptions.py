"""
Custom exception classes for the gh-setup tool.
"""

from __future__ import annotations


class GhSetupError(Exception):
    """Base exception for gh-setup errors."""


class GatewayError(GhSetupError):
    """Raised when a call through the gh API gateway fails.

    This is the only error type the gateway lets escape. Batch operations catch
    it per item and record a failed outcome instead of aborting.
    """

    def __init__(self, message: str, *, returncode: int | None = None, command: str | None = None) -> None:
        super().__init__(message)
        self.message: str = message
        self.returncode: int | None = returncode
        self.command: str | None = command


class ConfigError(GhSetupError):
    """Raised when the configuration document is malformed."""


class PreflightError(GhSetupError):
    """Raised when gh is unusable or the target repository cannot be determined."""
