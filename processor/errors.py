"""Error types for the photo pruning run.

PreflightError and its subclasses are fatal: they stop the run before any
file on the device is touched. DeviceCommandError describes a single failed
ADB command and is recoverable wherever the caller has a fallback.
"""

from __future__ import annotations


class PhotoPruneError(Exception):
    """Base error for the project."""


class PreflightError(PhotoPruneError):
    """A fatal precondition failure. ``hints`` are shown to the operator."""

    def __init__(self, message: str, hints: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.hints = list(hints or [])


class MissingDependencyError(PreflightError):
    pass


class DeviceUnavailableError(PreflightError):
    pass


class ScanPathMissingError(PreflightError):
    pass


class CatalogConfigError(PreflightError):
    pass


class CatalogUnreachableError(PreflightError):
    pass


class ListingFailedError(PreflightError):
    pass


class DeviceCommandError(PhotoPruneError):
    """One ADB command exited non-zero, timed out, or could not be started."""

    def __init__(self, command: str, detail: str = ""):
        super().__init__(f"{command}: {detail}" if detail else command)
        self.command = command
        self.detail = detail
