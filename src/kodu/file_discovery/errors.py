"""Error types raised by file discovery."""

from __future__ import annotations


class DiscoveryError(Exception):
    """Base class for errors that abort a discovery call."""


class InvalidRootError(DiscoveryError):
    """The discovery root does not exist or is not a directory."""


class DiscoveryCancelledError(DiscoveryError):
    """
    Discovery was cancelled by the caller. Candidates collected so far are
    discarded, so `partial` is always empty.
    """

    def __init__(self, message: str = "Discovery cancelled") -> None:
        super().__init__(message)
        self.partial: list[str] = []


class UnsupportedPatternError(ValueError):
    """An ignore pattern uses syntax the glob engine does not support."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Unsupported ignore pattern {pattern!r}: {reason}")
        self.pattern: str = pattern
