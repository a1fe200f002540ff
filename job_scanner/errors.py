"""Exception types raised by the scanner."""

from __future__ import annotations


class JobScannerError(Exception):
    """Base class for scanner errors."""


class SourceFetchError(JobScannerError):
    """A source kept failing after every retry attempt. Aborts the run."""

    def __init__(self, source: str, attempts: int) -> None:
        super().__init__(f"source {source!r} failed after {attempts} attempt(s)")
        self.source = source
        self.attempts = attempts


class SourceTimeoutError(JobScannerError):
    """A single adapter call exceeded the orchestrator's timeout."""

    def __init__(self, source: str, timeout_s: float) -> None:
        super().__init__(f"source {source!r} timed out after {timeout_s:g}s")
        self.source = source
        self.timeout_s = timeout_s


class ConfigError(JobScannerError):
    """The configuration file could not be read or validated."""
