"""Errors raised by the scan and analyze operations, plus the run deadline."""

from __future__ import annotations

import time


class ValidationError(ValueError):
    """Caller input was rejected before any work started."""


class OperationTimeoutError(TimeoutError):
    """The whole scan or analyze run exceeded its wall-clock ceiling."""


class Deadline:
    """Wall-clock ceiling for one scan or analyze run.

    ``check()`` is called before and after every network round-trip; once
    the ceiling has passed the run fails as a whole.
    """

    def __init__(self, seconds: float | None, operation: str) -> None:
        self.seconds = seconds
        self.operation = operation
        self._expires_at = None if seconds is None else time.monotonic() + seconds

    def check(self) -> None:
        if self._expires_at is not None and time.monotonic() > self._expires_at:
            raise OperationTimeoutError(
                f"{self.operation} exceeded {self.seconds:g}s time limit"
            )
