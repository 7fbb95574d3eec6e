"""Error types for deferreds and joins."""

from __future__ import annotations

from typing import Any


class GratifyError(Exception):
    """Base class for errors raised by gratify itself."""


class AlreadyResolvedError(GratifyError, RuntimeError):
    """Raised when a deferred is resolved a second time.

    Resolving twice is a programming error, never a recoverable condition.
    """


class PendingError(GratifyError):
    """Raised when reading the result of a deferred that has not resolved."""


class DeferredFailure(GratifyError):
    """Failure value that is not an exception, raised on its behalf.

    Deferreds accept any object on the failure channel. When such a value
    has to be raised (``result()``, ``await``), it is wrapped here.
    """

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"deferred failed with {value!r}")

    def __repr__(self) -> str:
        return f"DeferredFailure(value={self.value!r})"


class AllOperationsFailed(GratifyError):
    """Every operation of a first-success join failed."""

    def __init__(self, failures: tuple[Any, ...]) -> None:
        self.failures = failures
        super().__init__(f"all {len(failures)} operations failed")

    def __repr__(self) -> str:
        return f"AllOperationsFailed(failures={self.failures!r})"


class JoinDefinitionError(GratifyError):
    """Join wiring violates its contract (unknown policy, double setup)."""
