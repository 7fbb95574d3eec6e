"""Kernel layer - the Deferred primitive, errors and tracing."""

from gratify.kernel.deferred import Deferred, DeferredState, as_exception
from gratify.kernel.errors import (
    AllOperationsFailed,
    AlreadyResolvedError,
    DeferredFailure,
    GratifyError,
    JoinDefinitionError,
    PendingError,
)
from gratify.kernel.trace import Evidence, Trace

__all__ = [
    "Deferred",
    "DeferredState",
    "as_exception",
    # Errors
    "GratifyError",
    "AlreadyResolvedError",
    "PendingError",
    "DeferredFailure",
    "AllOperationsFailed",
    "JoinDefinitionError",
    # Tracing
    "Evidence",
    "Trace",
]
