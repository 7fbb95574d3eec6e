from .combinators import (
    Join,
    JoinConfig,
    JoinPolicy,
    Outcome,
    OutcomeTracker,
    all_successes,
    join_first_success,
    join_successes,
)
from .kernel import (
    AllOperationsFailed,
    AlreadyResolvedError,
    Deferred,
    DeferredFailure,
    Evidence,
    GratifyError,
    JoinDefinitionError,
    PendingError,
    Trace,
)
from .primitives import const, failure, failure_value, success

__all__ = [
    # Core
    "Deferred",
    # Primitives
    "success",
    "const",
    "failure",
    "failure_value",
    # Combinators
    "join_successes",
    "all_successes",
    "join_first_success",
    "Join",
    "JoinPolicy",
    "JoinConfig",
    "Outcome",
    "OutcomeTracker",
    # Errors
    "GratifyError",
    "AlreadyResolvedError",
    "PendingError",
    "DeferredFailure",
    "AllOperationsFailed",
    "JoinDefinitionError",
    # Tracing
    "Trace",
    "Evidence",
]
