"""Combinators - compose many deferreds into one."""

from gratify.combinators.join import Join, OutcomeTracker
from gratify.combinators.ops import all_successes, join_first_success, join_successes
from gratify.combinators.types import JoinConfig, JoinPolicy, Outcome

__all__ = [
    "Join",
    "JoinConfig",
    "JoinPolicy",
    "Outcome",
    "OutcomeTracker",
    "all_successes",
    "join_first_success",
    "join_successes",
]
