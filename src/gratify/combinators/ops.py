"""Join combinators: join_successes, all_successes, join_first_success."""

from __future__ import annotations

from typing import Any

from gratify.combinators.join import Join
from gratify.combinators.types import JoinConfig, JoinPolicy
from gratify.kernel.deferred import Deferred
from gratify.kernel.trace import Trace


def join_successes(
    *operations: Deferred[Any],
    config: JoinConfig | None = None,
    trace: Trace | None = None,
) -> Join:
    """Wait for every operation, then succeed with the successful results.

    Semantics:
        - Resolves once every operation has succeeded or failed
        - Succeeds with the successful values in the order the operations
          were passed, not the order they completed
        - Failures are dropped; the join itself never fails
        - With no operations, succeeds immediately with []

    If any operation never resolves, neither does the join.
    """
    return Join.start(operations, JoinPolicy.Successes(), config=config, trace=trace)


def all_successes(
    *operations: Deferred[Any],
    config: JoinConfig | None = None,
    trace: Trace | None = None,
) -> Join:
    """Succeed with every result, or fail as soon as one operation fails.

    Semantics:
        - Fails as soon as a failure is observed, without waiting for the
          remaining operations
        - The failure reported is the first by input position among those
          observed at that moment
        - Otherwise succeeds with all values in input order
        - With no operations, succeeds immediately with []
    """
    return Join.start(operations, JoinPolicy.AllSuccesses(), config=config, trace=trace)


def join_first_success(
    *operations: Deferred[Any],
    config: JoinConfig | None = None,
    trace: Trace | None = None,
) -> Join:
    """Succeed with the result of whichever operation succeeds first in time.

    When every operation fails (or there are none), fails with
    AllOperationsFailed carrying the failures in input order. Pass
    ``JoinConfig(fail_when_all_fail=False)`` to leave such a join pending
    instead.
    """
    return Join.start(operations, JoinPolicy.FirstSuccess(), config=config, trace=trace)
