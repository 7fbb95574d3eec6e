"""Join engine - aggregate N deferreds into one under a completion policy."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from functools import partial
from typing import Any

from gratify.combinators.types import JoinConfig, JoinPolicy, Outcome
from gratify.kernel.deferred import Deferred
from gratify.kernel.errors import AllOperationsFailed, JoinDefinitionError
from gratify.kernel.trace import Trace

logger = logging.getLogger(__name__)


class OutcomeTracker:
    """Outcome slots of a join, one per operation, indexed by input position.

    A slot moves from pending to succeeded or failed once; later outcomes
    for the same slot are ignored.
    """

    def __init__(self, size: int) -> None:
        self._slots: list[Outcome] = [Outcome.Pending()] * size
        self._success_order: list[int] = []
        self._failure_count = 0

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def slots(self) -> tuple[Outcome, ...]:
        return tuple(self._slots)

    @property
    def success_count(self) -> int:
        return len(self._success_order)

    @property
    def failure_count(self) -> int:
        return self._failure_count

    def record_success(self, index: int, value: Any) -> bool:
        """Mark slot ``index`` succeeded. Returns False if it was already set."""
        return self.record(index, Outcome.Succeeded(value))

    def record_failure(self, index: int, error: Any) -> bool:
        """Mark slot ``index`` failed. Returns False if it was already set."""
        return self.record(index, Outcome.Failed(error))

    def record(self, index: int, outcome: Outcome) -> bool:
        if not 0 <= index < len(self._slots):
            raise IndexError(f"outcome index {index} out of range for {len(self._slots)} slots")
        if outcome.is_pending:
            raise ValueError("cannot record a pending outcome")
        if not self._slots[index].is_pending:
            return False
        self._slots[index] = outcome
        if outcome.kind == "succeeded":
            self._success_order.append(index)
        else:
            self._failure_count += 1
        return True

    def successes(self) -> list[Any]:
        """Successful values in input order."""
        return [slot.value for slot in self._slots if slot.kind == "succeeded"]

    def failures(self) -> list[Any]:
        """Errors in input order."""
        return [slot.value for slot in self._slots if slot.kind == "failed"]

    def first_success(self) -> Any:
        """Value of the success that arrived first.

        Raises:
            LookupError: no operation has succeeded yet
        """
        if not self._success_order:
            raise LookupError("no operation has succeeded")
        return self._slots[self._success_order[0]].value

    def all_completed(self) -> bool:
        return self.success_count + self._failure_count >= len(self._slots)


class Join(Deferred[Any]):
    """Deferred that resolves once its operations satisfy ``policy``.

    Construction allocates one pending slot per operation but subscribes to
    nothing; ``setup()`` (or ``Join.start``) wires the callbacks. The join
    resolves at most once: outcomes that arrive afterwards still fill their
    slot but are otherwise ignored.

    A Join is itself a Deferred, so joins can be passed to other joins.
    """

    def __init__(
        self,
        operations: Sequence[Deferred[Any]],
        policy: JoinPolicy,
        config: JoinConfig | None = None,
        trace: Trace | None = None,
    ) -> None:
        super().__init__()
        self.operations: tuple[Deferred[Any], ...] = tuple(operations)
        self.policy = policy
        self.config = config or JoinConfig()
        self.trace = trace
        self.tracker = OutcomeTracker(len(self.operations))
        self._set_up = False
        self._finished = False
        self._span_id: int | None = None
        self._started_at = 0.0

    @classmethod
    def start(
        cls,
        operations: Sequence[Deferred[Any]],
        policy: JoinPolicy,
        config: JoinConfig | None = None,
        trace: Trace | None = None,
    ) -> Join:
        """Create a join and register its callbacks."""
        join = cls(operations, policy, config=config, trace=trace)
        join.setup()
        return join

    @property
    def label(self) -> str:
        return self.config.name or f"{self.policy.kind} join"

    def setup(self) -> None:
        """Subscribe to every operation.

        The policy is checked against the all-pending state first; if it is
        already satisfied (zero operations) the join resolves immediately
        and subscribes to nothing.

        Raises:
            JoinDefinitionError: on a second call, or for an unknown policy
        """
        if self._set_up:
            raise JoinDefinitionError(f"{self.label} is already set up")
        self._set_up = True
        self._started_at = time.perf_counter()

        if self.trace is not None:
            self._span_id = self.trace.record(
                "join_begin",
                info={
                    "join": self.label,
                    "policy": self.policy.kind,
                    "operations": len(self.operations),
                },
            )
        logger.debug("%s: waiting on %d operations", self.label, len(self.operations))

        if self._is_done():
            self._finish()
            return

        for index, operation in enumerate(self.operations):
            operation.callback(partial(self._on_success, index))
            operation.errback(partial(self._on_failure, index))

    def _on_success(self, index: int, value: Any) -> None:
        self._on_outcome(index, Outcome.Succeeded(value))

    def _on_failure(self, index: int, error: Any) -> None:
        self._on_outcome(index, Outcome.Failed(error))

    def _on_outcome(self, index: int, outcome: Outcome) -> None:
        if not self.tracker.record(index, outcome):
            return

        if self.trace is not None and self.config.trace_outcomes:
            self.trace.record(
                f"operation_{outcome.kind}",
                info={"index": index, "late": self._finished},
                parent_id=self._span_id,
            )

        if self._finished:
            logger.debug("%s: operation %d %s after resolution", self.label, index, outcome.kind)
            return

        logger.debug("%s: operation %d %s", self.label, index, outcome.kind)
        if self._is_done():
            self._finish()

    def _is_done(self) -> bool:
        tracker = self.tracker
        kind = self.policy.kind
        if kind == "successes":
            return tracker.all_completed()
        if kind == "all_successes":
            return tracker.failure_count > 0 or tracker.all_completed()
        if kind == "first_success":
            if tracker.success_count > 0:
                return True
            return self.config.fail_when_all_fail and tracker.all_completed()
        raise JoinDefinitionError(f"unknown join policy {kind!r}")

    def _resolution(self) -> Outcome:
        tracker = self.tracker
        kind = self.policy.kind
        if kind == "successes":
            return Outcome.Succeeded(tracker.successes())
        if kind == "all_successes":
            failures = tracker.failures()
            if failures:
                return Outcome.Failed(failures[0])
            return Outcome.Succeeded(tracker.successes())
        if kind == "first_success":
            if tracker.success_count > 0:
                return Outcome.Succeeded(tracker.first_success())
            return Outcome.Failed(AllOperationsFailed(tuple(tracker.failures())))
        raise JoinDefinitionError(f"unknown join policy {kind!r}")

    def _finish(self) -> None:
        self._finished = True
        resolution = self._resolution()

        if self.trace is not None:
            self.trace.record(
                "join_end",
                info={"join": self.label, "policy": self.policy.kind, "outcome": resolution.kind},
                parent_id=self._span_id,
                duration_ms=(time.perf_counter() - self._started_at) * 1000,
            )
        logger.debug(
            "%s: %s after %d of %d outcomes",
            self.label,
            resolution.kind,
            self.tracker.success_count + self.tracker.failure_count,
            len(self.operations),
        )

        if resolution.kind == "succeeded":
            self.succeed(resolution.value)
        else:
            self.fail(resolution.value)
