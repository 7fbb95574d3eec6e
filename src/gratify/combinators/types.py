"""Join types: outcome slots, policies and configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

OutcomeKind = Literal["pending", "succeeded", "failed"]
PolicyKind = Literal["successes", "all_successes", "first_success"]


@dataclass(frozen=True)
class Outcome:
    """
    Per-operation slot of a join.

    Kinds:
    - pending: the operation has not resolved yet
    - succeeded: the operation succeeded with ``value``
    - failed: the operation failed with ``value`` as its error

    A succeeded outcome with ``value=None`` is a real result, distinct from
    pending.
    """

    kind: OutcomeKind
    value: Any = None

    @staticmethod
    def Pending() -> Outcome:
        return _PENDING

    @staticmethod
    def Succeeded(value: Any) -> Outcome:
        return Outcome(kind="succeeded", value=value)

    @staticmethod
    def Failed(error: Any) -> Outcome:
        return Outcome(kind="failed", value=error)

    @property
    def is_pending(self) -> bool:
        return self.kind == "pending"


_PENDING = Outcome(kind="pending")


@dataclass(frozen=True)
class JoinPolicy:
    """
    Completion policy of a join.

    Kinds:
    - successes: wait for every operation, succeed with the successful values
      in input order, never fail
    - all_successes: fail fast with the first failure by input position, or
      succeed with every value in input order
    - first_success: succeed with the chronologically first success
    """

    kind: PolicyKind

    @staticmethod
    def Successes() -> JoinPolicy:
        return JoinPolicy(kind="successes")

    @staticmethod
    def AllSuccesses() -> JoinPolicy:
        return JoinPolicy(kind="all_successes")

    @staticmethod
    def FirstSuccess() -> JoinPolicy:
        return JoinPolicy(kind="first_success")


class JoinConfig(BaseModel):
    """Options shared by every join policy.

    Attributes:
        name: Label used in log records and trace info.
        fail_when_all_fail: Make a first-success join fail with
            AllOperationsFailed once every operation has failed (including
            the zero-operation case). When False such a join never resolves.
        trace_outcomes: Record one trace event per operation outcome.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = None
    fail_when_all_fail: bool = True
    trace_outcomes: bool = True
