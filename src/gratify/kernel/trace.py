"""Runtime trace of join activity.

Trace is runtime infrastructure: it never influences how a join resolves.
Events are appended flat; the parent/child tree is rebuilt on demand via
as_tree().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class Evidence:
    """A single recorded event.

    Attributes:
        action: What happened ("join_begin", "operation_failed", ...)
        id: Sequential event id, unique within a trace
        parent_id: Id of the enclosing event, if any
        timestamp: When the event was recorded (UTC)
        info: Event details
        duration_ms: Elapsed time, for events closing a span
    """

    action: str
    id: int = 0
    parent_id: int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    info: dict[str, Any] = field(default_factory=dict)
    duration_ms: float | None = None


class Trace:
    """Collects Evidence for one or more joins.

    Several joins may share one trace; each join parents its own events
    under its join_begin event. Single-threaded use only.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._events: list[Evidence] = []
        self._next_id: int = 0

    def record(
        self,
        action: str,
        info: dict[str, Any] | None = None,
        parent_id: int | None = None,
        duration_ms: float | None = None,
    ) -> int | None:
        """Record an event.

        Args:
            action: Event name
            info: Additional context
            parent_id: Id of the enclosing event
            duration_ms: Execution duration

        Returns:
            The event id, or None if tracing is disabled
        """
        if not self.enabled:
            return None

        event_id = self._next_id
        self._next_id += 1
        self._events.append(
            Evidence(
                action=action,
                id=event_id,
                parent_id=parent_id,
                info=info or {},
                duration_ms=duration_ms,
            )
        )
        return event_id

    def get_events(self) -> list[Evidence]:
        return list(self._events)

    def find_all(self, action: str) -> list[Evidence]:
        """Events whose action equals ``action``, in recording order."""
        return [ev for ev in self._events if ev.action == action]

    def as_tree(self) -> dict[int | None, list[int]]:
        """Map each parent id to the ids of its children."""
        tree: dict[int | None, list[int]] = {}
        for ev in self._events:
            tree.setdefault(ev.parent_id, []).append(ev.id)
        return tree

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        self._events.clear()
        self._next_id = 0
