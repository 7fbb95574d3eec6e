"""Deferred - single-resolution value with success and failure channels."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Generator
from typing import Any, Generic, Literal, TypeVar

from gratify.kernel.errors import AlreadyResolvedError, DeferredFailure, PendingError

V = TypeVar("V")
R = TypeVar("R")

DeferredState = Literal["pending", "succeeded", "failed"]

Callback = Callable[[Any], Any]
Errback = Callable[[Any], Any]


def as_exception(error: Any) -> BaseException:
    """Return ``error`` itself if it can be raised, else wrap it."""
    if isinstance(error, BaseException):
        return error
    return DeferredFailure(error)


class Deferred(Generic[V]):
    """A value that resolves exactly once, by succeeding or by failing.

    Observers subscribe with ``callback`` (success channel) or ``errback``
    (failure channel). Observers registered before resolution fire in
    subscription order when the matching channel resolves; observers
    registered afterwards fire immediately. Dispatch is synchronous: the
    observers run inside ``succeed``/``fail``.

    The failure channel carries any object, not only exceptions.
    """

    def __init__(self) -> None:
        self._state: DeferredState = "pending"
        self._value: Any = None
        self._callbacks: list[Callback] = []
        self._errbacks: list[Errback] = []

    def __repr__(self) -> str:
        if self._state == "pending":
            return f"<{type(self).__name__} pending>"
        return f"<{type(self).__name__} {self._state} {self._value!r}>"

    @property
    def state(self) -> DeferredState:
        return self._state

    @property
    def is_resolved(self) -> bool:
        return self._state != "pending"

    def callback(self, fn: Callable[[V], Any]) -> Deferred[V]:
        """Register ``fn`` on the success channel."""
        if self._state == "succeeded":
            fn(self._value)
        elif self._state == "pending":
            self._callbacks.append(fn)
        return self

    def errback(self, fn: Errback) -> Deferred[V]:
        """Register ``fn`` on the failure channel."""
        if self._state == "failed":
            fn(self._value)
        elif self._state == "pending":
            self._errbacks.append(fn)
        return self

    def bothback(self, fn: Callable[[Any], Any]) -> Deferred[V]:
        """Register ``fn`` on both channels."""
        return self.callback(fn).errback(fn)

    def succeed(self, value: V | None = None) -> None:
        """Resolve on the success channel.

        Raises:
            AlreadyResolvedError: if the deferred already resolved.
        """
        self._resolve("succeeded", value)

    def fail(self, error: Any) -> None:
        """Resolve on the failure channel with ``error`` (any object).

        Raises:
            AlreadyResolvedError: if the deferred already resolved.
        """
        self._resolve("failed", error)

    def _resolve(self, state: DeferredState, value: Any) -> None:
        if self._state != "pending":
            raise AlreadyResolvedError(
                f"cannot mark {state}: deferred already {self._state} with {self._value!r}"
            )
        self._state = state
        self._value = value
        observers = self._callbacks if state == "succeeded" else self._errbacks
        # Drop both lists first: the losing channel never fires.
        self._callbacks = []
        self._errbacks = []
        first_error: Exception | None = None
        for fn in observers:
            try:
                fn(value)
            except Exception as exc:
                # Every observer still fires; the first error reaches the resolver.
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def result(self) -> V:
        """Return the success value, or raise the failure.

        Raises:
            PendingError: the deferred has not resolved yet.
            DeferredFailure: the failure value is not an exception.
        """
        if self._state == "pending":
            raise PendingError("deferred has not resolved")
        if self._state == "failed":
            raise as_exception(self._value)
        return self._value

    def map(self, fn: Callable[[V], R]) -> Deferred[R]:
        """Transform the success value; failures pass through unchanged."""
        mapped: Deferred[R] = Deferred()

        def _on_success(value: V) -> None:
            try:
                new_value = fn(value)
            except Exception as exc:
                mapped.fail(exc)
                return
            mapped.succeed(new_value)

        self.callback(_on_success)
        self.errback(mapped.fail)
        return mapped

    def then(self, fn: Callable[[V], Deferred[R]]) -> Deferred[R]:
        """Chain a step that returns another deferred.

        The returned deferred follows the one produced by ``fn``.
        """
        chained: Deferred[R] = Deferred()

        def _on_success(value: V) -> None:
            try:
                following = fn(value)
            except Exception as exc:
                chained.fail(exc)
                return
            if not isinstance(following, Deferred):
                chained.fail(
                    TypeError(f"then() step must return a Deferred, got {type(following).__name__}")
                )
                return
            following.callback(chained.succeed)
            following.errback(chained.fail)

        self.callback(_on_success)
        self.errback(chained.fail)
        return chained

    def recover(self, fn: Callable[[Any], V]) -> Deferred[V]:
        """Turn a failure into a success value computed by ``fn``."""
        recovered: Deferred[V] = Deferred()

        def _on_failure(error: Any) -> None:
            try:
                value = fn(error)
            except Exception as exc:
                recovered.fail(exc)
                return
            recovered.succeed(value)

        self.callback(recovered.succeed)
        self.errback(_on_failure)
        return recovered

    def map_error(self, fn: Callable[[Any], Any]) -> Deferred[V]:
        """Transform the failure value; successes pass through unchanged."""
        mapped: Deferred[V] = Deferred()

        def _on_failure(error: Any) -> None:
            try:
                new_error = fn(error)
            except Exception as exc:
                mapped.fail(exc)
                return
            mapped.fail(new_error)

        self.callback(mapped.succeed)
        self.errback(_on_failure)
        return mapped

    # asyncio bridge

    def to_future(self, loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Future[V]:
        """Return an asyncio future that mirrors this deferred.

        Must be called with a running loop unless ``loop`` is given.
        """
        if loop is None:
            loop = asyncio.get_running_loop()
        future: asyncio.Future[V] = loop.create_future()

        def _on_success(value: V) -> None:
            if not future.done():
                future.set_result(value)

        def _on_failure(error: Any) -> None:
            if future.done():
                return
            if isinstance(error, asyncio.CancelledError):
                future.cancel()
            else:
                future.set_exception(as_exception(error))

        self.callback(_on_success)
        self.errback(_on_failure)
        return future

    def __await__(self) -> Generator[Any, None, V]:
        return self.to_future().__await__()

    @classmethod
    def from_future(cls, awaitable: Awaitable[V]) -> Deferred[V]:
        """Wrap an asyncio future or coroutine.

        The deferred resolves from the event loop once the awaitable
        completes. A cancelled future fails the deferred with its
        ``CancelledError``. If the deferred was resolved by other means
        before the future completes, the future's outcome is dropped.
        """
        future = asyncio.ensure_future(awaitable)
        deferred: Deferred[V] = cls()

        def _on_done(done: asyncio.Future[V]) -> None:
            if deferred.is_resolved:
                return
            if done.cancelled():
                deferred.fail(asyncio.CancelledError())
                return
            exc = done.exception()
            if exc is not None:
                deferred.fail(exc)
            else:
                deferred.succeed(done.result())

        future.add_done_callback(_on_done)
        return deferred
