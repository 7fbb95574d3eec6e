"""Factories for deferreds that are already resolved."""

from __future__ import annotations

from typing import Any, TypeVar

from gratify.kernel.deferred import Deferred

V = TypeVar("V")


def success(*values: Any) -> Deferred[Any]:
    """Deferred that has already succeeded.

    With no arguments the value is None, with one argument it is that
    argument, with several it is the list of them.
    """
    deferred: Deferred[Any] = Deferred()
    if not values:
        deferred.succeed(None)
    elif len(values) == 1:
        deferred.succeed(values[0])
    else:
        deferred.succeed(list(values))
    return deferred


def const(value: V) -> Deferred[V]:
    """Deferred that has already succeeded with ``value``."""
    return success(value)


def failure(*args: Any) -> Deferred[Any]:
    """Deferred that has already failed with an exception.

    Accepts the forms ``failure("message")`` (RuntimeError),
    ``failure(ErrorClass)``, ``failure(ErrorClass, "message")`` and
    ``failure(error_instance)``.

    Raises:
        TypeError: if the arguments match none of those forms
    """
    deferred: Deferred[Any] = Deferred()
    deferred.fail(_build_exception(args))
    return deferred


def failure_value(value: Any) -> Deferred[Any]:
    """Deferred that has already failed with ``value`` as is, of any type."""
    deferred: Deferred[Any] = Deferred()
    deferred.fail(value)
    return deferred


def _build_exception(args: tuple[Any, ...]) -> BaseException:
    if len(args) == 1:
        (arg,) = args
        if isinstance(arg, str):
            return RuntimeError(arg)
        if isinstance(arg, BaseException):
            return arg
        if isinstance(arg, type) and issubclass(arg, BaseException):
            return arg()
    elif len(args) == 2:
        kind, message = args
        if isinstance(kind, type) and issubclass(kind, BaseException) and isinstance(message, str):
            return kind(message)
    raise TypeError(
        "failure() takes a message, an exception class, an exception class "
        f"and a message, or an exception instance; got {args!r}"
    )
