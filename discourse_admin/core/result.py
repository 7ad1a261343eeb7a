"""Two-variant result type returned by every Discourse operation."""
from __future__ import annotations
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Generic, TypeVar

from .exceptions import DiscourseRequestError, DiscourseTransportError

T = TypeVar("T")
E = TypeVar("E")

_MISSING = object()


@dataclass(frozen=True)
class TransportFailure:
    """Reason attached to a result when the HTTP request itself failed."""

    description: str

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Success value or failure reason.

    Build with ``Result.ok(value)`` or ``Result.err(reason)``; never both.
    Accessing ``value`` on a failure (or ``error`` on a success) raises
    ValueError.
    """

    _value: Any = _MISSING
    _error: Any = _MISSING

    @classmethod
    def ok(cls, value: T) -> "Result[T, E]":
        return cls(_value=value)

    @classmethod
    def err(cls, error: E) -> "Result[T, E]":
        return cls(_error=error)

    @property
    def is_ok(self) -> bool:
        return self._error is _MISSING

    @property
    def is_err(self) -> bool:
        return not self.is_ok

    @property
    def value(self) -> T:
        if self.is_err:
            raise ValueError(f"Called value on Result.err: {self._error!r}")
        return self._value

    @property
    def error(self) -> E:
        if self.is_ok:
            raise ValueError("Called error on Result.ok")
        return self._error

    def unwrap(self) -> T:
        """Return the success value or raise the matching DiscourseRequestError."""
        if self.is_ok:
            return self._value
        if isinstance(self._error, TransportFailure):
            raise DiscourseTransportError(self._error.description)
        raise DiscourseRequestError(self._error)

    def __repr__(self) -> str:
        if self.is_ok:
            return f"Result.ok({self._value!r})"
        return f"Result.err({self._error!r})"


def raising(func: Callable[..., Result]) -> Callable[..., Any]:
    """Turn a result-returning operation into one that returns the value or raises."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs).unwrap()

    wrapper.__name__ = f"{func.__name__}_or_raise"
    wrapper.__qualname__ = f"{func.__qualname__}_or_raise"
    return wrapper
