"""
Type definitions for fjson.

Provides the ParseResult sum type (Success/Failure) and JSON tree aliases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

from .errors import FieldError, MissingValueError

T = TypeVar("T")
A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")

# Type aliases
Json = Any
JsonObject = dict[str, Any]
JsonArray = list[Any]
Errors = tuple[FieldError, ...]


class ParseResult(Generic[T]):
    """
    Outcome of running a decoder: either Success(value) or Failure(errors).

    Results are immutable; every operation returns a new instance.
    """

    __slots__ = ()

    def is_success(self) -> bool:
        return not self.is_error()

    def is_error(self) -> bool:
        raise NotImplementedError

    @property
    def errors(self) -> Errors:
        raise NotImplementedError

    def map(self, fn: Callable[[T], R]) -> ParseResult[R]:
        raise NotImplementedError

    def map_error(self, fn: Callable[[Errors], Iterable[FieldError]]) -> ParseResult[T]:
        raise NotImplementedError

    def flat_map(self, fn: Callable[[T], ParseResult[R]]) -> ParseResult[R]:
        raise NotImplementedError

    def get(self) -> T:
        """
        Return the success value.

        Raises:
            MissingValueError: on a Failure. Prefer fold() or get_or_else().
        """
        raise NotImplementedError

    def fold(self, on_error: Callable[[Errors], R], on_success: Callable[[T], R]) -> R:
        match self:
            case Success(value=value):
                return on_success(value)
            case Failure(errors=errors):
                return on_error(errors)
        raise TypeError(f"Unknown result: {self!r}")

    def get_or_else(self, factory: Callable[[], T]) -> T:
        return self.fold(lambda _: factory(), lambda v: v)

    def and_(self, other: ParseResult[B], fn: Callable[[T, B], R]) -> ParseResult[R]:
        """
        Combine two results, accumulating errors.

        Both successes -> Success(fn(a, b)); both failures -> Failure with
        this result's errors followed by the other's; otherwise the failing
        side alone.
        """
        match (self, other):
            case (Success(value=a), Success(value=b)):
                return Success(fn(a, b))
            case (Failure(errors=mine), Failure(errors=theirs)):
                return Failure(mine + theirs)
            case (Failure(errors=mine), _):
                return Failure(mine)
            case (_, Failure(errors=theirs)):
                return Failure(theirs)
        raise TypeError(f"Cannot combine {self!r} and {other!r}")

    def __and__(self, other: ParseResult[B]) -> ParseResult[tuple[T, B]]:
        return self.and_(other, lambda a, b: (a, b))

    def to_json(self) -> dict[str, Any]:
        """Render as {"value": ...} or {"errors": [...]}, for error reports."""
        return self.fold(
            lambda errors: {"errors": [e.to_json() for e in errors]},
            lambda value: {"value": value},
        )


@dataclass(frozen=True, slots=True)
class Success(ParseResult[T]):
    """Successful parse holding a value."""

    value: T

    def is_error(self) -> bool:
        return False

    @property
    def errors(self) -> Errors:
        return ()

    def map(self, fn: Callable[[T], R]) -> ParseResult[R]:
        return Success(fn(self.value))

    def map_error(self, fn: Callable[[Errors], Iterable[FieldError]]) -> ParseResult[T]:
        return self

    def flat_map(self, fn: Callable[[T], ParseResult[R]]) -> ParseResult[R]:
        return fn(self.value)

    def get(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure(ParseResult[T]):
    """Failed parse holding one or more FieldErrors."""

    errors: Errors  # type: ignore[assignment]

    def __post_init__(self) -> None:
        errors = tuple(self.errors)
        if not errors:
            raise ValueError("Failure requires at least one error")
        object.__setattr__(self, "errors", errors)

    def is_error(self) -> bool:
        return True

    def map(self, fn: Callable[[T], R]) -> ParseResult[R]:
        return Failure(self.errors)

    def map_error(self, fn: Callable[[Errors], Iterable[FieldError]]) -> ParseResult[T]:
        return Failure(tuple(fn(self.errors)))

    def flat_map(self, fn: Callable[[T], ParseResult[R]]) -> ParseResult[R]:
        return Failure(self.errors)

    def get(self) -> T:
        raise MissingValueError(f"Failure, no value present: {list(map(str, self.errors))}")


def success(value: T) -> ParseResult[T]:
    return Success(value)


def failure(*errors: FieldError) -> ParseResult[Any]:
    return Failure(errors)


def sequence(results: Sequence[ParseResult[T]]) -> ParseResult[list[T]]:
    """
    Collect results in order: every value on success, every error otherwise.

    Errors keep the order of the results they came from.
    """
    values: list[T] = []
    errors: list[FieldError] = []
    for result in results:
        match result:
            case Success(value=value):
                values.append(value)
            case Failure(errors=errs):
                errors.extend(errs)
    if errors:
        return Failure(tuple(errors))
    return Success(values)
