"""
Path-tagged parse errors and canonical message keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

STRING_EXPECTED = "string.expected"
NUMBER_EXPECTED = "number.expected"
BOOLEAN_EXPECTED = "boolean.expected"
ARRAY_EXPECTED = "array.expected"
JSON_OBJECT_EXPECTED = "jsonobject.expected"
JSON_ARRAY_EXPECTED = "jsonarray.expected"
PATH_NOT_FOUND = "path.not.found"
PATTERN_INVALID = "pattern.invalid"
INSTANT_INVALID = "cannot.parse.into.instant"
INVALID_ENUM_VALUE = "invalid.enum.value"
NO_READER_FOUND = "no.reader.found"
ERROR = "error"


class MissingValueError(RuntimeError):
    """Raised when the value of a failed ParseResult is requested."""


@dataclass(frozen=True, slots=True)
class FieldError:
    """
    A single parse problem.

    `path` is None for errors raised against the current node, otherwise a
    chain such as "pojos[0].inner.value". Each enclosing path-scoped read
    prefixes its own segment via `repath`.
    """

    path: str | None
    message: str
    args: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(str(a) for a in self.args))

    def repath(self, prefix: str) -> FieldError:
        """Return a copy of this error re-rooted under `prefix`."""
        if self.path is None:
            path = prefix
        elif self.path.startswith("["):
            path = f"{prefix}{self.path}"
        else:
            path = f"{prefix}.{self.path}"
        return FieldError(path, self.message, self.args)

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.path is not None:
            out["path"] = self.path
        out["message"] = self.message
        out["args"] = list(self.args)
        return out

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


def field_error(message: str, *args: Any, path: str | None = None) -> FieldError:
    """
    Build a FieldError, stringifying `args`.

    Usage:
        field_error("string.expected")
        field_error("path.not.found", path="name")
        field_error("invalid.enum.value", "red", "green")
    """
    return FieldError(path, message, tuple(str(a) for a in args))
