"""
Built-in decoders for fjson.

Provides primitive decoders and the path, collection and dispatch
combinators. Primitive factories accept an optional `path` (read that field
of the current object) and `fn` (transform the value).

Usage:
    from fjson import decoders as D

    person = D.record(
        Person,
        name=D.string("name"),
        email=D.optional_string("email"),
        tags=D.list_of(D.string(), "tags"),
    )
    person.decode({"name": "Ada", "tags": ["math"]})
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

from .context import get_mapper
from .core import Decoder, to_decoder
from .errors import (
    ARRAY_EXPECTED,
    BOOLEAN_EXPECTED,
    ERROR,
    INSTANT_INVALID,
    INVALID_ENUM_VALUE,
    JSON_ARRAY_EXPECTED,
    JSON_OBJECT_EXPECTED,
    NO_READER_FOUND,
    NUMBER_EXPECTED,
    PATH_NOT_FOUND,
    PATTERN_INVALID,
    STRING_EXPECTED,
    field_error,
)
from .schema import (
    BOOLEAN,
    DATE,
    DATE_TIME,
    EMPTY,
    INTEGER,
    NUMBER,
    STRING,
    ArraySchema,
    ObjectSchema,
    OneOfSchema,
    enum_schema,
    property_schema,
)
from .types import Json, ParseResult, Success, failure, sequence

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

TWO_PLACES = Decimal("0.01")

_ISO_LOCAL_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_ISO_LOCAL_DATE_TIME = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?", re.ASCII)


def _lookup(tree: Json, path: str) -> Json:
    if isinstance(tree, dict):
        return tree.get(path)
    return None


def _read_scoped(decoder: Decoder[T], node: Json, prefix: str) -> ParseResult[T]:
    """Run `decoder` on `node`, re-rooting its errors under `prefix`."""
    try:
        result = decoder.run(node)
    except Exception:
        logger.debug("Decoder raised while reading %r", prefix, exc_info=True)
        return failure(field_error(ERROR, path=prefix))
    return result.map_error(lambda errors: [e.repath(prefix) for e in errors])


def _with(decoder: Decoder[Any], path: str | None, fn: Callable[[Any], Any] | None) -> Decoder[Any]:
    if path is not None:
        decoder = field(path, decoder)
    if fn is not None:
        decoder = decoder.map(fn)
    return decoder


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float, Decimal)) and not isinstance(x, bool)


# =============================================================================
# Primitives
# =============================================================================


def _read_string(tree: Json) -> ParseResult[str]:
    if isinstance(tree, str):
        return Success(tree)
    return failure(field_error(STRING_EXPECTED))


def _read_int(tree: Json) -> ParseResult[int]:
    if _is_number(tree):
        try:
            return Success(int(tree))
        except (ValueError, OverflowError):
            pass
    return failure(field_error(NUMBER_EXPECTED))


def _read_float(tree: Json) -> ParseResult[float]:
    if _is_number(tree):
        return Success(float(tree))
    return failure(field_error(NUMBER_EXPECTED))


def _read_boolean(tree: Json) -> ParseResult[bool]:
    if isinstance(tree, bool):
        return Success(tree)
    return failure(field_error(BOOLEAN_EXPECTED))


def _read_decimal(tree: Json) -> ParseResult[Decimal]:
    if not isinstance(tree, str):
        return failure(field_error(STRING_EXPECTED))
    try:
        number = Decimal(tree)
    except InvalidOperation:
        return failure(field_error(PATTERN_INVALID))
    if not number.is_finite():
        return failure(field_error(PATTERN_INVALID))
    return Success(number.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


_STRING: Decoder[str] = Decoder(_read_string, STRING)
_INT: Decoder[int] = Decoder(_read_int, INTEGER)
_FLOAT: Decoder[float] = Decoder(_read_float, NUMBER)
_BOOLEAN: Decoder[bool] = Decoder(_read_boolean, BOOLEAN)
_DECIMAL: Decoder[Decimal] = Decoder(_read_decimal, NUMBER)


def string(path: str | None = None, fn: Callable[[str], Any] | None = None) -> Decoder[Any]:
    """
    Decode a JSON string.

    Usage:
        string()                   # the current node
        string("name")             # field "name" of the current object
        string("name", str.upper)  # ...then transformed
    """
    return _with(_STRING, path, fn)


def integer(path: str | None = None, fn: Callable[[int], Any] | None = None) -> Decoder[Any]:
    """Decode a JSON number as an int (fractions are truncated)."""
    return _with(_INT, path, fn)


def long(path: str | None = None, fn: Callable[[int], Any] | None = None) -> Decoder[Any]:
    """Same as `integer`; Python ints are unbounded."""
    return _with(_INT, path, fn)


def float_(path: str | None = None, fn: Callable[[float], Any] | None = None) -> Decoder[Any]:
    return _with(_FLOAT, path, fn)


def double(path: str | None = None, fn: Callable[[float], Any] | None = None) -> Decoder[Any]:
    """Same as `float_`; Python floats are double precision."""
    return _with(_FLOAT, path, fn)


def boolean(path: str | None = None, fn: Callable[[bool], Any] | None = None) -> Decoder[Any]:
    return _with(_BOOLEAN, path, fn)


def decimal(path: str | None = None, fn: Callable[[Decimal], Any] | None = None) -> Decoder[Any]:
    """
    Decode a decimal written as a JSON string, rounded half-up to 2 places.

    Usage:
        decimal().decode("5")       # Success(Decimal("5.00"))
        decimal().decode("x")       # Failure: pattern.invalid
        decimal().decode(5)         # Failure: string.expected
    """
    return _with(_DECIMAL, path, fn)


def enum_of(
    enum_cls: type[E], path: str | None = None, fn: Callable[[E], Any] | None = None
) -> Decoder[Any]:
    """Decode an Enum member from its name."""

    def to_member(name: str) -> ParseResult[E]:
        try:
            return Success(enum_cls[name])
        except KeyError:
            return failure(
                field_error(INVALID_ENUM_VALUE, *(member.name for member in enum_cls))
            )

    base = _STRING.flat_map_result(to_member).map_schema(lambda _: enum_schema(enum_cls))
    return _with(base, path, fn)


def _parse_with(
    parse: Callable[[str], T], message: str, schema: Any
) -> Decoder[T]:
    def convert(text: str) -> ParseResult[T]:
        try:
            return Success(parse(text))
        except ValueError:
            return failure(field_error(message))

    return _STRING.flat_map_result(convert).map_schema(lambda _: schema)


def local_date(fmt: str | None = None, path: str | None = None) -> Decoder[date]:
    """
    Decode a date from a string, with a strptime `fmt` or ISO 8601 by default.

    The ISO form is the extended one only ("2019-02-15"); the basic form
    "20190215" needs an explicit `fmt="%Y%m%d"`.
    """

    def parse(text: str) -> date:
        if fmt is None:
            if not _ISO_LOCAL_DATE.fullmatch(text):
                raise ValueError(f"Expected YYYY-MM-DD, got {text!r}")
            return date.fromisoformat(text)
        return datetime.strptime(text, fmt).date()

    return _with(_parse_with(parse, PATTERN_INVALID, DATE), path, None)


def iso_local_date(path: str | None = None) -> Decoder[date]:
    return local_date(None, path)


def local_datetime(fmt: str | None = None, path: str | None = None) -> Decoder[datetime]:
    """
    Decode a naive datetime, with a strptime `fmt` or ISO 8601 by default.

    The ISO form needs the extended date, a "T" separator and at least hours
    and minutes ("2019-02-15T10:30[:00[.123]]"). A bare date or an offset is
    rejected.
    """

    def parse(text: str) -> datetime:
        if fmt is not None:
            return datetime.strptime(text, fmt)
        if not _ISO_LOCAL_DATE_TIME.fullmatch(text):
            raise ValueError(f"Expected YYYY-MM-DDTHH:MM[:SS[.ffffff]], got {text!r}")
        value = datetime.fromisoformat(text)
        if value.tzinfo is not None:
            raise ValueError(f"Expected a local date-time, got offset in {text!r}")
        return value

    return _with(_parse_with(parse, PATTERN_INVALID, DATE_TIME), path, None)


def iso_local_datetime(path: str | None = None) -> Decoder[datetime]:
    return local_datetime(None, path)


def instant(path: str | None = None) -> Decoder[datetime]:
    """Decode an ISO 8601 timestamp with an offset ("Z" allowed) as a UTC datetime."""

    def parse(text: str) -> datetime:
        value = datetime.fromisoformat(text[:-1] + "+00:00" if text.endswith("Z") else text)
        if value.tzinfo is None:
            raise ValueError(f"Missing offset in {text!r}")
        return value.astimezone(timezone.utc)

    return _with(_parse_with(parse, INSTANT_INVALID, DATE_TIME), path, None)


def any_json() -> Decoder[Json]:
    """Accept any tree as-is."""
    return Decoder(Success, EMPTY)


def json_object(path: str | None = None) -> Decoder[dict[str, Any]]:
    def run(tree: Json) -> ParseResult[dict[str, Any]]:
        if isinstance(tree, dict):
            return Success(tree)
        return failure(field_error(JSON_OBJECT_EXPECTED))

    return _with(Decoder(run, ObjectSchema()), path, None)


def json_array(path: str | None = None) -> Decoder[list[Any]]:
    def run(tree: Json) -> ParseResult[list[Any]]:
        if isinstance(tree, list):
            return Success(tree)
        return failure(field_error(JSON_ARRAY_EXPECTED))

    return _with(Decoder(run, ArraySchema()), path, None)


def value(constant: T) -> Decoder[T]:
    """Ignore the tree and succeed with `constant`."""
    return Decoder(lambda _: Success(constant))


def value_from(factory: Callable[[], T]) -> Decoder[T]:
    """Ignore the tree and succeed with a fresh `factory()` result."""
    return Decoder(lambda _: Success(factory()))


# =============================================================================
# Path scoping
# =============================================================================


def field(path: str, decoder: Any, fn: Callable[[Any], Any] | None = None) -> Decoder[Any]:
    """
    Decode field `path` of the current object with `decoder`.

    Fails with path.not.found when the field is missing or null. Errors from
    `decoder` are re-rooted under `path`; an exception raised by it becomes
    an `error` failure at `path`.
    """
    inner = to_decoder(decoder)

    def run(tree: Json) -> ParseResult[Any]:
        node = _lookup(tree, path)
        if node is None:
            return failure(field_error(PATH_NOT_FOUND, path=path))
        return _read_scoped(inner, node, path)

    scoped: Decoder[Any] = Decoder(run, property_schema(path, inner.schema))
    return scoped if fn is None else scoped.map(fn)


def optional(path: str, decoder: Any, fn: Callable[[Any], Any] | None = None) -> Decoder[Any]:
    """
    Like `field`, but a missing or null field decodes to None.

    A present but invalid value still fails. The field is not required in
    the schema.
    """
    inner = to_decoder(decoder)

    def run(tree: Json) -> ParseResult[Any]:
        node = _lookup(tree, path)
        if node is None:
            return Success(None)
        return _read_scoped(inner, node, path)

    scoped: Decoder[Any] = Decoder(run, property_schema(path, inner.schema, required=False))
    return scoped if fn is None else scoped.map(fn)


def optional_string(path: str) -> Decoder[str | None]:
    return optional(path, _STRING)


def nullable(
    path: str,
    decoder: Any,
    fn: Callable[[Any], Any] | None = None,
    default: Any = None,
) -> Decoder[Any]:
    """`optional` with `default` in place of a missing value."""
    decoded = optional(path, decoder).map(lambda v: default if v is None else v)
    return decoded if fn is None else decoded.map(fn)


# =============================================================================
# Collections
# =============================================================================


def list_of(
    decoder: Any, path: str | None = None, fn: Callable[[list[Any]], Any] | None = None
) -> Decoder[Any]:
    """
    Decode every element of an array, accumulating all element errors.

    A missing or null array decodes to []. Null elements are skipped. Element
    errors are re-rooted under "path[i]" (or "[i]" without a path). A value
    that is not an array fails with array.expected at `path`, so inside an
    enclosing field it reads "outer.tags".

    Usage:
        list_of(string())                 # the current node
        list_of(string(), "tags")         # field "tags"
    """
    inner = to_decoder(decoder)
    prefix = path or ""

    def run(tree: Json) -> ParseResult[list[Any]]:
        node = tree if path is None else _lookup(tree, path)
        if node is None:
            return Success([])
        if not isinstance(node, list):
            return failure(field_error(ARRAY_EXPECTED, path=path))
        return sequence(
            [
                _read_scoped(inner, item, f"{prefix}[{i}]")
                for i, item in enumerate(node)
                if item is not None
            ]
        )

    array = ArraySchema(inner.schema)
    schema = array if path is None else property_schema(path, array)
    decoded: Decoder[Any] = Decoder(run, schema)
    return decoded if fn is None else decoded.map(fn)


def _distinct(values: list[Any]) -> frozenset[Any] | tuple[Any, ...]:
    try:
        return frozenset(values)
    except TypeError:
        pass
    seen: list[Any] = []
    for v in values:
        if v not in seen:
            seen.append(v)
    return tuple(seen)


def set_of(
    decoder: Any, path: str | None = None, fn: Callable[[frozenset[Any]], Any] | None = None
) -> Decoder[Any]:
    """
    `list_of`, deduplicated.

    Hashable elements give a frozenset. If any element is unhashable (dicts
    from `any_json`, non-frozen dataclasses, pydantic models) the result is a
    tuple of the distinct elements by `==`, in first-seen order.
    """
    decoded = list_of(decoder, path).map(_distinct)
    return decoded if fn is None else decoded.map(fn)


# =============================================================================
# Discriminated unions
# =============================================================================


@dataclass(frozen=True, slots=True)
class ReadCase(Generic[T]):
    """One arm of `one_of`: a discriminant predicate and the decoder it selects."""

    matches: Callable[..., bool]
    decoder: Decoder[T]

    @property
    def schema(self) -> Any:
        return self.decoder.schema


def _equals(expected: Any) -> Callable[..., bool]:
    def check(*values: Any) -> bool:
        actual = values[0] if len(values) == 1 else values
        return actual == expected

    return check


def case_of(match: Any, decoder: Any, *, literal: bool = False) -> ReadCase[Any]:
    """
    Build a `one_of` case.

    `match` is either a predicate, called with the discriminant value (or
    both values for a two-discriminant `one_of`), or a literal compared for
    equality (a tuple for two discriminants). Any callable counts as a
    predicate, classes included; to match a callable value itself, pass
    `literal=True`.

    Usage:
        case_of("dog", dog)
        case_of(lambda kind, version: kind == "dog" and version != "v1", dog)
        case_of(("cat", "v1"), cat)
        case_of(Dog, read_dog, literal=True)
    """
    predicate = _equals(match) if literal or not callable(match) else match
    return ReadCase(predicate, to_decoder(decoder))


def otherwise(decoder: Any) -> ReadCase[Any]:
    """A case that matches any discriminant."""
    return ReadCase(lambda *_: True, to_decoder(decoder))


def one_of(discriminant: Any, *cases: ReadCase[Any], at: str | None = None) -> Decoder[Any]:
    """
    Decode with the first case whose predicate accepts the discriminant.

    `discriminant` is a decoder, or a pair of decoders read together. With
    `at`, the selected case decodes field `at` instead of the current node.
    When no case matches the result is a no.reader.found failure.

    Usage:
        one_of(
            string("type"),
            case_of("dog", dog),
            case_of("cat", cat),
        )
        one_of(
            (string("type"), string("version")),
            case_of(("dog", "v1"), dog_v1),
            case_of(("dog", "v2"), dog_v2),
            at="data",
        )
    """
    if isinstance(discriminant, tuple):
        first, second = discriminant
        read_discriminant = to_decoder(first).and_(second)
        unpack = True
    else:
        read_discriminant = to_decoder(discriminant)
        unpack = False

    routes = [
        (case.matches, case.decoder if at is None else field(at, case.decoder))
        for case in cases
    ]

    def dispatch(tree: Json, discriminant_value: Any) -> ParseResult[Any]:
        args = discriminant_value if unpack else (discriminant_value,)
        try:
            for matches, decoder in routes:
                if matches(*args):
                    return decoder.run(tree)
        except Exception:
            logger.debug("one_of case raised for %r", discriminant_value, exc_info=True)
            return failure(field_error(ERROR))
        return failure(field_error(NO_READER_FOUND, discriminant_value))

    def run(tree: Json) -> ParseResult[Any]:
        return read_discriminant.run(tree).flat_map(lambda v: dispatch(tree, v))

    members = OneOfSchema(tuple(case.schema for case in cases))
    schema = members if at is None else property_schema(at, members)
    return Decoder(run, schema)


# =============================================================================
# Builders and bridges
# =============================================================================


def record(constructor: Callable[..., T], **decoders: Any) -> Decoder[T]:
    """
    Decode each keyword into a constructor argument, accumulating all errors.

    Usage:
        record(
            Viking,
            first_name=string("firstName"),
            last_name=string("lastName"),
            city=optional_string("city"),
        )
    """
    builder: Decoder[dict[str, Any]] = value({})
    for name, decoder in decoders.items():
        builder = builder.and_(decoder, lambda kwargs, v, name=name: {**kwargs, name: v})
    return builder.map(lambda kwargs: constructor(**kwargs))


def from_class(target: Any) -> Decoder[Any]:
    """
    Decode with the configured ObjectMapper (pydantic) into `target`.

    Any conversion failure becomes a single path-less `error` failure whose
    argument is the mapper's message. The schema is always empty.
    """

    def run(tree: Json) -> ParseResult[Any]:
        try:
            return Success(get_mapper().convert(tree, target))
        except Exception as e:
            logger.debug("Object mapper could not convert to %r", target, exc_info=True)
            return failure(field_error(ERROR, e))

    return Decoder(run, EMPTY)
