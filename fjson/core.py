"""
Core classes for fjson.

Provides Decoder, Encoder and Format dataclasses with functional composition.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Iterable, TypeVar

from .schema import EMPTY, OneOfSchema, SchemaNode
from .types import Json, ParseResult, Success

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

_MISSING: Any = object()


def _pair(a: Any, b: Any) -> tuple[Any, Any]:
    return (a, b)


@dataclass(frozen=True, slots=True)
class Decoder(Generic[T]):
    """
    Immutable decoder node.

    Pairs a function from a JSON tree to a ParseResult with the schema of
    what it accepts. Every combinator returns a new Decoder whose schema is
    derived from its parts.
    """

    run: Callable[[Json], ParseResult[T]]
    schema: SchemaNode = EMPTY

    def __call__(self, tree: Json) -> ParseResult[T]:
        return self.run(tree)

    def decode(self, tree: Json) -> ParseResult[T]:
        """
        Decode a tree.

        Returns:
            Success(value) if the tree is accepted
            Failure((FieldError, ...)) with every problem found otherwise
        """
        return self.run(tree)

    def json_schema(self) -> dict[str, Any]:
        """Render the schema as a standalone JSON Schema document."""
        return self.schema.compute_schema().render()

    def and_(self, other: Any, fn: Callable[[T, Any], R] | None = None) -> Decoder[R]:
        """
        Run both decoders on the same tree and combine their values with `fn`.

        Both sides always run, so errors from each accumulate (this side's
        first). Without `fn` the values are paired in a tuple.

        Usage:
            string("first").and_(string("last"), lambda f, l: f"{f} {l}")
            string("first") & string("last")
        """
        other_d = to_decoder(other)
        combine = fn if fn is not None else _pair

        def run(tree: Json) -> ParseResult[R]:
            return self.run(tree).and_(other_d.run(tree), combine)

        return Decoder(run, self.schema.and_(other_d.schema))

    def __and__(self, other: Any) -> Decoder[tuple[T, Any]]:
        return self.and_(other)

    def or_else(self, fallback: Any) -> Decoder[T]:
        """
        Try this decoder, then `fallback` against the same tree on failure.

        Usage:
            string("tags").or_else(list_of(string(), "tags").map(",".join))
            string() | integer(fn=str)
        """
        fallback_d = to_decoder(fallback)

        def run(tree: Json) -> ParseResult[T]:
            result = self.run(tree)
            if result.is_error():
                return fallback_d.run(tree)
            return result

        return Decoder(run, OneOfSchema((self.schema, fallback_d.schema)))

    def __or__(self, fallback: Any) -> Decoder[T]:
        return self.or_else(fallback)

    def or_default(
        self,
        default: T = _MISSING,
        *,
        default_factory: Callable[[], T] | None = None,
    ) -> Decoder[T]:
        """
        Succeed with a default when this decoder fails.

        Usage:
            integer("retries").or_default(3)
            list_of(string(), "tags").or_default(default_factory=list)
        """
        if (default is _MISSING) == (default_factory is None):
            raise TypeError("Provide exactly one of default or default_factory")
        factory: Callable[[], T] = (
            default_factory if default_factory is not None else lambda: default
        )

        def run(tree: Json) -> ParseResult[T]:
            result = self.run(tree)
            if result.is_error():
                return Success(factory())
            return result

        return Decoder(run, self.schema.compute_schema())

    def map(self, fn: Callable[[T], R]) -> Decoder[R]:
        """Transform the decoded value. The schema is unchanged."""
        run = self.run
        return Decoder(lambda tree: run(tree).map(fn), self.schema)

    def flat_map(self, fn: Callable[[T], Any]) -> Decoder[R]:
        """
        Choose the next decoder from the decoded value.

        Deprecated: the continuation's schema is unknown until parse time, so
        the resulting decoder has an empty schema. Prefer `one_of`.
        """
        warnings.warn(
            "Decoder.flat_map loses the schema of the continuation; use one_of",
            DeprecationWarning,
            stacklevel=2,
        )
        run = self.run

        def chained(tree: Json) -> ParseResult[R]:
            return run(tree).flat_map(lambda value: to_decoder(fn(value)).run(tree))

        return Decoder(chained)

    def flat_map_result(self, fn: Callable[[T], ParseResult[R]]) -> Decoder[R]:
        """Validate or convert the decoded value further, keeping the schema."""
        run = self.run
        return Decoder(lambda tree: run(tree).flat_map(fn), self.schema)

    def map_schema(self, fn: Callable[[SchemaNode], SchemaNode]) -> Decoder[T]:
        return replace(self, schema=fn(self.schema))

    def with_schema_uri(self, uri: str) -> Decoder[T]:
        return self.map_schema(lambda s: s.with_schema_uri(uri))

    def with_id(self, id: str) -> Decoder[T]:
        return self.map_schema(lambda s: s.with_id(id))

    def with_title(self, title: str) -> Decoder[T]:
        return self.map_schema(lambda s: s.with_title(title))

    def with_description(self, description: str) -> Decoder[T]:
        return self.map_schema(lambda s: s.with_description(description))

    def with_examples(self, examples: Iterable[Any]) -> Decoder[T]:
        examples = tuple(examples)
        return self.map_schema(lambda s: s.with_examples(examples))


@dataclass(frozen=True, slots=True)
class Encoder(Generic[T]):
    """Immutable encoder node: a function from a value to a JSON tree."""

    write: Callable[[T], Json]

    def __call__(self, value: T) -> Json:
        return self.write(value)

    def encode(self, value: T) -> Json:
        return self.write(value)

    def contramap(self, fn: Callable[[U], T]) -> Encoder[U]:
        """
        Encode a `U` by first converting it to a `T`.

        Usage:
            string().contramap(lambda user: user.name)
        """
        write = self.write
        return Encoder(lambda value: write(fn(value)))


@dataclass(frozen=True, slots=True)
class Format(Generic[T]):
    """A Decoder and an Encoder for the same type."""

    decoder: Decoder[T]
    encoder: Encoder[T]

    @property
    def schema(self) -> SchemaNode:
        return self.decoder.schema

    def decode(self, tree: Json) -> ParseResult[T]:
        return self.decoder.run(tree)

    def encode(self, value: T) -> Json:
        return self.encoder.write(value)

    def json_schema(self) -> dict[str, Any]:
        return self.decoder.json_schema()

    def map_schema(self, fn: Callable[[SchemaNode], SchemaNode]) -> Format[T]:
        return Format(self.decoder.map_schema(fn), self.encoder)

    def bimap(self, decoded: Callable[[T], R], encoded: Callable[[R], T]) -> Format[R]:
        """
        Convert both directions at once.

        Usage:
            formats.string().bimap(Path, str)
        """
        return Format(self.decoder.map(decoded), self.encoder.contramap(encoded))


def to_decoder(d: Any) -> Decoder[Any]:
    """
    Coerce a value to a Decoder.

    Conversion rules:
        Decoder -> pass through
        Format -> its decoder
        Callable -> Decoder(run=callable) with an empty schema
    """
    if isinstance(d, Decoder):
        return d
    if isinstance(d, Format):
        return d.decoder
    if callable(d):
        return Decoder(d)
    raise TypeError(f"Cannot convert {type(d).__name__} to decoder")


def to_encoder(e: Any) -> Encoder[Any]:
    """
    Coerce a value to an Encoder.

    Conversion rules:
        Encoder -> pass through
        Format -> its encoder
        Callable -> Encoder(write=callable)
    """
    if isinstance(e, Encoder):
        return e
    if isinstance(e, Format):
        return e.encoder
    if callable(e):
        return Encoder(e)
    raise TypeError(f"Cannot convert {type(e).__name__} to encoder")
