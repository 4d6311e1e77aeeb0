"""
JSON Schema nodes derived from decoder composition.

Every node is an immutable dataclass; combining or annotating a node returns
a new one. `render()` produces the JSON Schema document as a plain dict.

Usage:
    schema = object_schema(property_schema("name", STRING))
    schema = schema.and_(object_schema(property_schema("age", INTEGER).not_required()))
    schema.with_title("Person").render()
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable


@dataclass(frozen=True, slots=True)
class SchemaNode:
    """Base schema node. Subclasses provide `render`."""

    def render(self) -> dict[str, Any]:
        raise NotImplementedError

    def and_(self, other: SchemaNode) -> SchemaNode:
        """
        Merge the schema of a decoder combined with another.

        Only objects (and properties, promoted to objects) merge; any other
        kind keeps this node unchanged.
        """
        return self

    def __and__(self, other: SchemaNode) -> SchemaNode:
        return self.and_(other)

    def compute_schema(self) -> SchemaNode:
        """Standalone form of this node (a bare Property becomes an Object)."""
        return self

    def to_root(self) -> RootSchema:
        return RootSchema(self)

    def with_schema_uri(self, uri: str) -> SchemaNode:
        return self.to_root().with_schema_uri(uri)

    def with_id(self, id: str) -> SchemaNode:
        return self.to_root().with_id(id)

    def with_title(self, title: str) -> SchemaNode:
        return self.to_root().with_title(title)

    def with_description(self, description: str) -> SchemaNode:
        return self.to_root().with_description(description)

    def with_examples(self, examples: Iterable[Any]) -> SchemaNode:
        return self.to_root().with_examples(examples)


@dataclass(frozen=True, slots=True)
class EmptySchema(SchemaNode):
    def render(self) -> dict[str, Any]:
        return {}

    def and_(self, other: SchemaNode) -> SchemaNode:
        return other


@dataclass(frozen=True, slots=True)
class PrimitiveSchema(SchemaNode):
    kind: str

    def render(self) -> dict[str, Any]:
        return {"type": self.kind}


@dataclass(frozen=True, slots=True)
class EnumSchema(SchemaNode):
    values: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def render(self) -> dict[str, Any]:
        return {"type": "string", "enum": list(self.values)}


@dataclass(frozen=True, slots=True)
class DateSchema(SchemaNode):
    def render(self) -> dict[str, Any]:
        return {"type": "string", "format": "date"}


@dataclass(frozen=True, slots=True)
class DateTimeSchema(SchemaNode):
    def render(self) -> dict[str, Any]:
        return {"type": "string", "format": "date-time"}


@dataclass(frozen=True, slots=True)
class ArraySchema(SchemaNode):
    items: SchemaNode | None = None

    def __post_init__(self) -> None:
        if self.items is not None:
            object.__setattr__(self, "items", self.items.compute_schema())

    def render(self) -> dict[str, Any]:
        if self.items is None:
            return {"type": "array"}
        return {"type": "array", "items": self.items.render()}


@dataclass(frozen=True, slots=True)
class Property(SchemaNode):
    """
    A named field of an object, with one or more accepted schemas.

    Nested properties are promoted to objects so that every type is a
    standalone schema.
    """

    name: str
    types: tuple[SchemaNode, ...]
    required: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", tuple(t.compute_schema() for t in self.types))

    def with_required(self, required: bool) -> Property:
        return replace(self, required=required)

    def not_required(self) -> Property:
        return replace(self, required=False)

    def and_(self, other: SchemaNode) -> SchemaNode:
        return ObjectSchema((self,)).and_(other)

    def compute_schema(self) -> SchemaNode:
        return ObjectSchema((self,))

    def _map_types(self, fn: Any) -> Property:
        return replace(self, types=tuple(fn(t) for t in self.types))

    def with_schema_uri(self, uri: str) -> Property:
        return self._map_types(lambda t: t.with_schema_uri(uri))

    def with_id(self, id: str) -> Property:
        return self._map_types(lambda t: t.with_id(id))

    def with_title(self, title: str) -> Property:
        return self._map_types(lambda t: t.with_title(title))

    def with_description(self, description: str) -> Property:
        return self._map_types(lambda t: t.with_description(description))

    def with_examples(self, examples: Iterable[Any]) -> Property:
        examples = tuple(examples)
        return self._map_types(lambda t: t.with_examples(examples))

    def render(self) -> dict[str, Any]:
        if len(self.types) == 1:
            return {self.name: self.types[0].render()}
        return {self.name: [t.render() for t in self.types]}


def _render_properties(properties: tuple[Property, ...]) -> dict[str, Any]:
    rendered: dict[str, Any] = {}
    for prop in properties:
        for name, schema in prop.render().items():
            rendered.setdefault(name, schema)
    return rendered


@dataclass(frozen=True, slots=True)
class ObjectSchema(SchemaNode):
    properties: tuple[Property, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", tuple(self.properties))

    def and_(self, other: SchemaNode) -> SchemaNode:
        match other:
            case ObjectSchema(properties=props):
                return ObjectSchema(self.properties + props)
            case Property():
                return ObjectSchema(self.properties + (other,))
        return self

    def render(self) -> dict[str, Any]:
        if not self.properties:
            return {"type": "object"}
        required = sorted(p.name for p in self.properties if p.required)
        return {
            "type": "object",
            "required": required,
            "properties": _render_properties(self.properties),
        }


@dataclass(frozen=True, slots=True)
class DefinitionsSchema(SchemaNode):
    properties: tuple[Property, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", tuple(self.properties))

    def render(self) -> dict[str, Any]:
        return {"definitions": _render_properties(self.properties)}


@dataclass(frozen=True, slots=True)
class RefSchema(SchemaNode):
    ref: str

    def render(self) -> dict[str, Any]:
        return {"$ref": self.ref}


def _distinct(schemas: Iterable[SchemaNode]) -> tuple[SchemaNode, ...]:
    out: list[SchemaNode] = []
    for schema in schemas:
        schema = schema.compute_schema()
        if schema not in out:
            out.append(schema)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class OneOfSchema(SchemaNode):
    """Exactly one member applies. Members are deduplicated, first wins."""

    members: tuple[SchemaNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", _distinct(self.members))

    def render(self) -> dict[str, Any]:
        return {"oneOf": [m.render() for m in self.members]}


@dataclass(frozen=True, slots=True)
class AnyOfSchema(SchemaNode):
    members: tuple[SchemaNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", tuple(m.compute_schema() for m in self.members))

    def render(self) -> dict[str, Any]:
        return {"anyOf": [m.render() for m in self.members]}


@dataclass(frozen=True, slots=True)
class AllOfSchema(SchemaNode):
    members: tuple[SchemaNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", tuple(m.compute_schema() for m in self.members))

    def render(self) -> dict[str, Any]:
        return {"allOf": [m.render() for m in self.members]}


@dataclass(frozen=True, slots=True)
class RootSchema(SchemaNode):
    """
    Document-level metadata wrapped around a schema.

    Setting metadata on a root whose wrapped node is itself a root updates
    the innermost one instead of stacking wrappers.
    """

    wrapped: SchemaNode
    schema_uri: str | None = None
    id: str | None = None
    title: str | None = None
    description: str | None = None
    examples: tuple[Any, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "examples", tuple(self.examples))

    def to_root(self) -> RootSchema:
        return self

    def _update(self, **changes: Any) -> RootSchema:
        if isinstance(self.wrapped, RootSchema):
            return replace(self, wrapped=self.wrapped._update(**changes))
        return replace(self, **changes)

    def with_schema_uri(self, uri: str) -> RootSchema:
        return self._update(schema_uri=uri)

    def with_id(self, id: str) -> RootSchema:
        return self._update(id=id)

    def with_title(self, title: str) -> RootSchema:
        return self._update(title=title)

    def with_description(self, description: str) -> RootSchema:
        return self._update(description=description)

    def with_examples(self, examples: Iterable[Any]) -> RootSchema:
        return self._update(examples=tuple(examples))

    def render(self) -> dict[str, Any]:
        rendered = dict(self.wrapped.render())
        for key, value in (
            ("$schema", self.schema_uri),
            ("$id", self.id),
            ("title", self.title),
            ("description", self.description),
        ):
            if value is not None:
                rendered[key] = value
        if self.examples:
            rendered["examples"] = list(self.examples)
        return rendered


EMPTY = EmptySchema()
STRING = PrimitiveSchema("string")
INTEGER = PrimitiveSchema("integer")
NUMBER = PrimitiveSchema("number")
BOOLEAN = PrimitiveSchema("boolean")
DATE = DateSchema()
DATE_TIME = DateTimeSchema()


def enum_schema(values: type[Enum] | Iterable[str]) -> EnumSchema:
    """Enum schema from an Enum class (member names) or explicit strings."""
    if isinstance(values, type) and issubclass(values, Enum):
        return EnumSchema(tuple(member.name for member in values))
    return EnumSchema(tuple(values))


def array_schema(items: SchemaNode | None = None) -> ArraySchema:
    return ArraySchema(items)


def property_schema(name: str, *types: SchemaNode, required: bool = True) -> Property:
    return Property(name, types, required)


def object_schema(*properties: Property) -> ObjectSchema:
    return ObjectSchema(properties)


def definitions_schema(*properties: Property) -> DefinitionsSchema:
    return DefinitionsSchema(properties)


def ref_schema(ref: str) -> RefSchema:
    return RefSchema(ref)


def one_of_schema(*members: SchemaNode) -> OneOfSchema:
    return OneOfSchema(members)


def any_of_schema(*members: SchemaNode) -> AnyOfSchema:
    return AnyOfSchema(members)


def all_of_schema(*members: SchemaNode) -> AllOfSchema:
    return AllOfSchema(members)
