"""
Helpers for building, printing and parsing JSON trees.

Objects are built from entries; an entry whose value is None contributes no
field, which is how optional values are omitted:

    from fjson import encoders as E
    from fjson.tree import arr, entry, obj

    ragnar = obj(
        entry("name", "Ragnar Lodbrok"),
        entry("city", None),                              # omitted
        entry("birthDate", date(766, 1, 1), E.local_date()),
        entry("sons", arr(obj(entry("name", "Bjorn")), obj(entry("name", "Ivar")))),
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, get_origin

from .context import get_mapper
from .core import Decoder, Format, to_decoder, to_encoder
from .decoders import from_class
from .types import Json, JsonArray, JsonObject, ParseResult

_ABSENT: Any = object()


@dataclass(frozen=True, slots=True)
class Entry:
    """A field of an object under construction. Absent entries are skipped."""

    name: str
    value: Json = _ABSENT

    @property
    def is_absent(self) -> bool:
        return self.value is _ABSENT


def entry(name: str, value: Any, encoder: Any = None) -> Entry:
    """
    Build an object entry.

    None means absent. Enum members are written by name. With `encoder` the
    value is converted first.
    """
    if value is None:
        return Entry(name)
    if encoder is not None:
        return Entry(name, to_encoder(encoder).write(value))
    if isinstance(value, Enum):
        return Entry(name, value.name)
    return Entry(name, value)


def new_object() -> JsonObject:
    return {}


def new_array() -> JsonArray:
    return []


def obj(*entries: Entry, base: Mapping[str, Json] | None = None) -> JsonObject:
    """New object from `base` (copied) plus every present entry, in order."""
    out: JsonObject = dict(base) if base is not None else new_object()
    for e in entries:
        if not e.is_absent:
            out[e.name] = e.value
    return out


def merge(first: Mapping[str, Json], second: Mapping[str, Json]) -> JsonObject:
    """New object holding the fields of both; `first` wins on conflicts."""
    return {**second, **first}


def arr(*nodes: Json) -> JsonArray:
    out = new_array()
    out.extend(nodes)
    return out


def stringify(tree: Json) -> str:
    return get_mapper().stringify(tree)


def pretty_print(tree: Json) -> str:
    return get_mapper().stringify(tree, pretty=True)


def parse(text: str | bytes) -> Json:
    """
    Parse JSON text with the active mapper.

    Raises:
        ValueError: on malformed text
    """
    return get_mapper().parse(text)


def to_json(value: Any, encoder: Any = None) -> Json:
    """Encode `value` with `encoder`, or through the ObjectMapper when omitted."""
    if encoder is None:
        return get_mapper().to_tree(value)
    return to_encoder(encoder).write(value)


def from_json(tree: Json, reader: Any) -> ParseResult[Any]:
    """
    Decode `tree` with `reader`.

    `reader` is a Decoder, a Format, a plain decoding function, or a type
    (class or parametrised generic such as `list[User]`) converted through
    the ObjectMapper.

    Usage:
        from_json({"name": "lodbrok"}, Viking)
        from_json([{"name": "lodbrok"}], list[Viking])
        from_json({"name": "lodbrok"}, viking_decoder)
    """
    if isinstance(reader, (Decoder, Format)):
        return to_decoder(reader).run(tree)
    if isinstance(reader, type) or get_origin(reader) is not None:
        return from_class(reader).run(tree)
    return to_decoder(reader).run(tree)
