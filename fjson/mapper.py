"""
ObjectMapper - the generic object mapper behind `from_class` and `auto`.

Converts between JSON trees and arbitrary Python types through pydantic
TypeAdapters, and between trees and JSON text through the `json` module.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

_T = TypeVar("_T")


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _adapter_for(target: Any) -> TypeAdapter[Any]:
    try:
        return _adapter(target)
    except TypeError:
        # Unhashable targets (e.g. some parametrised generics) skip the cache
        return TypeAdapter(target)


@dataclass(frozen=True, slots=True)
class ObjectMapper:
    """
    Tree <-> object and tree <-> text conversion settings.

    Args:
        strict: Use pydantic strict mode when converting trees to objects
        exclude_none: Omit None-valued fields when dumping objects to trees
        by_alias: Use field aliases when dumping objects to trees
        ensure_ascii: Escape non-ASCII characters when stringifying
        indent: Indentation used by pretty printing
        sort_keys: Sort object keys when stringifying
    """

    strict: bool = False
    exclude_none: bool = True
    by_alias: bool = True
    ensure_ascii: bool = False
    indent: int = 2
    sort_keys: bool = False

    def convert(self, tree: Any, target: type[_T] | Any) -> _T:
        """
        Convert a JSON tree into `target`.

        Raises:
            pydantic.ValidationError: if the tree does not fit the target
        """
        return _adapter_for(target).validate_python(tree, strict=self.strict)

    def to_tree(self, value: Any) -> Any:
        """Dump any pydantic-supported value to a JSON tree."""
        return _adapter_for(type(value)).dump_python(
            value,
            mode="json",
            exclude_none=self.exclude_none,
            by_alias=self.by_alias,
        )

    def stringify(self, tree: Any, pretty: bool = False) -> str:
        return json.dumps(
            tree,
            ensure_ascii=self.ensure_ascii,
            indent=self.indent if pretty else None,
            sort_keys=self.sort_keys,
            separators=None if pretty else (",", ":"),
        )

    def parse(self, text: str | bytes) -> Any:
        """
        Parse JSON text into a tree.

        Raises:
            ValueError: on malformed text (json.JSONDecodeError)
        """
        return json.loads(text)
