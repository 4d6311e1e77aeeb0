"""
Built-in encoders for fjson.

Usage:
    from fjson import encoders as E

    write_person = E.Encoder(
        lambda p: tree.obj(
            tree.entry("name", p.name),
            tree.entry("tags", p.tags, E.list_of(E.string())),
        )
    )
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable, TypeVar

from .context import get_mapper
from .core import Encoder, to_encoder
from .types import Json

T = TypeVar("T")

TWO_PLACES = Decimal("0.01")


def _identity(value: Any) -> Any:
    return value


def string() -> Encoder[str]:
    return Encoder(str)


def boolean() -> Encoder[bool]:
    return Encoder(bool)


def integer() -> Encoder[int]:
    return Encoder(int)


def long() -> Encoder[int]:
    return Encoder(int)


def float_() -> Encoder[float]:
    return Encoder(float)


def double() -> Encoder[float]:
    return Encoder(float)


def _write_decimal(value: Decimal | int | float | str) -> str:
    number = value if isinstance(value, Decimal) else Decimal(str(value))
    return str(number.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def decimal() -> Encoder[Decimal]:
    """Write a decimal as text with 2 places, rounded half-up ("5" -> "5.00")."""
    return Encoder(_write_decimal)


def enum_of() -> Encoder[Enum]:
    """Write an Enum member as its name."""
    return Encoder(lambda member: member.name)


def local_date(fmt: str | None = None) -> Encoder[date]:
    """Write a date with a strftime `fmt`, ISO 8601 by default."""
    if fmt is None:
        return Encoder(lambda d: d.isoformat())
    return Encoder(lambda d: d.strftime(fmt))


def local_datetime(fmt: str | None = None) -> Encoder[datetime]:
    """Write a datetime with a strftime `fmt`, ISO 8601 by default."""
    if fmt is None:
        return Encoder(lambda d: d.isoformat())
    return Encoder(lambda d: d.strftime(fmt))


def _write_instant(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat()
    return text.removesuffix("+00:00") + "Z"


def instant() -> Encoder[datetime]:
    """Write a datetime in UTC as ISO 8601 with a "Z" suffix; naive values are taken as UTC."""
    return Encoder(_write_instant)


def json_object() -> Encoder[dict[str, Any]]:
    return Encoder(_identity)


def json_array() -> Encoder[list[Any]]:
    return Encoder(_identity)


def list_of(encoder: Any) -> Encoder[Iterable[Any]]:
    """
    Write each element with `encoder`; a missing (None) collection writes [].

    Usage:
        list_of(string())(["a", "b"])    # ["a", "b"]
        list_of(string())(None)          # []
    """
    element = to_encoder(encoder)

    def write(values: Iterable[Any] | None) -> Json:
        if values is None:
            return []
        return [element.write(v) for v in values]

    return Encoder(write)


def optional(encoder: Any) -> Encoder[Any]:
    """Write None as JSON null, anything else with `encoder`."""
    inner = to_encoder(encoder)
    return Encoder(lambda value: None if value is None else inner.write(value))


def auto() -> Encoder[Any]:
    """
    Write any pydantic-supported value through the active ObjectMapper.

    The mapper is looked up at write time, so `mapper_context` applies.
    """
    return Encoder(lambda value: get_mapper().to_tree(value))
