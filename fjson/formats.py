"""
Paired decoder and encoder factories.

A Format is accepted anywhere a Decoder or an Encoder is, so one value can
describe both directions of a field:

    from fjson import decoders as D, formats as F

    price = F.decimal()
    D.field("price", price).decode({"price": "3.5"})   # Success(Decimal("3.50"))
    price.encode(Decimal("3.5"))                      # "3.50"
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from . import decoders, encoders
from .core import Encoder, Format, to_decoder, to_encoder

E = TypeVar("E", bound=Enum)


def of(decoder: Any, encoder: Any) -> Format[Any]:
    return Format(to_decoder(decoder), to_encoder(encoder))


def string() -> Format[str]:
    return Format(decoders.string(), encoders.string())


def integer() -> Format[int]:
    return Format(decoders.integer(), encoders.integer())


def long() -> Format[int]:
    return Format(decoders.long(), encoders.long())


def float_() -> Format[float]:
    return Format(decoders.float_(), encoders.float_())


def double() -> Format[float]:
    return Format(decoders.double(), encoders.double())


def decimal() -> Format[Decimal]:
    return Format(decoders.decimal(), encoders.decimal())


def boolean() -> Format[bool]:
    return Format(decoders.boolean(), encoders.boolean())


def enum_of(enum_cls: type[E]) -> Format[E]:
    return Format(decoders.enum_of(enum_cls), encoders.enum_of())


def local_date(fmt: str | None = None) -> Format[date]:
    return Format(decoders.local_date(fmt), encoders.local_date(fmt))


def iso_local_date() -> Format[date]:
    return local_date()


def local_datetime(fmt: str | None = None) -> Format[datetime]:
    return Format(decoders.local_datetime(fmt), encoders.local_datetime(fmt))


def iso_local_datetime() -> Format[datetime]:
    return local_datetime()


def instant() -> Format[datetime]:
    return Format(decoders.instant(), encoders.instant())


def any_json() -> Format[Any]:
    return Format(decoders.any_json(), Encoder(lambda tree: tree))


def json_object() -> Format[dict[str, Any]]:
    return Format(decoders.json_object(), encoders.json_object())


def json_array() -> Format[list[Any]]:
    return Format(decoders.json_array(), encoders.json_array())


def list_of(element: Any) -> Format[list[Any]]:
    """
    Format for a list whose elements use `element` (a Format, or a decoder
    and encoder pair passed as a tuple).
    """
    if isinstance(element, tuple):
        element = of(*element)
    return Format(decoders.list_of(element), encoders.list_of(element))


def from_class(target: Any) -> Format[Any]:
    """Decode through the ObjectMapper into `target`, encode with `encoders.auto()`."""
    return Format(decoders.from_class(target), encoders.auto())
