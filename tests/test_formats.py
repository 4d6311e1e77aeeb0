"""Tests for paired decoder/encoder formats."""

from datetime import date
from decimal import Decimal
from pathlib import PurePosixPath

import pytest

from fjson import Format, Success
from fjson import decoders as D
from fjson import encoders as E
from fjson import formats as F
from fjson.schema import DATE, NUMBER, STRING, array_schema, property_schema
from fjson.tree import entry, obj
from tests.models import Color, Viking


class TestFormats:
    """Test both directions of the built-in formats."""

    def test_string(self):
        fmt = F.string()
        assert fmt.decode("x") == Success("x")
        assert fmt.encode("x") == "x"
        assert fmt.schema == STRING
        assert fmt.json_schema() == {"type": "string"}

    def test_decimal(self):
        fmt = F.decimal()
        assert fmt.decode("3.5") == Success(Decimal("3.50"))
        assert fmt.encode(Decimal("3.5")) == "3.50"
        assert fmt.schema == NUMBER

    def test_enum(self):
        fmt = F.enum_of(Color)
        assert fmt.decode("green") == Success(Color.green)
        assert fmt.encode(Color.green) == "green"

    def test_local_date_with_format(self):
        fmt = F.local_date("%Y%m%d")
        assert fmt.decode("20190215") == Success(date(2019, 2, 15))
        assert fmt.encode(date(2019, 2, 15)) == "20190215"
        assert F.iso_local_date().schema == DATE

    @pytest.mark.parametrize(
        "fmt, value",
        [
            (F.integer(), 3),
            (F.long(), 2**40),
            (F.double(), 1.5),
            (F.float_(), 0.25),
            (F.boolean(), False),
            (F.json_object(), {"a": [1]}),
            (F.json_array(), [1, "a"]),
            (F.any_json(), None),
        ],
    )
    def test_encode_then_decode(self, fmt, value):
        assert fmt.decode(fmt.encode(value)) == Success(value)

    def test_list(self):
        fmt = F.list_of(F.string())
        assert fmt.decode(["a", "b"]) == Success(["a", "b"])
        assert fmt.encode(None) == []
        assert fmt.schema == array_schema(STRING)

    def test_list_from_pair(self):
        fmt = F.list_of((D.integer(), E.integer()))
        assert fmt.decode([1]) == Success([1])
        assert fmt.encode([1]) == [1]

    def test_from_class(self):
        fmt = F.from_class(Viking)
        assert fmt.decode({"name": "Ragnar"}) == Success(Viking(name="Ragnar"))
        assert fmt.encode(Viking(name="Ragnar")) == {"name": "Ragnar"}

    def test_bimap(self):
        fmt = F.string().bimap(PurePosixPath, str)
        assert fmt.decode("/tmp") == Success(PurePosixPath("/tmp"))
        assert fmt.encode(PurePosixPath("/tmp")) == "/tmp"

    def test_map_schema(self):
        fmt = F.string().map_schema(lambda s: s.with_title("Name"))
        assert fmt.json_schema() == {"type": "string", "title": "Name"}

    def test_of(self):
        fmt = F.of(D.integer(), E.integer())
        assert isinstance(fmt, Format)


class TestFormatsAsCoders:
    """Test that a format stands in for a decoder or an encoder."""

    def test_format_in_decoder_position(self):
        read = D.field("price", F.decimal())
        assert read.decode({"price": "1"}) == Success(Decimal("1.00"))
        assert read.schema == property_schema("price", NUMBER)

    def test_format_in_encoder_position(self):
        assert obj(entry("price", Decimal("1"), F.decimal())) == {"price": "1.00"}
        assert E.list_of(F.enum_of(Color)).encode([Color.red]) == ["red"]
