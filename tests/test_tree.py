"""Tests for tree construction, printing and parsing."""

from datetime import date

import pytest

from fjson import Success
from fjson import decoders as D
from fjson import encoders as E
from fjson.tree import (
    arr,
    entry,
    from_json,
    merge,
    new_array,
    new_object,
    obj,
    parse,
    pretty_print,
    stringify,
    to_json,
)
from tests.models import Color, Viking


class TestBuild:
    """Test objects and arrays built from entries."""

    def test_obj(self):
        tree = obj(
            entry("name", "Ragnar Lodbrok"),
            entry("city", None),
            entry("weight", 80),
            entry("birthDate", date(766, 1, 1), E.local_date()),
            entry("sons", arr(obj(entry("name", "Bjorn")), obj(entry("name", "Ivar")))),
        )
        assert tree == {
            "name": "Ragnar Lodbrok",
            "weight": 80,
            "birthDate": "0766-01-01",
            "sons": [{"name": "Bjorn"}, {"name": "Ivar"}],
        }

    def test_enum_entry(self):
        assert obj(entry("color", Color.red)) == {"color": "red"}

    def test_collection_entry_with_encoder(self):
        assert obj(entry("tags", ["a"], E.list_of(E.string()))) == {"tags": ["a"]}

    def test_obj_with_base_does_not_mutate(self):
        base = {"a": 1}
        assert obj(entry("b", 2), base=base) == {"a": 1, "b": 2}
        assert base == {"a": 1}

    def test_merge(self):
        assert merge({"a": 1, "b": 1}, {"b": 2, "c": 2}) == {"a": 1, "b": 1, "c": 2}

    def test_empty(self):
        assert new_object() == {}
        assert new_array() == []
        assert arr() == []


class TestText:
    """Test stringify, pretty_print and parse."""

    def test_stringify(self):
        assert stringify({"a": [1, "é"]}) == '{"a":[1,"é"]}'

    def test_pretty_print(self):
        assert pretty_print({"a": 1}) == '{\n  "a": 1\n}'

    def test_parse(self):
        assert parse('{"a": [1, null]}') == {"a": [1, None]}

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            parse("{nope")


class TestConversion:
    """Test to_json and from_json."""

    def test_to_json_with_encoder(self):
        assert to_json(date(2019, 2, 15), E.local_date("%Y%m%d")) == "20190215"

    def test_to_json_with_mapper(self):
        assert to_json(Viking(name="Ragnar")) == {"name": "Ragnar"}

    def test_from_json_with_decoder(self):
        assert from_json({"name": "x"}, D.string("name")) == Success("x")

    def test_from_json_with_class(self):
        assert from_json({"name": "lodbrok"}, Viking).get().name == "lodbrok"

    def test_from_json_with_parametrised_type(self):
        trees = [{"name": "lodbrok"}, {"name": "haraldson"}]
        assert [v.name for v in from_json(trees, list[Viking]).get()] == ["lodbrok", "haraldson"]
