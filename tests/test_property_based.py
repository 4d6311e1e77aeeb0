"""Property-based tests for decoding laws."""

import string

from hypothesis import given
from hypothesis import strategies as st

from fjson import Success
from fjson import decoders as D
from fjson import encoders as E
from fjson import formats as F
from fjson.tree import parse, stringify

field_names = st.text(
    alphabet=string.ascii_letters,
    min_size=1,
    max_size=8,
)

json_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.floats(allow_nan=False, allow_infinity=False),
    st.text(max_size=20),
)

json_trees = st.recursive(
    json_scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(field_names, children, max_size=4),
    ),
    max_leaves=20,
)


class TestDecodingLaws:
    """Invariants that hold for every input tree."""

    @given(json_trees)
    def test_decoders_never_raise(self, tree):
        read = D.record(
            dict,
            name=D.string("name"),
            tags=D.list_of(D.string(), "tags"),
            age=D.optional("age", D.integer()),
        )
        result = read.decode(tree)
        assert result.is_success() or len(result.errors) >= 1

    @given(st.lists(st.one_of(st.text(max_size=5), st.integers()), max_size=10))
    def test_list_errors_follow_bad_indices(self, values):
        result = D.list_of(D.string(), "items").decode({"items": values})
        bad = [f"items[{i}]" for i, v in enumerate(values) if not isinstance(v, str)]
        if bad:
            assert [e.path for e in result.errors] == bad
        else:
            assert result == Success(values)

    @given(st.dictionaries(field_names, st.integers(), min_size=1, max_size=6))
    def test_and_accumulates_every_error(self, tree):
        names = sorted(tree)
        read = D.value(())
        for name in names:
            read = read.and_(D.string(name), lambda acc, v: (*acc, v))
        assert [e.path for e in read.decode(tree).errors] == names

    @given(st.lists(st.text(max_size=10), max_size=5))
    def test_list_format_round_trip_through_text(self, values):
        fmt = F.list_of(F.string())
        assert fmt.decode(parse(stringify(fmt.encode(values)))) == Success(values)

    @given(st.decimals(allow_nan=False, allow_infinity=False, places=2, min_value=-10**6, max_value=10**6))
    def test_decimal_text_round_trip(self, value):
        assert D.decimal().decode(E.decimal().encode(value)) == Success(value)
