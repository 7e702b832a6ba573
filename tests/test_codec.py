import pytest

from dataclasses import dataclass, field, make_dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from mergediff.codec import CodecError, DecodeError, EncodeError, JSONCodec, dumps, loads
from typing import Annotated, Any, Literal, Optional, TypedDict
from uuid import UUID


def _encode(python_type, value):
    return JSONCodec.get(python_type).encode(value)


# ----- scalars -----


def test_str():
    assert _encode(str, "foo") == "foo"


def test_str_error():
    with pytest.raises(EncodeError):
        _encode(str, 1)


def test_bytes():
    assert _encode(bytes, b"Hello") == "SGVsbG8="
    assert _encode(bytearray, bytearray(b"Hello")) == "SGVsbG8="


def test_int():
    assert _encode(int, 123) == 123


def test_int_bool_error():
    with pytest.raises(EncodeError):
        _encode(int, True)


def test_float():
    assert _encode(float, 1.5) == 1.5


def test_float_error():
    with pytest.raises(EncodeError):
        _encode(float, "1.5")


def test_bool():
    assert _encode(bool, False) is False


def test_bool_error():
    with pytest.raises(EncodeError):
        _encode(bool, 0)


def test_none():
    assert _encode(type(None), None) is None
    with pytest.raises(EncodeError):
        _encode(type(None), 0)


def test_decimal():
    assert _encode(Decimal, Decimal("12.50")) == "12.50"


def test_date():
    assert _encode(date, date(2018, 6, 16)) == "2018-06-16"


def test_date_rejects_datetime():
    with pytest.raises(EncodeError):
        _encode(date, datetime(2018, 6, 16))


def test_datetime():
    value = datetime(2020, 4, 7, 12, 34, 56, 789012, tzinfo=timezone.utc)
    assert _encode(datetime, value) == "2020-04-07T12:34:56.789012Z"


def test_datetime_offset():
    value = datetime(2020, 4, 7, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert _encode(datetime, value) == "2020-04-07T12:00:00Z"


def test_datetime_naive():
    assert _encode(datetime, datetime(2020, 4, 7)) == "2020-04-07T00:00:00Z"


def test_uuid():
    value = UUID("0b3a2f4e-7a5c-4d2b-9e68-6f1c8d3b2a10")
    assert _encode(UUID, value) == "0b3a2f4e-7a5c-4d2b-9e68-6f1c8d3b2a10"


def test_annotated():
    assert _encode(Annotated[int, "meta"], 1) == 1


# ----- structures -----


def test_typeddict():
    TD = TypedDict("TD", {"a": str, "b": int})
    assert _encode(TD, {"a": "x", "b": 1}) == {"a": "x", "b": 1}


def test_typeddict_partial():
    class TD(TypedDict, total=False):
        a: str
        b: float

    assert _encode(TD, {"b": 1.5}) == {"b": 1.5}


def test_tuple_fixed():
    assert _encode(tuple[int, str], (1, "a")) == [1, "a"]


def test_tuple_variable():
    assert _encode(tuple[int, ...], (1, 2, 3)) == [1, 2, 3]
    assert _encode(tuple[int, ...], ()) == []


def test_tuple_length_error():
    with pytest.raises(EncodeError):
        _encode(tuple[int, str], (1,))


def test_tuple_error_path():
    with pytest.raises(EncodeError) as exc_info:
        _encode(tuple[int, ...], (1, 2, "3"))
    assert exc_info.value.path == [2]


def test_mapping():
    assert _encode(dict[str, int], {"a": 1, "b": 2}) == {"a": 1, "b": 2}


def test_mapping_key_error():
    with pytest.raises(EncodeError):
        _encode(dict[int, int], {1: 1})


def test_mapping_error_path():
    with pytest.raises(EncodeError) as exc_info:
        _encode(dict[str, dict[str, int]], {"a": {"b": "c"}})
    assert exc_info.value.path == ["a", "b"]


def test_list():
    assert _encode(list[int], [1, 2]) == [1, 2]


def test_set_encodes_sorted():
    assert _encode(set[str], {"c", "a", "b"}) == ["a", "b", "c"]
    assert _encode(frozenset[int], frozenset({3, 1, 2})) == [1, 2, 3]


def test_list_error_path():
    with pytest.raises(EncodeError) as exc_info:
        _encode(list[int], [1, "2"])
    assert exc_info.value.path == [1]


def test_iterable_rejects_str():
    with pytest.raises(EncodeError):
        _encode(list[str], "abc")


def test_dataclass():
    DC = make_dataclass("DC", (("a", str), ("b", Optional[int], field(default=None))))
    assert _encode(DC, DC(a="x", b=1)) == {"a": "x", "b": 1}
    assert _encode(DC, DC(a="x")) == {"a": "x"}


def test_dataclass_keyword_field():
    @dataclass
    class DC:
        for_: str

    assert _encode(DC, DC(for_="x")) == {"for": "x"}


def test_dataclass_type_error():
    DC1 = make_dataclass("DC1", (("a", str),))
    DC2 = make_dataclass("DC2", (("a", str),))
    with pytest.raises(EncodeError):
        _encode(DC1, DC2(a="x"))


def test_dataclass_error_path():
    DC2 = make_dataclass("DC2", (("b", int),))
    DC1 = make_dataclass("DC1", (("a", DC2),))
    with pytest.raises(EncodeError) as exc_info:
        _encode(DC1, DC1(a=DC2(b="x")))
    assert exc_info.value.path == ["a", "b"]


# ----- special forms -----


def test_union():
    assert _encode(int | str, 1) == 1
    assert _encode(int | str, "a") == "a"


def test_union_error():
    with pytest.raises(EncodeError):
        _encode(int | str, 1.5)


def test_optional():
    assert _encode(Optional[int], None) is None
    assert _encode(Optional[int], 1) == 1


def test_literal():
    assert _encode(Literal["a", 1], "a") == "a"
    assert _encode(Literal["a", 1], 1) == 1


def test_literal_error():
    with pytest.raises(EncodeError):
        _encode(Literal[1], True)
    with pytest.raises(EncodeError):
        _encode(Literal["a"], "b")


def test_literal_bool_and_int_members():
    assert _encode(Literal[1, True], 1) == 1
    assert _encode(Literal[1, True], True) is True
    with pytest.raises(EncodeError):
        _encode(Literal[1, True], 1.0)


def test_any():
    assert _encode(Any, {"a": [1, date(2020, 1, 1)]}) == {"a": [1, "2020-01-01"]}


def test_no_codec():
    with pytest.raises(TypeError):
        JSONCodec.get(object)


def test_codec_cached():
    assert JSONCodec.get(list[int]) is JSONCodec.get(list[int])


# ----- text -----


def test_loads():
    assert loads('{"a": [1, 2.5, null, true]}') == {"a": [1, 2.5, None, True]}
    assert loads(b'"x"') == "x"


def test_loads_error():
    with pytest.raises(DecodeError):
        loads("{")
    with pytest.raises(DecodeError):
        loads(123)


def test_loads_constants():
    for text in ("NaN", "Infinity", "[-Infinity]"):
        with pytest.raises(DecodeError):
            loads(text)


def test_dumps():
    assert dumps({"a": "é", "b": None}) == '{"a": "é", "b": null}'


def test_dumps_error():
    with pytest.raises(EncodeError):
        dumps(float("nan"))
    with pytest.raises(EncodeError):
        dumps({"a": object()})


def test_codec_error_str():
    error = CodecError("bad value", ["a", 1])
    assert str(error) == "bad value ['a', 1]"
    assert repr(error) == "CodecError('bad value', ['a', 1])"
