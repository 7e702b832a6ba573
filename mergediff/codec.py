"""
Module to encode Python values to their JSON representations.

A codec for a Python type is obtained through JSONCodec.get; codecs are cached by type.
The loads and dumps functions convert between JSON text and JSON values.
"""

import base64
import dataclasses
import json
import keyword
import logging
import typing

from collections.abc import Iterable, Mapping, Set
from contextlib import contextmanager, suppress
from datetime import date, datetime, timezone
from decimal import Decimal
from mergediff.types import is_subclass, is_union, literal_values, strip_annotations
from types import NoneType
from typing import Any, Generic, Literal, TypeVar, get_args, get_origin
from uuid import UUID


_logger = logging.getLogger(__name__)


JSONType = Any


# ----- errors -----


class CodecError(ValueError):
    """Base class for errors raised when a value cannot be encoded or decoded."""

    __slots__ = {"message", "path"}

    def __init__(self, message: str | None = None, path: list[str | int] | None = None):
        self.message = message
        self.path = path

    def __repr__(self):
        return f"{self.__class__.__name__}({self.message!r}, {self.path!r})"

    def __str__(self):
        return " ".join(str(s) for s in (self.message, self.path) if s is not None)

    @staticmethod
    @contextmanager
    def path_on_error(segment: str | int):
        """Context manager to prepend a segment to the error path if a CodecError is raised."""
        try:
            yield
        except CodecError as ce:
            ce.path = [segment, *(ce.path or [])]
            raise


class EncodeError(CodecError):
    """Error raised when a value cannot be encoded."""


class DecodeError(CodecError):
    """Error raised when JSON text cannot be decoded."""


@contextmanager
def _wrap(exception):
    try:
        yield
    except Exception as e:
        if isinstance(e, exception):
            raise
        raise exception(str(e)) from e


# ----- base -----


PT = TypeVar("PT")  # Python type hint


class JSONCodec(Generic[PT]):
    """
    Base class for codecs that encode Python values to JSON values.

    Each subclass declares the Python types it handles through its `handles` static method.
    """

    _cache = {}

    def __init__(self, python_type: Any):
        self.python_type = python_type

    @staticmethod
    def handles(python_type: Any) -> bool:
        """Return True if the codec handles the specified Python type."""
        raise NotImplementedError

    @classmethod
    def get(cls, python_type: Any) -> "JSONCodec[PT]":
        """Return a codec that handles the specified Python type."""
        with suppress(KeyError, TypeError):  # TypeError: unhashable type hint
            return JSONCodec._cache[python_type]
        for codec_class in JSONCodec.__subclasses__():
            if codec_class.handles(python_type):
                codec = codec_class(python_type)
                _logger.debug("created %s for %s", codec_class.__name__, python_type)
                with suppress(TypeError):
                    JSONCodec._cache[python_type] = codec
                return codec
        raise TypeError(f"no codec for {python_type}")

    def encode(self, value: PT) -> JSONType:
        """Encode value from Python type to JSON value."""
        raise NotImplementedError


def _check(value, cls):
    if not isinstance(value, cls):
        raise EncodeError(f"expecting {cls}; received {type(value)}")


# ----- scalars -----


class StrJSONCodec(JSONCodec[str]):
    """JSON codec for Unicode character strings."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        return is_subclass(strip_annotations(python_type), str)

    def encode(self, value: str) -> JSONType:
        _check(value, str)
        return value


class BytesJSONCodec(JSONCodec[bytes | bytearray]):
    """
    JSON codec for byte sequences. A byte sequence is represented in JSON as a
    base64-encoded string. Example: "SGVsbG8=".
    """

    @staticmethod
    def handles(python_type: Any) -> bool:
        return is_subclass(strip_annotations(python_type), bytes | bytearray)

    def encode(self, value: bytes | bytearray) -> JSONType:
        _check(value, bytes | bytearray)
        return base64.b64encode(value).decode()


class IntJSONCodec(JSONCodec[int]):
    """JSON codec for integers."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        python_type = strip_annotations(python_type)
        return is_subclass(python_type, int) and not is_subclass(python_type, bool)

    def encode(self, value: int) -> JSONType:
        if isinstance(value, bool):  # bool is subclass of int
            raise EncodeError("expecting int; received bool")
        _check(value, int)
        return value


class FloatJSONCodec(JSONCodec[float]):
    """JSON codec for floating point numbers."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        return is_subclass(strip_annotations(python_type), float)

    def encode(self, value: float) -> JSONType:
        _check(value, float)
        return value


class BoolJSONCodec(JSONCodec[bool]):
    """JSON codec for boolean values."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        return is_subclass(strip_annotations(python_type), bool)

    def encode(self, value: bool) -> JSONType:
        _check(value, bool)
        return value


class NoneTypeJSONCodec(JSONCodec[NoneType]):
    """JSON codec for None value."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        python_type = strip_annotations(python_type)
        return python_type is NoneType or python_type is None

    def encode(self, value: NoneType) -> JSONType:
        _check(value, NoneType)
        return None


class DecimalJSONCodec(JSONCodec[Decimal]):
    """
    JSON codec for Decimal numbers. Decimal numbers are represented in JSON as strings, to
    avoid the imprecision of floating point numbers. Example: "12.50".
    """

    @staticmethod
    def handles(python_type: Any) -> bool:
        return is_subclass(strip_annotations(python_type), Decimal)

    def encode(self, value: Decimal) -> JSONType:
        _check(value, Decimal)
        return str(value)


class DatetimeJSONCodec(JSONCodec[datetime]):
    """
    JSON codec for datetime, represented as an RFC 3339 string in the UTC timezone. Naive
    datetimes are interpreted as UTC. Example: "2020-04-07T12:34:56.789012Z".
    """

    @staticmethod
    def handles(python_type: Any) -> bool:
        return is_subclass(strip_annotations(python_type), datetime)

    def encode(self, value: datetime) -> JSONType:
        _check(value, datetime)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().removesuffix("+00:00") + "Z"


class DateJSONCodec(JSONCodec[date]):
    """JSON codec for dates, represented as RFC 3339 strings. Example: "2018-06-16"."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        python_type = strip_annotations(python_type)
        return is_subclass(python_type, date) and not is_subclass(python_type, datetime)

    def encode(self, value: date) -> JSONType:
        if isinstance(value, datetime):
            raise EncodeError("expecting date; received datetime")
        _check(value, date)
        return value.isoformat()


class UUIDJSONCodec(JSONCodec[UUID]):
    """JSON codec for UUID. Example: "0b3a2f4e-7a5c-4d2b-9e68-6f1c8d3b2a10"."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        return is_subclass(strip_annotations(python_type), UUID)

    def encode(self, value: UUID) -> JSONType:
        _check(value, UUID)
        return str(value)


# ----- structures -----


class TypedDictJSONCodec(JSONCodec[PT]):
    """JSON codec for TypedDict; keys without a value are omitted."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        return typing.is_typeddict(strip_annotations(python_type))

    def __init__(self, python_type: Any):
        super().__init__(python_type)
        self.hints = typing.get_type_hints(strip_annotations(python_type), include_extras=True)

    def encode(self, value: PT) -> JSONType:
        _check(value, Mapping)
        result = {}
        for key, hint in self.hints.items():
            if key in value:
                with CodecError.path_on_error(key):
                    result[key] = JSONCodec.get(hint).encode(value[key])
        return result


class TupleJSONCodec(JSONCodec[PT]):
    """JSON codec for tuples, represented as JSON arrays."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        python_type = strip_annotations(python_type)
        return is_subclass(get_origin(python_type) or python_type, tuple)

    def __init__(self, python_type: Any):
        super().__init__(python_type)
        args = get_args(strip_annotations(python_type)) or (Any, ...)
        if Ellipsis in args and (len(args) != 2 or args[0] is Ellipsis):
            raise TypeError(f"unexpected ellipsis in {python_type}")
        if args[-1] is Ellipsis:
            self.codecs = None
            self.vcodec = JSONCodec.get(args[0])
        else:
            self.codecs = tuple(JSONCodec.get(arg) for arg in args)

    def encode(self, value: PT) -> JSONType:
        _check(value, tuple)
        if self.codecs is None:
            codecs = (self.vcodec for _ in value)
        elif len(value) != len(self.codecs):
            raise EncodeError(f"expecting {len(self.codecs)} items; received {len(value)}")
        else:
            codecs = self.codecs
        result = []
        for index, (codec, item) in enumerate(zip(codecs, value)):
            with CodecError.path_on_error(index):
                result.append(codec.encode(item))
        return result


class MappingJSONCodec(JSONCodec[PT]):
    """JSON codec for mappings, represented as JSON objects; keys must encode to strings."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        python_type = strip_annotations(python_type)
        origin = get_origin(python_type) or python_type
        return is_subclass(origin, Mapping) and not typing.is_typeddict(python_type)

    def __init__(self, python_type: Any):
        super().__init__(python_type)
        args = get_args(strip_annotations(python_type)) or (Any, Any)
        if len(args) != 2:
            raise TypeError(f"expecting Mapping[KT, VT]; received {python_type}")
        self.key_codec = JSONCodec.get(args[0])
        self.value_codec = JSONCodec.get(args[1])

    def encode(self, value: PT) -> JSONType:
        _check(value, Mapping)
        result = {}
        for k, v in value.items():
            key = self.key_codec.encode(k)
            if not isinstance(key, str):
                raise EncodeError(f"object key must encode to string; received {type(key)}")
            with CodecError.path_on_error(key):
                result[key] = self.value_codec.encode(v)
        return result


class IterableJSONCodec(JSONCodec[PT]):
    """JSON codec for iterables, represented as JSON arrays; sets are encoded sorted."""

    _AVOID = str | bytes | bytearray | Mapping | tuple

    @staticmethod
    def handles(python_type: Any) -> bool:
        python_type = strip_annotations(python_type)
        origin = get_origin(python_type) or python_type
        return is_subclass(origin, Iterable) and not is_subclass(
            origin, IterableJSONCodec._AVOID
        )

    def __init__(self, python_type: Any):
        super().__init__(python_type)
        python_type = strip_annotations(python_type)
        args = get_args(python_type) or (Any,)
        if len(args) != 1:
            raise TypeError(f"expecting Iterable[T]; received {python_type}")
        self.codec = JSONCodec.get(args[0])

    def encode(self, value: PT) -> JSONType:
        if not isinstance(value, Iterable) or isinstance(value, IterableJSONCodec._AVOID):
            raise EncodeError(f"expecting Iterable; received {type(value)}")
        if isinstance(value, Set):
            with _wrap(EncodeError):
                value = sorted(value)
        result = []
        for index, item in enumerate(value):
            with CodecError.path_on_error(index):
                result.append(self.codec.encode(item))
        return result


class DataclassJSONCodec(JSONCodec[PT]):
    """JSON codec for dataclasses, represented as JSON objects; None fields are omitted."""

    # keywords have _ suffix in dataclass fields (e.g. "in_", "for_", ...)
    _dc_kw = {k + "_": k for k in keyword.kwlist}

    @staticmethod
    def handles(python_type: Any) -> bool:
        python_type = strip_annotations(python_type)
        return isinstance(python_type, type) and dataclasses.is_dataclass(python_type)

    def __init__(self, python_type: Any):
        super().__init__(python_type)
        self.raw_type = strip_annotations(python_type)
        self.hints = typing.get_type_hints(self.raw_type, include_extras=True)

    def encode(self, value: PT) -> JSONType:
        _check(value, self.raw_type)
        result = {}
        for field in dataclasses.fields(self.raw_type):
            v = getattr(value, field.name, None)
            if v is not None:
                key = DataclassJSONCodec._dc_kw.get(field.name, field.name)
                with CodecError.path_on_error(field.name):
                    result[key] = JSONCodec.get(self.hints[field.name]).encode(v)
        return result


# ----- special forms -----


class UnionJSONCodec(JSONCodec[PT]):
    """JSON codec for Union types; the first member codec that succeeds is used."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        return is_union(python_type)

    def __init__(self, python_type: Any):
        super().__init__(python_type)
        self.codecs = tuple(JSONCodec.get(arg) for arg in get_args(strip_annotations(python_type)))

    def encode(self, value: PT) -> JSONType:
        for codec in self.codecs:
            with suppress(EncodeError):
                return codec.encode(value)
        raise EncodeError(f"no member of {self.python_type} encodes {type(value)}")


class LiteralJSONCodec(JSONCodec[PT]):
    """JSON codec for Literal types; a value must match a member in both type and value."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        return get_origin(strip_annotations(python_type)) is Literal

    def __init__(self, python_type: Any):
        super().__init__(python_type)
        self.values = literal_values(python_type)

    def encode(self, value: PT) -> JSONType:
        if not any(v == value and type(v) is type(value) for v in self.values):
            raise EncodeError(f"expecting one of {self.values}; received {value!r}")
        return JSONCodec.get(type(value)).encode(value)


class AnyJSONCodec(JSONCodec[Any]):
    """JSON codec for Any; values are encoded using the codec for their runtime type."""

    @staticmethod
    def handles(python_type: Any) -> bool:
        return strip_annotations(python_type) is Any

    def encode(self, value: Any) -> JSONType:
        return JSONCodec.get(type(value)).encode(value)


# ----- text -----


def _reject_constant(name):
    raise DecodeError(f"invalid JSON constant: {name}")


def loads(text: str | bytes | bytearray) -> JSONType:
    """Parse JSON text into a JSON value."""
    if not isinstance(text, str | bytes | bytearray):
        raise DecodeError(f"expecting JSON text; received {type(text)}")
    with _wrap(DecodeError):
        return json.loads(text, parse_constant=_reject_constant)


def dumps(value: JSONType, *, indent: int | None = None, sort_keys: bool = False) -> str:
    """Serialize a JSON value to JSON text."""
    with _wrap(EncodeError):
        return json.dumps(
            value, indent=indent, sort_keys=sort_keys, ensure_ascii=False, allow_nan=False
        )
