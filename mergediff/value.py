"""
Module to classify, compare and copy JSON values.

A JSON value is represented by the Python values the json module produces:
• null: None
• boolean: bool
• number: int or float (never bool)
• string: str
• array: list or tuple
• object: any Mapping with str keys
"""

import enum

from collections.abc import Mapping
from typing import Any


JSONValue = Any


class Kind(enum.Enum):
    """Variant of a JSON value."""

    NULL = "null"
    BOOL = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind(value: JSONValue) -> Kind:
    """Return the variant of a JSON value; raises TypeError if value is not a JSON value."""
    match value:
        case None:
            return Kind.NULL
        case bool():  # bool is subclass of int
            return Kind.BOOL
        case int() | float():
            return Kind.NUMBER
        case str():
            return Kind.STRING
        case list() | tuple():
            return Kind.ARRAY
        case Mapping():
            return Kind.OBJECT
    raise TypeError(f"not a JSON value: {type(value)}")


def is_object(value: JSONValue) -> bool:
    """Return if value is a JSON object."""
    return kind(value) is Kind.OBJECT


def equal(a: JSONValue, b: JSONValue) -> bool:
    """
    Return if two JSON values are deeply equal.

    Values of different kinds are never equal, so true is not 1. Numbers compare
    numerically, objects compare without regard to key order, and arrays compare
    element-wise.
    """
    k = kind(a)
    if k is not kind(b):
        return False
    match k:
        case Kind.OBJECT:
            return a.keys() == b.keys() and all(equal(a[key], b[key]) for key in a)
        case Kind.ARRAY:
            return len(a) == len(b) and all(equal(x, y) for x, y in zip(a, b))
    return a == b


def clone(value: JSONValue) -> JSONValue:
    """Return a newly constructed copy of a JSON value, with objects as dict and arrays as list."""
    match kind(value):
        case Kind.OBJECT:
            return {key: clone(item) for key, item in value.items()}
        case Kind.ARRAY:
            return [clone(item) for item in value]
    return value
