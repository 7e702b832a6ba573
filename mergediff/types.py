"""Module to inspect types and type hints."""

import types
import typing

from typing import Any


def split_annotated(type_hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Return a tuple separating the python type and its annotations."""
    if typing.get_origin(type_hint) is not typing.Annotated:
        return type_hint, ()
    args = typing.get_args(type_hint)
    return args[0], args[1:]


def strip_annotations(type_hint: Any) -> Any:
    """Return the python type of a type hint, without any annotations."""
    return split_annotated(type_hint)[0]


def is_union(type_hint: Any) -> bool:
    """Return if the type hint is a Union[...] or X | Y type."""
    return typing.get_origin(strip_annotations(type_hint)) in {types.UnionType, typing.Union}


def is_subclass(cls: Any, class_or_tuple: type | tuple[type, ...]) -> bool:
    """An issubclass that returns False rather than raising for non-class arguments."""
    try:
        return issubclass(cls, class_or_tuple)
    except TypeError:
        return False


def is_instance(obj: Any, class_or_tuple: type | tuple[type, ...]) -> bool:
    """An isinstance that returns False rather than raising for non-class arguments."""
    try:
        return isinstance(obj, class_or_tuple)
    except TypeError:
        return False


def literal_values(literal_type_hint: Any) -> tuple[Any, ...]:
    """
    Return the values in a Literal type, in declared order. Values are distinct by type as
    well as value, so Literal[1, True] yields both 1 and True.
    """
    seen = set()
    result = []
    for value in typing.get_args(strip_annotations(literal_type_hint)):
        if (type(value), value) not in seen:
            seen.add((type(value), value))
            result.append(value)
    return tuple(result)
