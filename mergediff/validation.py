"""Module to validate values and function arguments against type hints."""

import inspect
import typing
import wrapt

from collections.abc import Callable
from contextlib import contextmanager
from mergediff.types import is_instance, is_union, split_annotated
from types import NoneType
from typing import Any


class ValidationError(ValueError):
    """Error raised when validation fails."""

    __slots__ = {"message", "path"}

    def __init__(self, message: str | None = None, path: list[str | int] | None = None):
        self.message = message
        self.path = path

    def __repr__(self):
        return f"{self.__class__.__name__}({self.message!r}, {self.path!r})"

    def __str__(self):
        result = []
        if self.message is not None:
            result.append(str(self.message))
        if self.path:
            result.append(f"({'.'.join(str(s) for s in self.path)})")
        return " ".join(result)

    @staticmethod
    @contextmanager
    def path_on_error(segment: str | int):
        """Context manager to prepend a segment to the path of a raised ValidationError."""
        try:
            yield
        except ValidationError as ve:
            ve.path = [segment, *(ve.path or [])]
            raise


class Validator:
    """Base class for type annotation that performs validation."""

    def validate(self, value: Any) -> None:
        raise NotImplementedError


class MinValue(Validator):
    """Type annotation that validates a value has a minimum value."""

    __slots__ = {"value"}

    def __init__(self, value: Any):
        self.value = value

    def validate(self, value: Any) -> None:
        if value < self.value:
            raise ValidationError(f"minimum value: {self.value}")

    def __repr__(self):
        return f"MinValue({self.value!r})"


def _validate_union(value, args):
    if value is None and NoneType in args:
        return
    for arg in args:
        try:
            return validate(value, arg)
        except ValidationError:
            continue
    raise ValidationError(f"expecting one of {args}; received {type(value)}")


def _validate_literal(value, args):
    for arg in args:
        if arg == value and type(arg) is type(value):
            return
    raise ValidationError(f"expecting one of {args}; received {value!r}")


def validate(value: Any, type_hint: Any) -> None:
    """
    Validate a value against a type hint.

    Only the outermost type is checked; items of containers are not validated. Validator
    annotations in an Annotated type hint are applied once the type check passes.
    """

    python_type, annotations = split_annotated(type_hint)

    if python_type is Any:
        pass
    elif python_type is None or python_type is NoneType:
        if value is not None:
            raise ValidationError(f"expecting None; received {type(value)}")
    elif is_union(python_type):
        return _validate_union(value, typing.get_args(python_type))
    elif typing.get_origin(python_type) is typing.Literal:
        return _validate_literal(value, typing.get_args(python_type))
    else:
        origin = typing.get_origin(python_type) or python_type
        if not is_instance(value, origin):
            name = getattr(origin, "__name__", origin)
            raise ValidationError(f"expecting {name}; received {type(value)}")
        if origin is int and isinstance(value, bool):  # bool is subclass of int
            raise ValidationError("expecting int; received bool")

    for annotation in annotations:
        if isinstance(annotation, Validator):
            annotation.validate(value)


def validate_arguments(callable: Callable):
    """Decorate a function to validate its arguments using type annotations."""

    sig = inspect.signature(callable)
    hints = None

    def _validate(instance, args, kwargs):
        nonlocal hints
        if hints is None:
            hints = typing.get_type_hints(callable, include_extras=True)
        if instance is not None:
            args = (instance, *args)
        bound = sig.bind(*args, **kwargs)
        for name, value in bound.arguments.items():
            if hint := hints.get(name):
                with ValidationError.path_on_error(name):
                    validate(value, hint)

    @wrapt.decorator
    def decorator(wrapped, instance, args, kwargs):
        _validate(instance, args, kwargs)
        return wrapped(*args, **kwargs)

    return decorator(callable)
