"""
JSON Merge Patch generation module.

A JSON Merge Patch (RFC 7386) describes changes to a JSON document: object members set to null
are removed, other members are merged recursively, and any non-object value replaces the
document wholesale.
"""

import logging

from mergediff.codec import JSONCodec, dumps, loads
from mergediff.validation import MinValue, validate_arguments
from mergediff.value import JSONValue, clone, equal, is_object
from typing import Annotated, Any


_logger = logging.getLogger(__name__)


def _diff_objects(original: JSONValue, target: JSONValue) -> JSONValue:
    patch = {}
    for key, value in original.items():
        if key not in target:
            patch[key] = None
        elif is_object(value) and is_object(target[key]):
            if member := _diff_objects(value, target[key]):  # recursive
                patch[key] = member
        elif not equal(value, target[key]):
            patch[key] = clone(target[key])
    for key, value in target.items():
        if key not in original:
            patch[key] = clone(value)
    return patch


def generate_patch(original: JSONValue, target: JSONValue) -> JSONValue:
    """
    Return a JSON Merge Patch document per RFC 7386 that transforms an original JSON value
    into a target JSON value.

    Parameters:
    • original: JSON value to be patched
    • target: JSON value that the patch yields when applied to original

    If both values are objects, the patch is an object containing null for each member
    removed, the recursive patch for each member changed, and the value of each member added;
    unchanged members are omitted. Otherwise, the patch is the target value, or an empty
    object if the values are equal. An empty object patch means that there is no difference.

    Members of the patch appear in the order of the original, followed by members added in
    the order of the target. Neither value is modified; the returned value shares no
    containers with them.

    A member whose target value is null is indistinguishable from a removed member.
    """
    if not (is_object(original) and is_object(target)):
        return {} if equal(original, target) else clone(target)
    return _diff_objects(original, target)


def json_merge_diff(*, old: Any, new: Any, type: Any = Any) -> JSONValue:
    """
    Return a JSON Merge Patch document per RFC 7386, the result of comparing the JSON
    representations of specified old and new values.

    Parameters:
    • old: value to be compared
    • new: value to compare against old
    • type: type of values to be compared; the default encodes each by its runtime type
    """
    codec = JSONCodec.get(type)
    result = generate_patch(codec.encode(old), codec.encode(new))
    if _logger.isEnabledFor(logging.DEBUG):
        _logger.debug("merge diff: type=%s patch=%s", type, result)
    return result


@validate_arguments
def diff_text(
    original: str | bytes | bytearray,
    target: str | bytes | bytearray,
    *,
    indent: Annotated[int, MinValue(0)] | None = None,
    sort_keys: bool = False,
) -> str:
    """
    Return the JSON text of a JSON Merge Patch document per RFC 7386, the result of comparing
    two JSON text documents.

    Parameters:
    • original: JSON text of the document to be patched
    • target: JSON text of the document that the patch yields
    • indent: number of spaces to indent nested structures, or None for compact output
    • sort_keys: sort object members by key in the output

    Raises DecodeError if either document is not valid JSON text.
    """
    if _logger.isEnabledFor(logging.DEBUG):
        _logger.debug("text diff: original=%d target=%d", len(original), len(target))
    patch = generate_patch(loads(original), loads(target))
    return dumps(patch, indent=indent, sort_keys=sort_keys)
