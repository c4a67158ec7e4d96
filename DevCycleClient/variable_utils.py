"""
Helpers that reconcile caller-supplied variable defaults with the types the
bucketing API returns.

The API speaks a single numeric type (double), so every integer or
non-double real default is widened to ``float`` before its coarse type is
inferred or compared against an evaluated value.
"""

import numbers
from typing import Any

from DevCycleClient.exceptions import InvalidDefaultValueError

VARIABLE_TYPE_BOOLEAN = "Boolean"
VARIABLE_TYPE_NUMBER = "Number"
VARIABLE_TYPE_STRING = "String"
VARIABLE_TYPE_JSON = "JSON"


def convert_default_value_type(value: Any) -> Any:
    """
    Widens any integer or non-double real number to ``float``.

    Strings, booleans, mappings, floats and every other type are returned
    unchanged. Integers too large for a float are returned unchanged as well.

    :param value: Caller supplied default value.
    :return: The value, with numbers in their canonical float form.
    """
    # bool is an Integral subclass but a distinct variable type
    if isinstance(value, (bool, float)):
        return value

    if isinstance(value, numbers.Real):
        try:
            return float(value)
        except OverflowError:
            return value

    return value


def _is_json_object(value: Any) -> bool:
    return isinstance(value, dict) and all(isinstance(k, str) for k in value)


def variable_type_from_value(key: str, value: Any, allow_none: bool) -> str:
    """
    Infers the coarse variable type of a default value.

    :param key: Variable key, reported in the error when the value is invalid.
    :param value: Default value, normalized with ``convert_default_value_type`` first.
    :param allow_none: If true, ``None`` is accepted and yields an empty type.
    :return: One of "Number", "String", "Boolean", "JSON" or "" for an allowed ``None``.
    :raises InvalidDefaultValueError: If the value has no supported type.
    """
    value = convert_default_value_type(value)

    if isinstance(value, bool):
        return VARIABLE_TYPE_BOOLEAN
    if isinstance(value, float):
        return VARIABLE_TYPE_NUMBER
    if isinstance(value, str):
        return VARIABLE_TYPE_STRING
    if _is_json_object(value):
        return VARIABLE_TYPE_JSON
    if value is None and allow_none:
        return ""

    raise InvalidDefaultValueError(key)


def compare_types(value1: Any, value2: Any) -> bool:
    """
    True if both values have exactly the same concrete type.

    This compares type identity only: ``compare_types(3, 3.0)`` is false and
    ``compare_types("a", "b")`` is true.
    """
    return type(value1) is type(value2)
